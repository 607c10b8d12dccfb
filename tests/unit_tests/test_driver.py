import random

from klondike.config import Settings
from klondike.driver import SessionDriver
from klondike.session import GameSession

FAST = Settings(bot_interval_ms=100, deal_interval_ms=10, stuck_restart_delay_ms=500, celebration_ms=300, win_restart_delay_ms=200)


def _dealt_cards(session):
    return sum(len(p) for p in session.tableau)


def _make(seed=11, settings=FAST):
    session = GameSession(random.Random(seed))
    driver = SessionDriver(session, settings)
    return session, driver


def test_deal_places_one_card_per_interval():
    session, driver = _make()
    session.new_game()
    driver.update(0)
    assert _dealt_cards(session) == 1
    driver.update(5)
    assert _dealt_cards(session) == 1
    driver.update(10)
    assert _dealt_cards(session) == 2
    t = 10
    while session.dealing:
        t += 10
        driver.update(t)
    assert _dealt_cards(session) == 28
    assert t == 270


def test_bot_ticks_on_its_interval():
    session, driver = _make()
    session.new_game(animate=False)
    session.start_bot()
    driver.update(0)
    moves = session.moves
    driver.update(50)
    assert session.moves == moves
    driver.update(100)
    assert session.moves == moves + 1


def test_bot_timer_waits_while_inactive():
    session, driver = _make()
    session.new_game(animate=False)
    driver.update(1000)
    session.start_bot()
    driver.update(1050)
    assert session.moves == 0
    driver.update(1100)
    assert session.moves == 1


def test_start_bot_after_deal_resumes_on_completion():
    session, driver = _make()
    session.new_game()
    driver.start_bot_after_deal()
    assert not session.bot_active
    session.deal_all()
    assert session.bot_active


def test_stuck_schedules_restart_without_resuming(layout, cards):
    session = GameSession(random.Random(4), animate_deal=False)
    driver = SessionDriver(session, FAST)
    layout(session, tableau=[cards("9H")])
    session.start_bot()
    driver.update(1000)
    assert session.restart_pending
    assert driver.restart_scheduled
    driver.update(1499)
    assert session.restart_pending
    driver.update(1500)
    assert not session.restart_pending
    assert session.games_started == 1
    assert not session.bot_active


def test_bot_win_schedules_restart_and_resumes(layout, cards, suit_run):
    session = GameSession(random.Random(4))
    driver = SessionDriver(session, FAST)
    layout(
        session,
        tableau=[cards("KS")],
        foundations={"hearts": suit_run("H"), "diamonds": suit_run("D"), "clubs": suit_run("C"), "spades": suit_run("S", 12)},
    )
    session.start_bot()
    driver.update(0)
    driver.update(100)
    assert session.won
    assert driver.restart_scheduled
    driver.update(599)
    assert session.won
    driver.update(600)
    assert session.dealing
    t = 600
    while session.dealing:
        t += 10
        driver.update(t)
    assert session.bot_active


def test_manual_win_does_not_schedule_restart(layout, cards, suit_run):
    session = GameSession(random.Random(4))
    driver = SessionDriver(session, FAST)
    layout(
        session,
        waste=cards("KS"),
        foundations={"hearts": suit_run("H"), "diamonds": suit_run("D"), "clubs": suit_run("C"), "spades": suit_run("S", 12)},
    )
    assert session.play_waste_card()
    assert session.won and not session.won_by_bot
    assert not driver.restart_scheduled


def test_stop_halts_everything():
    session, driver = _make()
    session.new_game()
    driver.schedule_restart(0)
    driver.stop()
    driver.update(5000)
    assert _dealt_cards(session) == 0
    assert not driver.restart_scheduled
