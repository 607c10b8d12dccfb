import random

import pytest

from klondike.cards import RANK_LABELS, parse_card
from klondike.session import GameSession


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class IdentityRandom(random.Random):
    """Every Fisher-Yates swap is a no-op, so the deck keeps build order."""

    def randint(self, a, b):
        return b


class Recorder:
    """Session listener that records every event it receives."""

    def __init__(self):
        self.events = []

    def on_state_changed(self):
        self.events.append(("state",))

    def on_win(self, score, moves, elapsed_seconds):
        self.events.append(("win", score, moves, elapsed_seconds))

    def on_stuck(self):
        self.events.append(("stuck",))

    def on_deal_complete(self):
        self.events.append(("deal_complete",))

    def on_new_game(self):
        self.events.append(("new_game",))

    def count(self, name):
        return sum(1 for e in self.events if e[0] == name)


def _cards(*texts, face_up=True):
    return [parse_card(t, face_up=face_up) for t in texts]


def _suit_run(letter, upto=13):
    return _cards(*[f"{label}{letter}" for label in RANK_LABELS[:upto]])


def _layout(session, tableau=(), waste=(), stock=(), foundations=None):
    """Lay out a hand-made position on a session that has not dealt."""
    for i, pile_cards in enumerate(tableau):
        session.tableau[i].extend(list(pile_cards))
    session.waste.receive(list(waste))
    session.stock.refill(list(stock))
    for suit, pile_cards in (foundations or {}).items():
        for c in pile_cards:
            session.foundations[suit].push(c)
    return session


@pytest.fixture
def cards():
    return _cards


@pytest.fixture
def suit_run():
    return _suit_run


@pytest.fixture
def layout():
    return _layout


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def identity_rng():
    return IdentityRandom()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def session(clock):
    return GameSession(random.Random(7), clock=clock, animate_deal=False)
