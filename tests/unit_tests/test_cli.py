import random

from klondike import cli


def test_run_games_respects_tick_limit():
    results = cli.run_games(2, seed=8, max_ticks=40)
    assert len(results) == 2
    for r in results:
        assert r.ticks <= 40
        assert r.score == r.moves * 10


def test_run_game_is_reproducible():
    a = cli.run_game(random.Random(31), max_ticks=300)
    b = cli.run_game(random.Random(31), max_ticks=300)
    assert a == b


def test_main_prints_summary(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("APPDATA", str(tmp_path))
    cli.main(["--games", "1", "--seed", "2", "--max-ticks", "25", "--log-level", "warning"])
    out = capsys.readouterr().out
    assert "Game 1:" in out
    assert "Won " in out and " of 1" in out
