from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from klondike.config import load_settings
from klondike.session import GameSession, SessionListener


@dataclass
class GameResult:
    won: bool
    moves: int
    score: int
    forced_restarts: int
    ticks: int


class _RestartCounter(SessionListener):
    def __init__(self):
        self.new_games = 0

    def on_new_game(self) -> None:
        self.new_games += 1


def run_game(rng: random.Random, max_ticks: int = 5000) -> GameResult:
    """Let the bot play one deal, stepping the session directly.

    A forced restart from stock cycling deals a fresh game inside the same
    session; those deals count toward ``forced_restarts`` and the result
    describes the last deal played.
    """
    session = GameSession(rng, animate_deal=False)
    counter = _RestartCounter()
    session.add_listener(counter)
    session.new_game()
    session.start_bot()
    ticks = 0
    while ticks < max_ticks and session.bot_active:
        session.bot_tick()
        ticks += 1
    return GameResult(
        won=session.won,
        moves=session.moves,
        score=session.score,
        forced_restarts=counter.new_games - 1,
        ticks=ticks,
    )


def run_games(games: int, seed: Optional[int] = None, max_ticks: int = 5000) -> List[GameResult]:
    rng = random.Random(seed)
    return [run_game(rng, max_ticks=max_ticks) for _ in range(games)]


def main(argv: Optional[List[str]] = None) -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Let the Klondike bot play without a window.")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play.")
    parser.add_argument("--seed", type=int, default=settings.seed, help="Random seed for reproducible deals.")
    parser.add_argument("--max-ticks", type=int, default=5000, help="Bot actions allowed per game.")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    results = run_games(args.games, seed=args.seed, max_ticks=args.max_ticks)
    for n, r in enumerate(results, start=1):
        outcome = "won" if r.won else "not won"
        print(f"Game {n}: {outcome} after {r.moves} moves, score {r.score}, forced restarts {r.forced_restarts}")
    wins = sum(1 for r in results if r.won)
    print(f"Won {wins} of {len(results)}")


if __name__ == "__main__":
    main()
