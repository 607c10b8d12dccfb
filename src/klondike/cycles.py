"""Stock-cycle tracking for the bot.

A cycle ends each time the exhausted stock is rebuilt from the waste. If the
bot goes ``limit`` consecutive cycles without a productive (foundation or
tableau) move, the deal is considered hopeless and a new game is forced.
"""

from __future__ import annotations

from dataclasses import dataclass

STUCK_CYCLE_LIMIT = 3


@dataclass
class StockCycleTracker:
    limit: int = STUCK_CYCLE_LIMIT
    cycles: int = 0
    used_this_cycle: bool = False

    def mark_productive(self) -> None:
        self.used_this_cycle = True

    def on_stock_reset(self) -> bool:
        """Record a stock reset; True means the caller must force a new game."""
        if self.used_this_cycle:
            self.cycles = 0
        else:
            self.cycles += 1
        if self.cycles >= self.limit:
            self.reset()
            return True
        self.used_this_cycle = False
        return False

    def reset(self) -> None:
        self.cycles = 0
        self.used_this_cycle = False
