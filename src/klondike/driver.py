"""Host-side cadence for a GameSession.

The driver turns a monotonically increasing millisecond clock into deal
steps, bot ticks and delayed restarts. It never reads the clock itself: the
pygame scene feeds ``pygame.time.get_ticks()``, tests feed whatever they like.
"""

from __future__ import annotations

import logging
from typing import Optional

from klondike.config import Settings
from klondike.session import GameSession, SessionListener

logger = logging.getLogger(__name__)


class SessionDriver(SessionListener):
    def __init__(self, session: GameSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or Settings()
        self.now_ms = 0
        self._last_deal_ms: Optional[int] = None
        self._last_bot_ms = 0
        self._restart_at: Optional[int] = None
        self._resume_bot_after_deal = False
        self.running = True
        session.add_listener(self)

    # ----- Scheduling -----
    @property
    def restart_scheduled(self) -> bool:
        return self._restart_at is not None

    def schedule_restart(self, delay_ms: int, resume_bot: bool = False) -> None:
        self._restart_at = self.now_ms + max(0, int(delay_ms))
        self._resume_bot_after_deal = resume_bot
        logger.debug("New game scheduled in %d ms (resume bot: %s)", delay_ms, resume_bot)

    def start_bot_after_deal(self) -> None:
        if self.session.dealing:
            self._resume_bot_after_deal = True
        else:
            self.session.start_bot()

    def cancel_restart(self) -> None:
        self._restart_at = None
        self._resume_bot_after_deal = False

    def stop(self) -> None:
        """Stop future ticks. Nothing already applied is rolled back."""
        self.running = False
        self.cancel_restart()

    # ----- Session events -----
    def on_stuck(self) -> None:
        self.schedule_restart(self.settings.stuck_restart_delay_ms)

    def on_win(self, score: int, moves: int, elapsed_seconds: int) -> None:
        if self.session.won_by_bot:
            delay = self.settings.celebration_ms + self.settings.win_restart_delay_ms
            self.schedule_restart(delay, resume_bot=True)

    def on_new_game(self) -> None:
        self._last_deal_ms = None

    def on_deal_complete(self) -> None:
        if self._resume_bot_after_deal:
            self._resume_bot_after_deal = False
            self.session.start_bot()

    # ----- Clock -----
    def update(self, now_ms: int) -> None:
        self.now_ms = now_ms
        if not self.running:
            return
        session = self.session

        if self._restart_at is not None and now_ms >= self._restart_at:
            self._restart_at = None
            session.new_game()

        if session.dealing:
            if self._last_deal_ms is None or now_ms - self._last_deal_ms >= self.settings.deal_interval_ms:
                self._last_deal_ms = now_ms
                session.deal_step()
            return

        if not session.bot_active:
            self._last_bot_ms = now_ms
            return
        if now_ms - self._last_bot_ms >= self.settings.bot_interval_ms:
            self._last_bot_ms = now_ms
            session.bot_tick()
