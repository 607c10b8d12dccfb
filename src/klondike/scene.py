"""pygame scene for Klondike.

The scene owns no game rules. It renders the session's piles, turns mouse
gestures into ``GameSession`` calls and reacts to session events with the
celebration, the game-over panel and transient messages.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import pygame

from klondike import common as C
from klondike.cards import SUITS, Card, suit_symbol
from klondike.config import Settings, load_settings, next_layout, save_settings
from klondike.driver import SessionDriver
from klondike.rules import FOUNDATION, TABLEAU
from klondike.session import WASTE, GameSession, MoveSource, SessionListener
from klondike.ui import Celebration, GameOverModal, MessageBanner, make_toolbar

CLICK_SLOP_PX = 5


@dataclass
class DragState:
    cards: List[Card]
    source: MoveSource
    grab_offset: Tuple[int, int]
    start_pos: Tuple[int, int]


class KlondikeGameScene(C.Scene, SessionListener):
    def __init__(self, app, settings: Optional[Settings] = None, session: Optional[GameSession] = None):
        super().__init__(app)
        self.settings = settings or load_settings()
        C.apply_layout(self.settings.layout)
        if session is None:
            rng = random.Random(self.settings.seed) if self.settings.seed is not None else None
            session = GameSession(rng)
        self.session = session
        self.driver = SessionDriver(session, self.settings)
        session.add_listener(self)

        self.stock_view = C.PileView(0, 0)
        self.waste_view = C.PileView(0, 0)
        self.foundation_views = {suit: C.PileView(0, 0) for suit in SUITS}
        self.tableau_views = [C.PileView(0, 0, fanned=True) for _ in session.tableau]

        self.drag: Optional[DragState] = None
        self.mouse_pos = (0, 0)
        self.now_ms = 0
        self.banner = MessageBanner()
        self.celebration = Celebration()
        self.game_over = GameOverModal(on_play_again=self.new_game)

        self.toolbar = make_toolbar(
            {
                "New": {"on_click": self.new_game},
                "Bot": {"on_click": self.toggle_bot, "label_fn": self._bot_label, "min_width": 96},
                "Hint": {"on_click": self.show_hint},
                "Undo": {"on_click": self.undo, "enabled": lambda: bool(self.session.move_log)},
                "Layout": {"on_click": self.toggle_layout, "min_width": 96},
            },
            width_provider=lambda: C.SCREEN_W,
        )
        self.compute_layout()
        self.session.new_game()

    # ----- Layout -----
    def compute_layout(self):
        gap_x = C.CARD_GAP_X
        top_y = C.TOP_BAR_H + 30
        block_w = 7 * C.CARD_W + 6 * gap_x
        left = max(10, (C.SCREEN_W - block_w) // 2)
        self.stock_view.x, self.stock_view.y = left, top_y
        self.waste_view.x, self.waste_view.y = left + C.CARD_W + gap_x, top_y
        for i, suit in enumerate(SUITS):
            v = self.foundation_views[suit]
            v.x = left + (3 + i) * (C.CARD_W + gap_x)
            v.y = top_y
        row_y = top_y + C.CARD_H + C.CARD_GAP_Y
        for i, v in enumerate(self.tableau_views):
            v.x = left + i * (C.CARD_W + gap_x)
            v.y = row_y
        self.toolbar.relayout()

    # ----- Actions -----
    def new_game(self):
        self.driver.cancel_restart()
        self.session.new_game()

    def toggle_bot(self):
        if self.session.dealing and not self.session.bot_active:
            self.driver.start_bot_after_deal()
            return
        self.session.toggle_bot()

    def _bot_label(self) -> str:
        return "Stop Bot" if self.session.bot_active else "Start Bot"

    def show_hint(self):
        self.banner.show(self.session.request_hint(), self.now_ms)

    def undo(self):
        self.banner.show(self.session.undo(), self.now_ms)

    def toggle_layout(self):
        self.settings = replace(self.settings, layout=next_layout(self.settings.layout))
        C.apply_layout(self.settings.layout)
        self.compute_layout()
        save_settings(self.settings)

    # ----- Session events -----
    def on_new_game(self):
        self.drag = None
        self.celebration.cancel()
        self.game_over.close()
        self.banner.clear()

    def on_win(self, score, moves, elapsed_seconds):
        self.drag = None
        self.celebration.start(
            self.now_ms,
            self.settings.celebration_ms,
            on_done=lambda: self.game_over.open(score, moves, elapsed_seconds),
        )

    def on_stuck(self):
        self.banner.show("The bot is stuck. Dealing a new game...", self.now_ms)

    # ----- Hit testing -----
    def _drop_target(self, pos) -> Optional[Tuple[str, object]]:
        for suit, v in self.foundation_views.items():
            if v.area(list(self.session.foundations[suit])).collidepoint(pos):
                return FOUNDATION, suit
        for i, v in enumerate(self.tableau_views):
            if v.area(list(self.session.tableau[i])).collidepoint(pos):
                return TABLEAU, i
        return None

    def _start_drag(self, pos) -> bool:
        session = self.session
        wi = self.waste_view.hit(list(session.waste)[-1:], pos)
        if wi is not None and wi >= 0:
            card = session.waste.top()
            self.drag = DragState([card], WASTE, self._grab(self.waste_view.rect_for_index([card], 0), pos), pos)
            return True
        for ti, v in enumerate(self.tableau_views):
            cards = list(session.tableau[ti])
            hi = v.hit(cards, pos)
            if hi is None or hi < 0:
                continue
            if session.tableau[ti].run_card(hi) is None:
                return False
            rect = v.rect_for_index(cards, hi)
            self.drag = DragState(cards[hi:], MoveSource.tableau(ti, hi), self._grab(rect, pos), pos)
            return True
        return False

    @staticmethod
    def _grab(rect, pos):
        return (pos[0] - rect.x, pos[1] - rect.y)

    def _finish_drag(self, pos):
        drag, self.drag = self.drag, None
        moved = abs(pos[0] - drag.start_pos[0]) + abs(pos[1] - drag.start_pos[1])
        if moved <= CLICK_SLOP_PX:
            if drag.source == WASTE:
                self.session.play_waste_card()
            return
        target = self._drop_target(pos)
        if target is None:
            return
        target_type, index = target
        self.session.drop_cards(drag.cards, target_type, index, drag.source)

    # ----- Event handling -----
    def handle_event(self, e):
        if self.game_over.handle_event(e):
            return
        if e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
            self.mouse_pos = e.pos
        if self.toolbar.handle_event(e):
            return

        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            if self.session.dealing:
                return
            if pygame.Rect(self.stock_view.x, self.stock_view.y, C.CARD_W, C.CARD_H).collidepoint(e.pos):
                self.session.draw_from_stock()
                return
            self._start_drag(e.pos)

        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            if self.drag is not None:
                self._finish_drag(e.pos)

        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_n:
                self.new_game()
            elif e.key == pygame.K_b:
                self.toggle_bot()
            elif e.key == pygame.K_h:
                self.show_hint()
            elif e.key == pygame.K_u:
                self.undo()
            elif e.key == pygame.K_l:
                self.toggle_layout()
            elif e.key == pygame.K_ESCAPE:
                self.drag = None
                self.banner.clear()

    # ----- Frame -----
    def update(self, now_ms):
        self.now_ms = now_ms
        self.driver.update(now_ms)
        self.banner.update(now_ms)
        self.celebration.update(now_ms)

    def _visible(self, cards: List[Card], source: MoveSource, ti: Optional[int] = None) -> List[Card]:
        drag = self.drag
        if drag is None or drag.source.kind != source.kind or drag.source.pile_index != ti:
            return cards
        hidden = {c.id for c in drag.cards}
        return [c for c in cards if c.id not in hidden]

    def draw(self, screen):
        screen.fill(C.TABLE_BG)
        session = self.session

        hud = f"Moves: {session.moves}   Score: {session.score}   Time: {C.format_clock(session.elapsed_seconds())}"
        h = C.FONT_UI.render(hud, True, C.WHITE)
        screen.blit(h, (20, 18))
        self.toolbar.draw(screen)

        self.stock_view.draw(screen, list(session.stock)[-1:])
        waste = self._visible(list(session.waste), WASTE)
        self.waste_view.draw(screen, waste[-1:])

        hover = self._drop_target(self.mouse_pos) if self.drag else None
        for suit, v in self.foundation_views.items():
            cards = list(session.foundations[suit])
            v.draw(screen, cards[-1:], highlight=self._highlight(hover, FOUNDATION, suit))
            if not cards:
                s = C.FONT_CORNER_SUIT.render(suit_symbol(suit), True, C.WHITE)
                screen.blit(s, (v.x + (C.CARD_W - s.get_width()) // 2, v.y + (C.CARD_H - s.get_height()) // 2))
        for ti, v in enumerate(self.tableau_views):
            cards = self._visible(list(session.tableau[ti]), MoveSource(TABLEAU), ti)
            v.draw(screen, cards, highlight=self._highlight(hover, TABLEAU, ti))

        if self.drag:
            mx, my = self.mouse_pos
            gx, gy = self.drag.grab_offset
            y = my - gy
            for c in self.drag.cards:
                screen.blit(C.get_card_surface(c), (mx - gx, y))
                y += C.FAN_UP

        self.banner.draw(screen)
        self.celebration.draw(screen, self.now_ms)
        self.game_over.draw(screen)

    def _highlight(self, hover, target_type, index):
        if hover != (target_type, index):
            return None
        ok = self.session.can_drop_cards(self.drag.cards, target_type, index)
        return C.VALID if ok else C.INVALID
