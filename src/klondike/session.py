"""Game session: owns every pile and is the only path that mutates them.

The session carries no rendering or timer code. Hosts subscribe a
``SessionListener`` for state changes and drive dealing and the bot through
``deal_step()`` and ``bot_tick()`` at whatever cadence suits them.
"""

from __future__ import annotations

import logging
import random
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Sequence, Tuple

from klondike.bot import BotAction, BotActionKind, BotPlanner, describe, find_foundation_move, find_tableau_run_move
from klondike.cards import SUITS, TABLEAU_PILES, Card, build_deck, deal_order, shuffle
from klondike.cycles import StockCycleTracker
from klondike.piles import (
    DECK_SIZE,
    DRAW_COUNT,
    FoundationPile,
    StockPile,
    TableauPile,
    WastePile,
    check_invariants,
    make_foundations,
    make_tableau,
)
from klondike.rules import FOUNDATION, TABLEAU, can_drop_cards, can_move_to_foundation, can_move_to_tableau

logger = logging.getLogger(__name__)

POINTS_PER_MOVE = 10
HINT_FALLBACK = "Try drawing from the stock pile or look for tableau moves"
UNDO_MESSAGE = "Undo functionality is not implemented in this version."


@dataclass(frozen=True)
class MoveSource:
    """Where a moving card comes from: the waste, or a tableau pile and index."""

    kind: str
    pile_index: Optional[int] = None
    card_index: Optional[int] = None

    @staticmethod
    def tableau(pile_index: int, card_index: int) -> "MoveSource":
        return MoveSource(TABLEAU, pile_index, card_index)


WASTE = MoveSource("waste")


@dataclass(frozen=True)
class MoveLogEntry:
    description: str
    timestamp: float


@dataclass(frozen=True)
class SessionSnapshot:
    stock: Tuple[str, ...]
    waste: Tuple[str, ...]
    foundations: Tuple[Tuple[str, ...], ...]
    tableau: Tuple[Tuple[Tuple[str, bool], ...], ...]
    moves: int
    score: int


class SessionListener:
    """Override the callbacks you care about; the defaults do nothing."""

    def on_state_changed(self) -> None:
        pass

    def on_win(self, score: int, moves: int, elapsed_seconds: int) -> None:
        pass

    def on_stuck(self) -> None:
        pass

    def on_deal_complete(self) -> None:
        pass

    def on_new_game(self) -> None:
        pass


class GameSession:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        animate_deal: bool = True,
        planner: Optional[BotPlanner] = None,
    ):
        self.rng = rng
        self._clock = clock
        self.animate_deal = animate_deal
        self.planner = planner or BotPlanner()
        self._listeners: List[SessionListener] = []

        self.stock = StockPile()
        self.waste = WastePile()
        self.foundations: Dict[str, FoundationPile] = make_foundations()
        self.tableau: List[TableauPile] = make_tableau()
        self.move_log: List[MoveLogEntry] = []
        self.moves = 0
        self.score = 0
        self.cycle_tracker = StockCycleTracker()
        self.bot_active = False
        self.dealing = False
        self.won = False
        self.won_by_bot = False
        self.restart_pending = False
        self.games_started = 0
        self.start_time = self._clock()
        self._final_elapsed: Optional[int] = None
        self._deck: List[Card] = []
        self._deal_queue: Deque[Tuple[int, bool]] = deque()
        # Only a dealt game is known to hold the full deck; hand-built positions are not.
        self._expected_total: Optional[int] = None

    # ----- Listeners -----
    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: str, *args) -> None:
        for listener in list(self._listeners):
            getattr(listener, event)(*args)

    def _changed(self) -> None:
        check_invariants(
            self.stock,
            self.waste,
            self.foundations,
            self.tableau,
            expected_total=None if self.dealing else self._expected_total,
        )
        self._emit("on_state_changed")

    # ----- Game lifecycle -----
    def new_game(self, animate: Optional[bool] = None) -> None:
        """Reset the session and start dealing a freshly shuffled deck.

        The bot-active flag survives so a forced restart keeps the bot
        playing once the deal completes.
        """
        animate = self.animate_deal if animate is None else animate
        self.stock.clear()
        self.waste.clear()
        for f in self.foundations.values():
            f.clear()
        for t in self.tableau:
            t.clear()
        self.move_log = []
        self.moves = 0
        self.score = 0
        self.cycle_tracker.reset()
        self.won = False
        self.won_by_bot = False
        self.restart_pending = False
        self._final_elapsed = None
        self.start_time = self._clock()
        self.games_started += 1

        self._deck = shuffle(build_deck(), self.rng)
        self._deal_queue = deque(deal_order(TABLEAU_PILES))
        self.dealing = True
        logger.info("New game #%d (animated deal: %s)", self.games_started, animate)
        self._emit("on_new_game")
        self._emit("on_state_changed")
        if not animate:
            self.deal_all()

    def deal_step(self) -> bool:
        """Place the next card of the deal. Returns False when nothing is pending."""
        if not self.dealing:
            return False
        pile_index, face_up = self._deal_queue.popleft()
        card = self._deck.pop()
        card.face_up = face_up
        self.tableau[pile_index].extend([card])
        if not self._deal_queue:
            self._finish_deal()
            return True
        self._changed()
        return True

    def deal_all(self) -> None:
        while self.dealing:
            self.deal_step()

    def _finish_deal(self) -> None:
        self.stock.refill(self._deck)
        self._deck = []
        self._expected_total = DECK_SIZE
        self.dealing = False
        self.start_time = self._clock()
        logger.debug("Deal complete, %d cards in stock", len(self.stock))
        self._changed()
        self._emit("on_deal_complete")

    # ----- Queries -----
    def can_move_to_foundation(self, card: Card) -> bool:
        return can_move_to_foundation(card, self.foundations)

    def can_move_to_tableau(self, card: Card, pile_index: int) -> bool:
        return can_move_to_tableau(card, self.tableau[pile_index])

    def can_drop_cards(self, cards: Optional[Sequence[Card]], target_type: str, target_index=None) -> bool:
        return can_drop_cards(cards, target_type, target_index, self.foundations, self.tableau)

    def is_won(self) -> bool:
        return all(f.is_complete for f in self.foundations.values())

    def elapsed_seconds(self) -> int:
        if self._final_elapsed is not None:
            return self._final_elapsed
        return max(0, int(self._clock() - self.start_time))

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            stock=tuple(c.id for c in self.stock),
            waste=tuple(c.id for c in self.waste),
            foundations=tuple(tuple(c.id for c in self.foundations[s]) for s in SUITS),
            tableau=tuple(tuple((c.id, c.face_up) for c in t) for t in self.tableau),
            moves=self.moves,
            score=self.score,
        )

    def _accepts_moves(self) -> bool:
        return not self.dealing and not self.won

    # ----- Move log -----
    def add_move(self, description: str) -> None:
        self.moves += 1
        self.score += POINTS_PER_MOVE
        self.move_log.append(MoveLogEntry(description, self._clock()))
        logger.debug("Move %d: %s", self.moves, description)

    # ----- Executor -----
    def draw_from_stock(self) -> bool:
        if not self._accepts_moves():
            return False
        if self.stock:
            drawn = self.stock.draw(DRAW_COUNT)
            self.waste.receive(drawn)
            n = len(drawn)
            self.add_move(f"Draw {n} card{'s' if n > 1 else ''} from stock")
            self._changed()
            return True
        if not self.waste:
            return False
        if self.bot_active and self.cycle_tracker.on_stock_reset():
            logger.info("Bot cycled the stock %d times without progress; dealing again", self.cycle_tracker.limit)
            self.new_game()
            return True
        cards = self.waste.clear()
        cards.reverse()
        self.stock.refill(cards)
        self.add_move("Reset stock from waste")
        self._changed()
        return True

    def _lift_source(self, card: Card, source: MoveSource) -> Optional[List[Card]]:
        """Remove and return the cards ``card`` heads at ``source``, or None if absent."""
        if source.kind == WASTE.kind:
            if self.waste.top() is not card:
                return None
            return [self.waste.pop()]
        if source.kind == TABLEAU:
            if source.pile_index is None or not 0 <= source.pile_index < len(self.tableau):
                return None
            pile = self.tableau[source.pile_index]
            index = source.card_index
            if index is None or pile.run_card(index) is not card:
                return None
            return pile.take_from(index)
        return None

    def _peek_source(self, card: Card, source: MoveSource, single: bool) -> bool:
        if source.kind == WASTE.kind:
            return self.waste.top() is card
        if source.kind == TABLEAU:
            if source.pile_index is None or not 0 <= source.pile_index < len(self.tableau):
                return False
            pile = self.tableau[source.pile_index]
            if single:
                return pile.top() is card and card.face_up
            return source.card_index is not None and pile.run_card(source.card_index) is card
        return False

    def move_to_foundation(self, card: Card, source: MoveSource) -> bool:
        if not self._accepts_moves():
            return False
        if not self._peek_source(card, source, single=True) or not self.can_move_to_foundation(card):
            return False
        if source.kind == TABLEAU:
            self.tableau[source.pile_index].pop()
            self.flip_top_card(source.pile_index, notify=False)
        else:
            self.waste.pop()
        self.foundations[card.suit].push(card)
        if self.bot_active:
            self.cycle_tracker.mark_productive()
        self.add_move(f"Move {card.label} to foundation")
        self._changed()
        self._check_win()
        return True

    def move_to_tableau(self, card: Card, target_index: int, source: MoveSource) -> bool:
        if not self._accepts_moves():
            return False
        if not 0 <= target_index < len(self.tableau):
            return False
        if source.kind == TABLEAU and source.pile_index == target_index:
            return False
        if not self._peek_source(card, source, single=False) or not self.can_move_to_tableau(card, target_index):
            return False
        cards = self._lift_source(card, source)
        self.tableau[target_index].extend(cards)
        if source.kind == TABLEAU:
            self.flip_top_card(source.pile_index, notify=False)
        if self.bot_active:
            self.cycle_tracker.mark_productive()
        self.add_move(f"Move {card.label} to tableau")
        self._changed()
        return True

    def flip_top_card(self, pile_index: int, notify: bool = True) -> bool:
        flipped = self.tableau[pile_index].flip_top()
        if flipped and notify:
            self._changed()
        return flipped

    def play_waste_card(self) -> bool:
        """Click on the waste: foundation first, then the first tableau that fits."""
        card = self.waste.top()
        if card is None:
            return False
        if self.move_to_foundation(card, WASTE):
            return True
        for i in range(len(self.tableau)):
            if self.move_to_tableau(card, i, WASTE):
                return True
        return False

    def drop_cards(self, cards: Sequence[Card], target_type: str, target_index, source: MoveSource) -> bool:
        if not self.can_drop_cards(cards, target_type, target_index):
            return False
        if target_type == FOUNDATION:
            return self.move_to_foundation(cards[0], source)
        return self.move_to_tableau(cards[0], target_index, source)

    def _check_win(self) -> None:
        if self.won or not self.is_won():
            return
        self.won = True
        self.won_by_bot = self.bot_active
        self._final_elapsed = max(0, int(self._clock() - self.start_time))
        self.stop_bot()
        logger.info("Game won: score=%d moves=%d time=%ds", self.score, self.moves, self._final_elapsed)
        self._emit("on_win", self.score, self.moves, self._final_elapsed)

    # ----- Bot -----
    def start_bot(self) -> bool:
        if self.dealing:
            return False
        self.bot_active = True
        logger.info("Bot started")
        return True

    def stop_bot(self) -> None:
        if self.bot_active:
            logger.info("Bot stopped")
        self.bot_active = False

    def toggle_bot(self) -> bool:
        if self.bot_active:
            self.stop_bot()
            return False
        return self.start_bot()

    def bot_tick(self) -> Optional[BotAction]:
        """Let the bot perform one action. Returns what it did, if anything."""
        if not self.bot_active or not self._accepts_moves():
            return None
        action = self.planner.choose(self)
        kind = action.kind
        if kind in (BotActionKind.WASTE_TO_FOUNDATION, BotActionKind.TABLEAU_TO_FOUNDATION):
            source = WASTE if kind == BotActionKind.WASTE_TO_FOUNDATION else MoveSource.tableau(action.source_pile, action.card_index)
            self.move_to_foundation(action.card, source)
        elif kind == BotActionKind.TABLEAU_TO_TABLEAU:
            self.move_to_tableau(action.card, action.target_pile, MoveSource.tableau(action.source_pile, action.card_index))
        elif kind == BotActionKind.WASTE_TO_TABLEAU:
            self.move_to_tableau(action.card, action.target_pile, WASTE)
        elif kind == BotActionKind.DRAW:
            self.draw_from_stock()
        else:
            self.stop_bot()
            self.restart_pending = True
            logger.info("Bot is stuck; a new game will be dealt")
            self._emit("on_stuck")
        return action

    # ----- Help -----
    def request_hint(self) -> str:
        action = find_foundation_move(self) or find_tableau_run_move(self)
        if action is None:
            return HINT_FALLBACK
        return describe(action)

    def undo(self) -> str:
        return UNDO_MESSAGE
