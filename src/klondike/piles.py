"""Pile model for Klondike.

Every pile keeps its cards bottom-to-top; the end of the list is the top.
Rules code only ever sees the top card or, for tableau piles, the face-up
run above the face-down cards. Iterating a pile yields every card and exists
for renderers and invariant checks.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from klondike.cards import ACE, KING, SUITS, Card, TABLEAU_PILES

DRAW_COUNT = 3
DECK_SIZE = 52


class InvariantError(AssertionError):
    """Raised when the pile contents break a structural rule of the game."""


class Pile:
    kind = "pile"

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: List[Card] = list(cards or [])

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    def __bool__(self) -> bool:
        return bool(self._cards)

    def __repr__(self):
        return f"{type(self).__name__}({self._cards!r})"

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def top(self) -> Optional[Card]:
        return self._cards[-1] if self._cards else None

    def push(self, card: Card) -> None:
        self._cards.append(card)

    def pop(self) -> Card:
        return self._cards.pop()

    def clear(self) -> List[Card]:
        cards, self._cards = self._cards, []
        return cards


class StockPile(Pile):
    kind = "stock"

    def draw(self, count: int = DRAW_COUNT) -> List[Card]:
        """Pop up to ``count`` cards off the top, in pop order."""
        drawn = []
        for _ in range(min(count, len(self._cards))):
            drawn.append(self._cards.pop())
        return drawn

    def refill(self, cards: Sequence[Card]) -> None:
        for c in cards:
            c.face_up = False
        self._cards = list(cards)


class WastePile(Pile):
    kind = "waste"

    def receive(self, cards: Sequence[Card]) -> None:
        for c in cards:
            c.face_up = True
            self._cards.append(c)


class FoundationPile(Pile):
    kind = "foundation"

    def __init__(self, suit: str, cards: Optional[Iterable[Card]] = None):
        super().__init__(cards)
        self.suit = suit

    @property
    def next_rank(self) -> int:
        top = self.top()
        return ACE if top is None else top.rank + 1

    @property
    def is_complete(self) -> bool:
        return len(self._cards) == KING


class TableauPile(Pile):
    kind = "tableau"

    def first_face_up_index(self) -> int:
        """Index where the exposed run starts, or -1 if nothing is face-up."""
        for i, c in enumerate(self._cards):
            if c.face_up:
                return i
        return -1

    def face_up_run(self) -> List[Card]:
        start = self.first_face_up_index()
        return [] if start < 0 else self._cards[start:]

    def face_down_count(self) -> int:
        start = self.first_face_up_index()
        return len(self._cards) if start < 0 else start

    def run_card(self, index: int) -> Optional[Card]:
        """Card at ``index`` if it belongs to the exposed run, else None."""
        start = self.first_face_up_index()
        if start < 0 or index < start or index >= len(self._cards):
            return None
        return self._cards[index]

    def take_from(self, index: int) -> List[Card]:
        start = self.first_face_up_index()
        if start < 0 or index < start or index >= len(self._cards):
            raise InvariantError(f"Cannot lift cards from index {index} of {self!r}")
        moved = self._cards[index:]
        del self._cards[index:]
        return moved

    def extend(self, cards: Sequence[Card]) -> None:
        self._cards.extend(cards)

    def flip_top(self) -> bool:
        top = self.top()
        if top is not None and not top.face_up:
            top.face_up = True
            return True
        return False


def make_foundations() -> Dict[str, FoundationPile]:
    return {suit: FoundationPile(suit) for suit in SUITS}


def make_tableau() -> List[TableauPile]:
    return [TableauPile() for _ in range(TABLEAU_PILES)]


def check_invariants(
    stock: StockPile,
    waste: WastePile,
    foundations: Dict[str, FoundationPile],
    tableau: Sequence[TableauPile],
    *,
    expected_total: Optional[int] = DECK_SIZE,
) -> None:
    """Raise InvariantError if cards were lost, duplicated or misplaced.

    ``expected_total`` is None while a deal is still placing cards.
    """
    seen = set()
    total = 0
    piles: List[Pile] = [stock, waste, *foundations.values(), *tableau]
    for pile in piles:
        for c in pile:
            if c.id in seen:
                raise InvariantError(f"Duplicate card {c.id} in {pile.kind}")
            seen.add(c.id)
            total += 1
    if expected_total is not None and total != expected_total:
        raise InvariantError(f"Expected {expected_total} cards, found {total}")
    for suit, f in foundations.items():
        for rank, c in enumerate(f, start=ACE):
            if c.suit != suit or c.rank != rank:
                raise InvariantError(f"Foundation {suit} out of order at {c!r}")
