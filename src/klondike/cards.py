"""Card identity, deck construction, shuffling and the Klondike deal order."""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

SUITS: Tuple[str, ...] = ("hearts", "diamonds", "clubs", "spades")
RED_SUITS = ("hearts", "diamonds")

RANK_LABELS: Tuple[str, ...] = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")
ACE = 1
KING = 13

_SUIT_SYMBOLS = {
    "hearts": "♥",
    "diamonds": "♦",
    "clubs": "♣",
    "spades": "♠",
}

TABLEAU_PILES = 7


def is_red(suit: str) -> bool:
    return suit in RED_SUITS


def suit_symbol(suit: str) -> str:
    return _SUIT_SYMBOLS[suit]


class Card:
    __slots__ = ("_suit", "_rank", "face_up")

    def __init__(self, suit: str, rank: int, face_up: bool = False):
        if suit not in _SUIT_SYMBOLS:
            raise ValueError(f"Unknown suit: {suit!r}")
        if not ACE <= rank <= KING:
            raise ValueError(f"Rank out of range: {rank!r}")
        self._suit = suit
        self._rank = rank
        self.face_up = face_up

    @property
    def suit(self) -> str:
        return self._suit

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def value(self) -> str:
        return RANK_LABELS[self._rank - 1]

    @property
    def id(self) -> str:
        return f"{self.value}-{self._suit}"

    @property
    def is_red(self) -> bool:
        return is_red(self._suit)

    def color(self) -> str:
        return "red" if self.is_red else "black"

    @property
    def symbol(self) -> str:
        return suit_symbol(self._suit)

    @property
    def label(self) -> str:
        return f"{self.value}{self.symbol}"

    def __repr__(self):
        return f"{self.label}{'↑' if self.face_up else '↓'}"


def build_deck() -> List[Card]:
    """Return the 52 cards face-down, suit-major with ranks ascending."""
    return [Card(suit, rank, False) for suit in SUITS for rank in range(ACE, KING + 1)]


def shuffle(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """Fisher-Yates shuffle in place; returns the same list for chaining.

    Without an explicit generator the OS entropy source is used so every
    ordering of the deck is reachable.
    """
    rng = rng or random.SystemRandom()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def deal_order(piles: int = TABLEAU_PILES) -> List[Tuple[int, bool]]:
    """(pile index, face_up) for every tableau placement of a deal.

    Pass ``i`` touches piles ``i..piles-1``; the card landing on pile ``i``
    during its own pass is its last one and the only one dealt face-up.
    """
    order = []
    for i in range(piles):
        for j in range(i, piles):
            order.append((j, j == i))
    return order


def parse_card(text: str, face_up: bool = True) -> Card:
    """Build a card from short notation such as ``"10H"``, ``"Qs"`` or ``"A♠"``."""
    text = text.strip()
    if not text:
        raise ValueError("Empty card text")
    suit_char = text[-1]
    rank_text = text[:-1].upper()
    by_letter = {s[0].upper(): s for s in SUITS}
    by_symbol = {sym: s for s, sym in _SUIT_SYMBOLS.items()}
    suit = by_letter.get(suit_char.upper()) or by_symbol.get(suit_char)
    if suit is None or rank_text not in RANK_LABELS:
        raise ValueError(f"Cannot parse card: {text!r}")
    return Card(suit, RANK_LABELS.index(rank_text) + 1, face_up)
