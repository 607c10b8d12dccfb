"""Pure move legality predicates. Nothing here mutates a pile."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from klondike.cards import ACE, KING, Card
from klondike.piles import FoundationPile, TableauPile

FOUNDATION = "foundation"
TABLEAU = "tableau"


def can_stack_tableau(upper: Card, lower: Card) -> bool:
    """True when ``upper`` may sit directly on the face-up ``lower``."""
    return upper.is_red != lower.is_red and upper.rank == lower.rank - 1


def can_move_to_foundation(card: Card, foundations: Mapping[str, FoundationPile]) -> bool:
    foundation = foundations[card.suit]
    top = foundation.top()
    if top is None:
        return card.rank == ACE
    return card.rank == top.rank + 1


def can_move_to_tableau(card: Card, pile: TableauPile) -> bool:
    top = pile.top()
    if top is None:
        return card.rank == KING
    if not top.face_up:
        return False
    return can_stack_tableau(card, top)


def can_drop_cards(
    cards: Optional[Sequence[Card]],
    target_type: str,
    target_index,
    foundations: Mapping[str, FoundationPile],
    tableau: Sequence[TableauPile],
) -> bool:
    """Drag-and-drop probe: may ``cards`` be released on the given target?

    Only the lead card is tested. Foundations take single cards only, and
    when a foundation is named by suit it must be the lead card's suit.
    """
    if not cards:
        return False
    lead = cards[0]
    if target_type == FOUNDATION:
        if target_index is not None and target_index != lead.suit:
            return False
        return len(cards) == 1 and can_move_to_foundation(lead, foundations)
    if target_type == TABLEAU:
        if not isinstance(target_index, int) or not 0 <= target_index < len(tableau):
            return False
        return can_move_to_tableau(lead, tableau[target_index])
    return False


def is_valid_run(cards: Sequence[Card]) -> bool:
    """Alternating colors and ranks descending by one, bottom to top."""
    for lower, upper in zip(cards, cards[1:]):
        if not can_stack_tableau(upper, lower):
            return False
    return True
