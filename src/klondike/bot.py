"""Greedy single-ply bot for Klondike.

The planner inspects the piles and proposes exactly one action per call, in a
fixed priority order. It never looks ahead and never uses randomness, so the
same position always yields the same action.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from klondike.cards import KING, Card
from klondike.rules import can_move_to_foundation, can_move_to_tableau


class BotActionKind(str, Enum):
    WASTE_TO_FOUNDATION = "waste_to_foundation"
    TABLEAU_TO_FOUNDATION = "tableau_to_foundation"
    TABLEAU_TO_TABLEAU = "tableau_to_tableau"
    WASTE_TO_TABLEAU = "waste_to_tableau"
    DRAW = "draw"
    STUCK = "stuck"


@dataclass(frozen=True)
class BotAction:
    kind: BotActionKind
    card: Optional[Card] = None
    source_pile: Optional[int] = None
    card_index: Optional[int] = None
    target_pile: Optional[int] = None


def find_foundation_move(state) -> Optional[BotAction]:
    """Waste top first, then tableau tops 0..6."""
    waste_top = state.waste.top()
    if waste_top is not None and can_move_to_foundation(waste_top, state.foundations):
        return BotAction(BotActionKind.WASTE_TO_FOUNDATION, card=waste_top)
    for i, pile in enumerate(state.tableau):
        top = pile.top()
        if top is not None and top.face_up and can_move_to_foundation(top, state.foundations):
            return BotAction(
                BotActionKind.TABLEAU_TO_FOUNDATION,
                card=top,
                source_pile=i,
                card_index=len(pile) - 1,
            )
    return None


def find_tableau_run_move(state) -> Optional[BotAction]:
    """Move a whole exposed run onto the first pile that accepts its lead card."""
    piles = state.tableau
    for i, source in enumerate(piles):
        start = source.first_face_up_index()
        if start < 0:
            continue
        lead = source.run_card(start)
        # A king already at the base gains nothing by moving.
        if lead.rank == KING and start == 0:
            continue
        for j, target in enumerate(piles):
            if i == j:
                continue
            if can_move_to_tableau(lead, target):
                return BotAction(
                    BotActionKind.TABLEAU_TO_TABLEAU,
                    card=lead,
                    source_pile=i,
                    card_index=start,
                    target_pile=j,
                )
    return None


def find_waste_to_tableau_move(state) -> Optional[BotAction]:
    waste_top = state.waste.top()
    if waste_top is None:
        return None
    for j, target in enumerate(state.tableau):
        if can_move_to_tableau(waste_top, target):
            return BotAction(BotActionKind.WASTE_TO_TABLEAU, card=waste_top, target_pile=j)
    return None


class BotPlanner:
    def choose(self, state) -> BotAction:
        for finder in (find_foundation_move, find_tableau_run_move, find_waste_to_tableau_move):
            action = finder(state)
            if action is not None:
                return action
        if state.stock or state.waste:
            return BotAction(BotActionKind.DRAW)
        return BotAction(BotActionKind.STUCK)


def describe(action: BotAction) -> str:
    kind = action.kind
    if kind == BotActionKind.WASTE_TO_FOUNDATION:
        return f"Move {action.card.label} from waste to foundation"
    if kind == BotActionKind.TABLEAU_TO_FOUNDATION:
        return f"Move {action.card.label} from tableau to foundation"
    if kind == BotActionKind.TABLEAU_TO_TABLEAU:
        return f"Move {action.card.label} from tableau {action.source_pile + 1} to tableau {action.target_pile + 1}"
    if kind == BotActionKind.WASTE_TO_TABLEAU:
        return f"Move {action.card.label} from waste to tableau {action.target_pile + 1}"
    if kind == BotActionKind.DRAW:
        return "Draw from the stock pile"
    return "No moves left"
