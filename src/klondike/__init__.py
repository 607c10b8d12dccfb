"""Klondike Solitaire rules engine and greedy bot."""

from .cards import Card, build_deck, shuffle
from .rules import can_drop_cards, can_move_to_foundation, can_move_to_tableau
from .bot import BotAction, BotActionKind, BotPlanner
from .session import WASTE, GameSession, MoveSource, SessionListener

__all__ = [
    "Card",
    "build_deck",
    "shuffle",
    "can_drop_cards",
    "can_move_to_foundation",
    "can_move_to_tableau",
    "BotAction",
    "BotActionKind",
    "BotPlanner",
    "WASTE",
    "GameSession",
    "MoveSource",
    "SessionListener",
]
