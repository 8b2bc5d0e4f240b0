"""
Engine Core - Session state management for a charades round.

The engine is the runtime that:
1. Holds the SessionState
2. Applies actions via the reducer
3. Offers categories and picks phrases
4. Rotates the active player between rounds
"""

from .state import (
    SessionState,
    Player,
    Category,
    Phrase,
    RoundPhase,
    WORD_CHANGE_BUDGET,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action
from .selection import generate_category_options, pick_phrase, advance_turn

__all__ = [
    "SessionState",
    "Player",
    "Category",
    "Phrase",
    "RoundPhase",
    "WORD_CHANGE_BUDGET",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "generate_category_options",
    "pick_phrase",
    "advance_turn",
]
