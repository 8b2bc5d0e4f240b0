"""
Session Module - Runs one charades session.

A session holds:
- The roster and turn order (persisted)
- The enabled categories (persisted)
- The round in progress (in memory only)

GameSession owns the state; GameLoop drives it screen by screen.
"""

from .manager import GameSession
from .game_loop import (
    GameLoop,
    LoopState,
    TurnResult,
    Alert,
    EMPTY_RESULT_RETRIES,
    MIN_PLAYERS,
    MAX_PLAYERS,
)

__all__ = [
    "GameSession",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "Alert",
    "EMPTY_RESULT_RETRIES",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
]
