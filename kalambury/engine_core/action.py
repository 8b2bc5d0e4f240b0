"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player-facing actions (add player, toggle category, record guess)
2. Round transitions (start, end round, end game)
3. Fetch lifecycle (request issued, result delivered, request failed)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import Category, Phrase


class ActionType(Enum):
    """Types of actions in the system."""
    # Roster
    ADD_PLAYER = "add_player"
    REMOVE_PLAYER = "remove_player"
    RESET_SCORES = "reset_scores"

    # Category pool
    LOAD_CATEGORIES = "load_categories"
    CATEGORIES_LOADED = "categories_loaded"
    TOGGLE_CATEGORY = "toggle_category"

    # Round lifecycle
    START_NEW_GAME = "start_new_game"
    SELECT_CATEGORY = "select_category"
    CHANGE_WORD = "change_word"
    PHRASES_LOADED = "phrases_loaded"
    END_ROUND = "end_round"
    ADD_POINT = "add_point"
    NEXT_WORD = "next_word"
    RECORD_GUESS = "record_guess"
    END_GAME = "end_game"
    RETURN_TO_MENU = "return_to_menu"

    # Quick play
    DRAW_RANDOM_WORD = "draw_random_word"

    # Fetch failures (repository errors)
    REQUEST_FAILED = "request_failed"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types have different payload shapes.
    This is a generic container; validation happens in the reducer.
    """
    player_id: str | None = None
    player_name: str | None = None
    category_id: str | None = None

    # Fetch lifecycle
    request_id: int | None = None
    categories: list[Category] | None = None
    phrases: list[Phrase] | None = None

    # Generic params
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """
    A complete action to be applied to the session state.

    Actions are applied atomically by the reducer.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def add_player(cls, name: str, player_id: str) -> Action:
        return cls(
            action_type=ActionType.ADD_PLAYER,
            payload=ActionPayload(player_id=player_id, player_name=name),
        )

    @classmethod
    def remove_player(cls, player_id: str) -> Action:
        return cls(
            action_type=ActionType.REMOVE_PLAYER,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def reset_scores(cls) -> Action:
        return cls(action_type=ActionType.RESET_SCORES)

    @classmethod
    def load_categories(cls, request_id: int) -> Action:
        """Factory for the start of a category fetch."""
        return cls(
            action_type=ActionType.LOAD_CATEGORIES,
            payload=ActionPayload(request_id=request_id),
        )

    @classmethod
    def categories_loaded(cls, request_id: int, categories: list[Category]) -> Action:
        return cls(
            action_type=ActionType.CATEGORIES_LOADED,
            payload=ActionPayload(request_id=request_id, categories=list(categories)),
        )

    @classmethod
    def toggle_category(cls, category_id: str) -> Action:
        return cls(
            action_type=ActionType.TOGGLE_CATEGORY,
            payload=ActionPayload(category_id=category_id),
        )

    @classmethod
    def start_new_game(cls) -> Action:
        return cls(action_type=ActionType.START_NEW_GAME)

    @classmethod
    def select_category(cls, category_id: str, request_id: int) -> Action:
        """Factory for the start of a phrase fetch for a chosen category."""
        return cls(
            action_type=ActionType.SELECT_CATEGORY,
            payload=ActionPayload(category_id=category_id, request_id=request_id),
        )

    @classmethod
    def change_word(cls, request_id: int) -> Action:
        """Factory for the start of a replacement phrase fetch."""
        return cls(
            action_type=ActionType.CHANGE_WORD,
            payload=ActionPayload(request_id=request_id),
        )

    @classmethod
    def phrases_loaded(
        cls,
        request_id: int,
        phrases: list[Phrase],
        replace: bool = False,
    ) -> Action:
        """
        Factory for a delivered phrase fetch.

        `replace` marks a word change (budget is spent) rather than a
        fresh category pick (budget is reset).
        """
        return cls(
            action_type=ActionType.PHRASES_LOADED,
            payload=ActionPayload(
                request_id=request_id,
                phrases=list(phrases),
                params={"replace": replace},
            ),
        )

    @classmethod
    def draw_random_word(cls, request_id: int) -> Action:
        """Factory for the start of a quick-play fetch across enabled categories."""
        return cls(
            action_type=ActionType.DRAW_RANDOM_WORD,
            payload=ActionPayload(request_id=request_id),
        )

    @classmethod
    def request_failed(cls, request_id: int) -> Action:
        return cls(
            action_type=ActionType.REQUEST_FAILED,
            payload=ActionPayload(request_id=request_id),
        )

    @classmethod
    def end_round(cls) -> Action:
        return cls(action_type=ActionType.END_ROUND)

    @classmethod
    def add_point(cls, player_id: str) -> Action:
        return cls(
            action_type=ActionType.ADD_POINT,
            payload=ActionPayload(player_id=player_id),
        )

    @classmethod
    def next_word(cls, winner_id: str | None = None) -> Action:
        """Factory for turn advance followed by a fresh category offer."""
        return cls(
            action_type=ActionType.NEXT_WORD,
            payload=ActionPayload(player_id=winner_id),
        )

    @classmethod
    def record_guess(cls, winner_id: str | None = None) -> Action:
        """Factory for add_point (when there is a winner) plus next_word."""
        return cls(
            action_type=ActionType.RECORD_GUESS,
            payload=ActionPayload(player_id=winner_id),
        )

    @classmethod
    def end_game(cls) -> Action:
        return cls(action_type=ActionType.END_GAME)

    @classmethod
    def return_to_menu(cls) -> Action:
        return cls(action_type=ActionType.RETURN_TO_MENU)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Human-readable changes (for logging)
    """
    success: bool
    new_state: Any | None = None  # SessionState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        warnings: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
            warnings=warnings or [],
        )
