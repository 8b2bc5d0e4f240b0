"""
Reducer - Applies actions to session state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- Returns ActionResult with success/failure
- Randomness comes from an injected generator
"""

from __future__ import annotations
import random
from dataclasses import dataclass, field

from .state import SessionState, RoundPhase, Player, WORD_CHANGE_BUDGET
from .action import Action, ActionType, ActionResult
from .selection import generate_category_options, pick_phrase, advance_turn


# Round actions that make no sense once the final scores are showing
_ROUND_ACTIONS = {
    ActionType.SELECT_CATEGORY,
    ActionType.CHANGE_WORD,
    ActionType.END_ROUND,
    ActionType.ADD_POINT,
    ActionType.NEXT_WORD,
    ActionType.RECORD_GUESS,
    ActionType.DRAW_RANDOM_WORD,
}

# Actions that deliver the outcome of an asynchronous fetch
_FETCH_RESULTS = {
    ActionType.CATEGORIES_LOADED,
    ActionType.PHRASES_LOADED,
    ActionType.REQUEST_FAILED,
}


@dataclass
class Reducer:
    """
    Reducer applies actions to session state.

    Stateless - all state is in SessionState.
    """
    rng: random.Random = field(default_factory=random.Random)

    def apply(self, state: SessionState, action: Action) -> ActionResult:
        """
        Apply an action to the session state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            return validation_error

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            return handler(state, action)
        except Exception as e:
            return ActionResult.failure(str(e), error_code="HANDLER_ERROR")

    def _validate_action(self, state: SessionState, action: Action) -> ActionResult | None:
        """
        Validate that an action is legal in the current state.

        Returns a failure result if invalid, None if valid.
        """
        if state.phase == RoundPhase.GAME_OVER and action.action_type in _ROUND_ACTIONS:
            return ActionResult.failure(
                "Game is over - start a new game first",
                error_code="INVALID_ACTION",
            )

        # A fetch result only counts if no newer request was issued since
        if action.action_type in _FETCH_RESULTS:
            if action.payload.request_id is None or action.payload.request_id != state.pending_request_id:
                return ActionResult.failure(
                    f"Ignoring stale response for request {action.payload.request_id}",
                    error_code="STALE_REQUEST",
                )

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.ADD_PLAYER: self._handle_add_player,
            ActionType.REMOVE_PLAYER: self._handle_remove_player,
            ActionType.RESET_SCORES: self._handle_reset_scores,
            ActionType.LOAD_CATEGORIES: self._handle_load_categories,
            ActionType.CATEGORIES_LOADED: self._handle_categories_loaded,
            ActionType.TOGGLE_CATEGORY: self._handle_toggle_category,
            ActionType.START_NEW_GAME: self._handle_start_new_game,
            ActionType.SELECT_CATEGORY: self._handle_select_category,
            ActionType.CHANGE_WORD: self._handle_change_word,
            ActionType.PHRASES_LOADED: self._handle_phrases_loaded,
            ActionType.REQUEST_FAILED: self._handle_request_failed,
            ActionType.END_ROUND: self._handle_end_round,
            ActionType.ADD_POINT: self._handle_add_point,
            ActionType.NEXT_WORD: self._handle_next_word,
            ActionType.RECORD_GUESS: self._handle_record_guess,
            ActionType.END_GAME: self._handle_end_game,
            ActionType.RETURN_TO_MENU: self._handle_return_to_menu,
            ActionType.DRAW_RANDOM_WORD: self._handle_draw_random_word,
        }
        return handlers.get(action_type)

    # Roster ---------------------------------------------------------------

    def _handle_add_player(self, state: SessionState, action: Action) -> ActionResult:
        """Append a player to the end of the turn order."""
        name = (action.payload.player_name or "").strip()
        if not name:
            return ActionResult.failure("Player name must not be empty", error_code="INVALID_NAME")
        player_id = action.payload.player_id
        if not player_id:
            return ActionResult.failure("Player id is required", error_code="INVALID_ACTION")

        player = Player(id=player_id, name=name)
        new_state = state._copy_with(players=[*state.players, player])
        return ActionResult.success_with_state(new_state, changes=[f"Added player {name}"])

    def _handle_remove_player(self, state: SessionState, action: Action) -> ActionResult:
        """
        Remove a player and keep the active index in range.

        Removing the active player resets the index to 0, and so does an
        index left past the end of the shortened roster. Any other index is
        kept as is, so removing an earlier player hands the turn to whoever
        now sits at that position.
        """
        player_id = action.payload.player_id
        index = state.index_of(player_id) if player_id else None
        if index is None:
            return ActionResult.failure(f"Player {player_id} not found", error_code="PLAYER_NOT_FOUND")

        removed = state.players[index]
        new_players = state.players[:index] + state.players[index + 1:]

        active = state.active_player_index
        if index == active or active >= len(new_players):
            active = 0

        new_state = state._copy_with(players=new_players, active_player_index=active)
        return ActionResult.success_with_state(new_state, changes=[f"Removed player {removed.name}"])

    def _handle_reset_scores(self, state: SessionState, action: Action) -> ActionResult:
        new_players = [p.with_score(0) for p in state.players]
        new_state = state._copy_with(players=new_players, active_player_index=0)
        return ActionResult.success_with_state(new_state, changes=["Scores reset"])

    # Category pool --------------------------------------------------------

    def _handle_load_categories(self, state: SessionState, action: Action) -> ActionResult:
        new_state = state._copy_with(
            is_loading=True,
            pending_request_id=action.payload.request_id,
        )
        return ActionResult.success_with_state(new_state)

    def _handle_categories_loaded(self, state: SessionState, action: Action) -> ActionResult:
        """Store fetched categories; first run enables all of them."""
        categories = list(action.payload.categories or [])

        selected = state.selected_categories
        changes = [f"Loaded {len(categories)} categories"]
        if not selected:
            selected = {c.id: True for c in categories}
            changes.append("Enabled all categories by default")

        new_state = state._copy_with(
            available_categories=categories,
            selected_categories=selected,
            is_loading=False,
            pending_request_id=None,
        )
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_toggle_category(self, state: SessionState, action: Action) -> ActionResult:
        category_id = action.payload.category_id
        if not category_id:
            return ActionResult.failure("Category id is required", error_code="INVALID_ACTION")

        selected = dict(state.selected_categories)
        selected[category_id] = not selected.get(category_id, False)
        new_state = state._copy_with(selected_categories=selected)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Category {category_id} {'enabled' if selected[category_id] else 'disabled'}"],
        )

    # Round lifecycle ------------------------------------------------------

    def _handle_start_new_game(self, state: SessionState, action: Action) -> ActionResult:
        """Reset the round and offer categories to the active player."""
        new_state = self._offer_categories(state)
        changes = [f"Offered {', '.join(c.name for c in new_state.category_options) or 'no categories'}"]
        warnings = []
        if new_state.selected_categories != state.selected_categories:
            warnings.append("No categories were enabled - re-enabled all of them")
        return ActionResult.success_with_state(new_state, changes=changes, warnings=warnings)

    def _handle_select_category(self, state: SessionState, action: Action) -> ActionResult:
        category_id = action.payload.category_id
        if not category_id:
            return ActionResult.failure("Category id is required", error_code="INVALID_ACTION")

        new_state = state._copy_with(
            selected_category_id=category_id,
            current_word=None,
            is_loading=True,
            pending_request_id=action.payload.request_id,
        )
        return ActionResult.success_with_state(new_state, changes=[f"Selected category {category_id}"])

    def _handle_change_word(self, state: SessionState, action: Action) -> ActionResult:
        if state.word_changes_remaining <= 0:
            return ActionResult.failure("No word changes remaining", error_code="NO_CHANGES_LEFT")
        if state.selected_category_id is None:
            return ActionResult.failure("No category selected", error_code="INVALID_ACTION")

        new_state = state._copy_with(
            is_loading=True,
            pending_request_id=action.payload.request_id,
        )
        return ActionResult.success_with_state(new_state)

    def _handle_phrases_loaded(self, state: SessionState, action: Action) -> ActionResult:
        """Show a random phrase from the fetched batch."""
        replace = bool(action.payload.params.get("replace", False))
        phrase = pick_phrase(action.payload.phrases or [], self.rng)

        if phrase is None:
            new_state = state._copy_with(is_loading=False, pending_request_id=None)
            if state.selected_category_id is None:
                warning = "No phrases found in the enabled categories"
            else:
                warning = f"No phrases found for category {state.selected_category_id}"
            return ActionResult.success_with_state(new_state, warnings=[warning])

        if replace:
            remaining = state.word_changes_remaining - 1
        else:
            remaining = WORD_CHANGE_BUDGET

        new_state = state._copy_with(
            current_word=phrase.text,
            word_changes_remaining=remaining,
            phase=RoundPhase.WORD_SHOWN,
            is_loading=False,
            pending_request_id=None,
        )
        return ActionResult.success_with_state(new_state, changes=[f"Showing phrase {phrase.id}"])

    def _handle_draw_random_word(self, state: SessionState, action: Action) -> ActionResult:
        """Quick play: the next phrase comes from any enabled category."""
        if not state.enabled_category_ids():
            return ActionResult.failure("No categories enabled", error_code="INVALID_ACTION")

        new_state = state._copy_with(
            current_word=None,
            selected_category_id=None,
            is_loading=True,
            pending_request_id=action.payload.request_id,
        )
        return ActionResult.success_with_state(new_state, changes=["Drawing from all enabled categories"])

    def _handle_request_failed(self, state: SessionState, action: Action) -> ActionResult:
        new_state = state._copy_with(is_loading=False, pending_request_id=None)
        return ActionResult.success_with_state(new_state)

    def _handle_end_round(self, state: SessionState, action: Action) -> ActionResult:
        new_state = state._copy_with(phase=RoundPhase.SCORING)
        return ActionResult.success_with_state(new_state)

    def _handle_add_point(self, state: SessionState, action: Action) -> ActionResult:
        new_state, warnings = self._award_point(state, action.payload.player_id)
        return ActionResult.success_with_state(new_state, warnings=warnings)

    def _handle_next_word(self, state: SessionState, action: Action) -> ActionResult:
        new_state = self._advance(state, action.payload.player_id)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Next up: {self._active_name(new_state)}"],
        )

    def _handle_record_guess(self, state: SessionState, action: Action) -> ActionResult:
        """Score the round (if someone guessed) and move on to the next one."""
        winner_id = action.payload.player_id
        warnings: list[str] = []
        if winner_id is not None:
            state, warnings = self._award_point(state, winner_id)

        new_state = self._advance(state, winner_id)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Next up: {self._active_name(new_state)}"],
            warnings=warnings,
        )

    def _handle_end_game(self, state: SessionState, action: Action) -> ActionResult:
        new_state = state._copy_with(
            phase=RoundPhase.GAME_OVER,
            is_loading=False,
            pending_request_id=None,
        )
        return ActionResult.success_with_state(new_state, changes=["Game over"])

    def _handle_return_to_menu(self, state: SessionState, action: Action) -> ActionResult:
        new_state = state._copy_with(
            players=[p.with_score(0) for p in state.players],
            active_player_index=0,
            phase=RoundPhase.IDLE,
            current_word=None,
            selected_category_id=None,
            category_options=[],
            word_changes_remaining=WORD_CHANGE_BUDGET,
            is_loading=False,
            pending_request_id=None,
        )
        return ActionResult.success_with_state(new_state, changes=["Scores reset", "Back to menu"])

    # Helpers --------------------------------------------------------------

    def _award_point(self, state: SessionState, player_id: str | None) -> tuple[SessionState, list[str]]:
        """Add one point; an unknown player counts as nobody."""
        player = state.get_player(player_id) if player_id else None
        if player is None:
            return state, [f"Player {player_id} not found - no point awarded"]
        return state.with_player(player.with_score(player.score + 1)), []

    def _advance(self, state: SessionState, winner_id: str | None) -> SessionState:
        """Turn advance followed by a fresh category offer."""
        next_index = advance_turn(state.players, state.active_player_index, winner_id, self.rng)
        return self._offer_categories(state._copy_with(active_player_index=next_index))

    def _offer_categories(self, state: SessionState) -> SessionState:
        options, selected = generate_category_options(
            state.available_categories,
            state.selected_categories,
            self.rng,
        )
        return state._copy_with(
            selected_categories=selected,
            category_options=options,
            current_word=None,
            selected_category_id=None,
            word_changes_remaining=WORD_CHANGE_BUDGET,
            phase=RoundPhase.CATEGORY_OFFERED,
            is_loading=False,
            pending_request_id=None,
        )

    @staticmethod
    def _active_name(state: SessionState) -> str:
        player = state.current_player
        return player.name if player else "nobody"


def apply_action(
    state: SessionState,
    action: Action,
    rng: random.Random | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng or random.Random())
    return reducer.apply(state, action)
