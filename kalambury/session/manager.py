"""
Game Session - Owns the session state and talks to the outside world.

LIFECYCLE:
1. Session created → persisted roster and category selection restored
2. load_categories() → category pool fetched from the phrase repository
3. Rounds:
   - start_new_game() offers categories to the active player
   - select_category() fetches phrases and shows a random one
   - change_word() swaps the phrase while the budget lasts
   - end_round() / record_guess() score the round and rotate the turn
4. end_game() shows the standings; return_to_menu() clears the scores
5. Quick play: random_word() draws from every enabled category, no turns

ASYNC RULES:
- Repository calls are the only suspension points
- Every fetch gets a fresh request id; only the newest one may land
- Repository failures are logged and never reach the caller

PERSISTENCE RULES:
- Players and the category selection are written after every action
  that changes them
- Nothing else is persisted
"""

from __future__ import annotations
import itertools
import logging
import random
import uuid

from ..engine_core.state import SessionState, Player, Category
from ..engine_core.action import Action, ActionResult
from ..engine_core.reducer import Reducer
from ..persistence import SessionSnapshot, SnapshotStorage
from ..repository import PhraseRepository

logger = logging.getLogger(__name__)

# Expected rejections that are not worth a warning
_QUIET_ERRORS = {"STALE_REQUEST", "NO_CHANGES_LEFT"}


class GameSession:
    """
    The single owner of a SessionState.

    Usage:
        session = GameSession(repository, storage=SnapshotStorage(path))
        await session.load_categories()

        session.add_player("Ala")
        session.add_player("Olek")
        session.start_new_game()

        await session.select_category(session.state.category_options[0].id)
        print(session.state.current_word)

        session.end_round()
        session.record_guess(winner_id)
    """

    def __init__(
        self,
        repository: PhraseRepository,
        storage: SnapshotStorage | None = None,
        rng: random.Random | None = None,
    ):
        self.repository = repository
        self.storage = storage
        self._reducer = Reducer(rng=rng or random.Random())
        self._request_ids = itertools.count(1)
        self._state = SessionState()
        self._saved: SessionSnapshot | None = None

        if storage is not None:
            snapshot = storage.load()
            self._state = snapshot.apply_to(self._state)
            self._saved = snapshot
            logger.info(
                "Restored session with %d players and %d category flags",
                len(snapshot.players),
                len(snapshot.selected_categories),
            )

    @property
    def state(self) -> SessionState:
        return self._state

    # Queries ---------------------------------------------------------------

    @property
    def current_player(self) -> Player | None:
        return self._state.current_player

    @property
    def category_options(self) -> list[Category]:
        return list(self._state.category_options)

    def are_categories_selected(self) -> bool:
        return self._state.are_categories_selected()

    def sorted_players_by_score(self) -> list[Player]:
        return self._state.sorted_players_by_score()

    # Synchronous actions ---------------------------------------------------

    def add_player(self, name: str) -> ActionResult:
        return self.dispatch(Action.add_player(name, player_id=uuid.uuid1().hex))

    def remove_player(self, player_id: str) -> ActionResult:
        return self.dispatch(Action.remove_player(player_id))

    def reset_scores(self) -> ActionResult:
        return self.dispatch(Action.reset_scores())

    def toggle_category(self, category_id: str) -> ActionResult:
        return self.dispatch(Action.toggle_category(category_id))

    def start_new_game(self) -> ActionResult:
        return self.dispatch(Action.start_new_game())

    def end_round(self) -> ActionResult:
        return self.dispatch(Action.end_round())

    def add_point(self, player_id: str) -> ActionResult:
        return self.dispatch(Action.add_point(player_id))

    def next_word(self, winner_id: str | None = None) -> ActionResult:
        return self.dispatch(Action.next_word(winner_id))

    def record_guess(self, winner_id: str | None = None) -> ActionResult:
        """Score the round (None = nobody guessed) and offer the next one."""
        return self.dispatch(Action.record_guess(winner_id))

    def end_game(self) -> ActionResult:
        return self.dispatch(Action.end_game())

    def return_to_menu(self) -> ActionResult:
        return self.dispatch(Action.return_to_menu())

    # Asynchronous actions --------------------------------------------------

    async def load_categories(self) -> ActionResult:
        """
        Fetch the category pool.

        On failure the previous pool and selection are kept.
        """
        request_id = next(self._request_ids)
        self.dispatch(Action.load_categories(request_id))

        try:
            categories = await self.repository.list_categories()
        except Exception:
            logger.exception("Failed to load categories")
            return self.dispatch(Action.request_failed(request_id))

        return self.dispatch(Action.categories_loaded(request_id, categories))

    async def select_category(self, category_id: str) -> ActionResult:
        """
        Fetch phrases for the chosen category and show a random one.

        An empty (or failed) fetch leaves current_word as None.
        """
        request_id = next(self._request_ids)
        started = self.dispatch(Action.select_category(category_id, request_id))
        if not started.success:
            return started

        phrases = await self._fetch_phrases(category_id)
        return self.dispatch(Action.phrases_loaded(request_id, phrases))

    async def change_word(self) -> ActionResult:
        """
        Swap the current phrase for another from the same category.

        Does nothing once the budget is spent.
        """
        request_id = next(self._request_ids)
        started = self.dispatch(Action.change_word(request_id))
        if not started.success:
            return started

        category_id = self._state.selected_category_id
        phrases = await self._fetch_phrases(category_id)
        return self.dispatch(Action.phrases_loaded(request_id, phrases, replace=True))

    async def random_word(self) -> ActionResult:
        """
        Quick play: show a random phrase from any enabled category.

        Turns and scores are left alone. Every phrase of
        every enabled category is equally likely; an empty pool leaves
        current_word as None.
        """
        request_id = next(self._request_ids)
        started = self.dispatch(Action.draw_random_word(request_id))
        if not started.success:
            return started

        phrases = []
        for category_id in self._state.enabled_category_ids():
            phrases.extend(await self._fetch_phrases(category_id))
        return self.dispatch(Action.phrases_loaded(request_id, phrases))

    async def _fetch_phrases(self, category_id: str) -> list:
        try:
            return list(await self.repository.list_phrases(category_id))
        except Exception:
            logger.exception("Failed to load phrases for category %s", category_id)
            return []

    # Dispatch --------------------------------------------------------------

    def dispatch(self, action: Action) -> ActionResult:
        """Apply an action, keep the new state and persist if needed."""
        result = self._reducer.apply(self._state, action)

        if not result.success:
            if result.error_code in _QUIET_ERRORS:
                logger.debug("%s", result.error)
            else:
                logger.warning("%s rejected: %s", action.action_type.value, result.error)
            return result

        self._state = result.new_state
        for change in result.state_changes:
            logger.debug("%s", change)
        for warning in result.warnings:
            logger.warning("%s", warning)

        self._persist()
        return result

    def _persist(self) -> None:
        if self.storage is None:
            return
        snapshot = SessionSnapshot.from_state(self._state)
        if snapshot == self._saved:
            return
        self.storage.save(snapshot)
        self._saved = snapshot
