"""
Game Loop - The screen-level flow of a charades game.

The loop:
1. Active player picks one of the offered categories
2. A phrase is shown (one automatic retry if the category came back empty)
3. Player may change the phrase while the budget lasts, then skips
4. Round ends; the group says who guessed (or nobody)
5. Next player is chosen, new categories are offered
6. Repeat until someone ends the game

The loop owns the "selecting" latch that keeps a second category pick
from starting while the first is still loading.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.state import Player, RoundPhase

if TYPE_CHECKING:
    from .manager import GameSession

logger = logging.getLogger(__name__)


# Extra select_category attempts after an empty result
EMPTY_RESULT_RETRIES = 1

# Roster limits checked before a game may start
MIN_PLAYERS = 2
MAX_PLAYERS = 19


class LoopState(Enum):
    """What the players are looking at."""
    CATEGORY_SELECTION = "category_selection"
    WORD_DISPLAY = "word_display"
    SCORING = "scoring"
    FINAL_SCORES = "final_scores"
    MENU = "menu"


@dataclass
class Alert:
    """A user-facing message."""
    title: str
    message: str


@dataclass
class TurnResult:
    """
    Result of a loop step.

    Contains what the presentation layer needs to draw the next screen.
    """
    success: bool
    loop_state: LoopState

    current_word: str | None = None
    current_player: Player | None = None
    word_changes_remaining: int = 0

    alerts: list[Alert] = field(default_factory=list)
    standings: list[Player] = field(default_factory=list)
    error: str | None = None


PHRASE_PROBLEM = Alert(
    title="Phrase problem",
    message="Could not load a phrase. Try another category.",
)
BUSY = Alert(
    title="Please wait",
    message="A category is already being loaded.",
)


class GameLoop:
    """
    The main game loop driver.

    Usage:
        loop = GameLoop(session)
        if not loop.can_start():
            ...

        result = loop.begin()
        result = await loop.choose_category(result_category_id)
        result = await loop.change_word()
        result = loop.end_round()
        result = loop.player_scored(player_id)  # or loop.no_one_scored()

        result = loop.end_game()
        loop.return_to_main_menu()
    """

    def __init__(self, session: GameSession):
        self.session = session
        self.selecting_category = False
        self.state = self._loop_state_for(session.state.phase)

    # Gates -----------------------------------------------------------------

    def can_start(self) -> bool:
        """Enough (but not too many) players and at least one category."""
        count = self.session.state.num_players
        return MIN_PLAYERS <= count <= MAX_PLAYERS and self.session.are_categories_selected()

    def can_add_player(self) -> bool:
        return self.session.state.num_players < MAX_PLAYERS

    # Steps -----------------------------------------------------------------

    def begin(self) -> TurnResult:
        """Start the first round."""
        self.session.start_new_game()
        return self._result(LoopState.CATEGORY_SELECTION)

    async def choose_category(self, category_id: str) -> TurnResult:
        """
        Pick a category and show its phrase.

        An empty category is retried EMPTY_RESULT_RETRIES times before the
        user is told to pick another one. A pick the session rejects
        (game over, superseded request) is reported without a retry.
        """
        if self.selecting_category:
            return self._result(self.state, success=False, alerts=[BUSY])

        self.selecting_category = True
        try:
            for attempt in range(1 + EMPTY_RESULT_RETRIES):
                if attempt:
                    logger.warning(
                        "No phrase for category %s, retrying (attempt %d)",
                        category_id,
                        attempt + 1,
                    )
                started = await self.session.select_category(category_id)
                if not started.success:
                    return self._result(self.state, success=False, error=started.error)
                if self.session.state.current_word:
                    return self._result(LoopState.WORD_DISPLAY)
        finally:
            self.selecting_category = False

        return self._result(LoopState.CATEGORY_SELECTION, success=False, alerts=[PHRASE_PROBLEM])

    async def change_word(self) -> TurnResult:
        """Swap the phrase, or skip to the next player once the budget is spent."""
        if self.session.state.word_changes_remaining > 0:
            await self.session.change_word()
            return self._result(LoopState.WORD_DISPLAY)

        self.session.next_word(None)
        return self._result(LoopState.CATEGORY_SELECTION)

    def end_round(self) -> TurnResult:
        self.session.end_round()
        return self._result(LoopState.SCORING)

    def player_scored(self, player_id: str) -> TurnResult:
        self.session.add_point(player_id)
        self.session.next_word(player_id)
        return self._result(LoopState.CATEGORY_SELECTION)

    def no_one_scored(self) -> TurnResult:
        self.session.next_word(None)
        return self._result(LoopState.CATEGORY_SELECTION)

    def end_game(self) -> TurnResult:
        """Show final standings, highest score first."""
        self.session.end_game()
        return self._result(
            LoopState.FINAL_SCORES,
            standings=self.session.sorted_players_by_score(),
        )

    def return_to_main_menu(self) -> TurnResult:
        self.session.return_to_menu()
        return self._result(LoopState.MENU)

    # Helpers ---------------------------------------------------------------

    def _result(
        self,
        loop_state: LoopState,
        success: bool = True,
        alerts: list[Alert] | None = None,
        standings: list[Player] | None = None,
        error: str | None = None,
    ) -> TurnResult:
        self.state = loop_state
        state = self.session.state
        return TurnResult(
            success=success,
            loop_state=loop_state,
            current_word=state.current_word,
            current_player=state.current_player,
            word_changes_remaining=state.word_changes_remaining,
            alerts=alerts or [],
            standings=standings or [],
            error=error,
        )

    @staticmethod
    def _loop_state_for(phase: RoundPhase) -> LoopState:
        return {
            RoundPhase.IDLE: LoopState.MENU,
            RoundPhase.CATEGORY_OFFERED: LoopState.CATEGORY_SELECTION,
            RoundPhase.WORD_SHOWN: LoopState.WORD_DISPLAY,
            RoundPhase.SCORING: LoopState.SCORING,
            RoundPhase.GAME_OVER: LoopState.FINAL_SCORES,
        }[phase]
