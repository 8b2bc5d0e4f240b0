"""
Session State - The single source of truth for a charades session.

Design principles:
- Immutable-friendly: all mutations return new state
- Serializable: persisted fields can be snapshotted and restored
- Owned: only the reducer produces new states
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum


# Number of times the active player may swap the word within one round
WORD_CHANGE_BUDGET = 3


class RoundPhase(Enum):
    """Phases of the round lifecycle."""
    IDLE = "idle"
    CATEGORY_OFFERED = "category_offered"
    WORD_SHOWN = "word_shown"
    SCORING = "scoring"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Category:
    """A word category, as served by the phrase repository."""
    id: str
    name: str


@dataclass(frozen=True)
class Phrase:
    """A single phrase to be shown to the active player."""
    id: str
    text: str
    category: str  # Category.id


@dataclass
class Player:
    """
    A player taking part in the session.

    Turn order is the order of the players sequence in SessionState.
    """
    id: str
    name: str
    score: int = 0

    def with_score(self, score: int) -> Player:
        """Return new player with a different score."""
        return Player(id=self.id, name=self.name, score=score)


@dataclass
class SessionState:
    """
    Complete session state at a point in time.

    Only `players` and `selected_categories` survive a restart; everything
    else describes the round in progress.
    """
    # Persisted
    players: list[Player] = field(default_factory=list)
    selected_categories: dict[str, bool] = field(default_factory=dict)

    # Turn tracking
    active_player_index: int = 0
    phase: RoundPhase = RoundPhase.IDLE

    # Category pool (last successful load)
    available_categories: list[Category] = field(default_factory=list)

    # Round state
    current_word: str | None = None
    selected_category_id: str | None = None
    word_changes_remaining: int = WORD_CHANGE_BUDGET
    category_options: list[Category] = field(default_factory=list)

    # Async bookkeeping
    is_loading: bool = False
    pending_request_id: int | None = None

    @property
    def current_player(self) -> Player | None:
        """Get the active player, if there is one."""
        if not self.players:
            return None
        if not 0 <= self.active_player_index < len(self.players):
            return None
        return self.players[self.active_player_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def enabled_categories(self) -> list[Category]:
        """Known categories currently switched on, in repository order."""
        return [
            c for c in self.available_categories
            if self.selected_categories.get(c.id, False)
        ]

    def enabled_category_ids(self) -> list[str]:
        """Ids switched on in the selection, known to the pool or not."""
        return [cid for cid, enabled in self.selected_categories.items() if enabled]

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def index_of(self, player_id: str) -> int | None:
        """Position of a player in turn order, or None."""
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        return None

    def are_categories_selected(self) -> bool:
        """True iff at least one category is enabled."""
        return any(self.selected_categories.values())

    def sorted_players_by_score(self) -> list[Player]:
        """Players ordered by score, highest first (ties keep turn order)."""
        return sorted(self.players, key=lambda p: p.score, reverse=True)

    def with_player(self, player: Player) -> SessionState:
        """Return new state with updated player."""
        new_players = [
            player if p.id == player.id else p
            for p in self.players
        ]
        return self._copy_with(players=new_players)

    def _copy_with(self, **kwargs) -> SessionState:
        """Create a copy with some fields replaced."""
        return SessionState(
            players=kwargs.get("players", self.players),
            selected_categories=kwargs.get("selected_categories", self.selected_categories),
            active_player_index=kwargs.get("active_player_index", self.active_player_index),
            phase=kwargs.get("phase", self.phase),
            available_categories=kwargs.get("available_categories", self.available_categories),
            current_word=kwargs.get("current_word", self.current_word),
            selected_category_id=kwargs.get("selected_category_id", self.selected_category_id),
            word_changes_remaining=kwargs.get("word_changes_remaining", self.word_changes_remaining),
            category_options=kwargs.get("category_options", self.category_options),
            is_loading=kwargs.get("is_loading", self.is_loading),
            pending_request_id=kwargs.get("pending_request_id", self.pending_request_id),
        )

    def clone(self) -> SessionState:
        """Deep copy the state."""
        return deepcopy(self)
