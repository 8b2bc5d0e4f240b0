"""
Session Snapshot - Versioned schema for the persisted part of a session.

Only the roster and the category selection survive a restart. Every
payload carries `schema_version`; older payloads are migrated forward
before validation, newer ones are rejected.

Version history:
- 0: legacy key-value blob {"state": {"selectedCategories", "players"}, "version": 0}
- 1: {"schema_version": 1, "selected_categories", "players"}
"""

from __future__ import annotations
from typing import Any, Callable

from pydantic import BaseModel, Field, ValidationError

from ..engine_core.state import Player, SessionState
from ..errors import SnapshotError


SNAPSHOT_SCHEMA_VERSION = 1


class PlayerRecord(BaseModel):
    """A persisted player."""
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    score: int = Field(default=0, ge=0)

    model_config = {"from_attributes": True}


class SessionSnapshot(BaseModel):
    """Everything written to durable storage."""
    schema_version: int = SNAPSHOT_SCHEMA_VERSION
    selected_categories: dict[str, bool] = Field(default_factory=dict)
    players: list[PlayerRecord] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: SessionState) -> SessionSnapshot:
        return cls(
            selected_categories=dict(state.selected_categories),
            players=[PlayerRecord.model_validate(p) for p in state.players],
        )

    def apply_to(self, state: SessionState) -> SessionState:
        """Return `state` with the persisted fields restored."""
        return state._copy_with(
            players=[Player(id=p.id, name=p.name, score=p.score) for p in self.players],
            selected_categories=dict(self.selected_categories),
            active_player_index=0,
        )


def _migrate_v0(payload: dict[str, Any]) -> dict[str, Any]:
    state = payload.get("state") or {}
    return {
        "schema_version": 1,
        "selected_categories": state.get("selectedCategories") or {},
        "players": state.get("players") or [],
    }


# version -> function producing the payload of the next version
MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    0: _migrate_v0,
}


def _detect_version(payload: dict[str, Any]) -> int:
    if "schema_version" in payload:
        return int(payload["schema_version"])
    if "state" in payload:
        return int(payload.get("version", 0))
    raise SnapshotError("Snapshot has no schema version")


def parse_snapshot(payload: Any) -> SessionSnapshot:
    """
    Validate a decoded JSON payload, migrating it if needed.

    Raises SnapshotError for anything that can't be turned into a
    current-version snapshot.
    """
    if not isinstance(payload, dict):
        raise SnapshotError(f"Snapshot must be an object, got {type(payload).__name__}")

    try:
        version = _detect_version(payload)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid schema version: {exc}") from exc

    if version > SNAPSHOT_SCHEMA_VERSION:
        raise SnapshotError(
            f"Snapshot version {version} is newer than supported version {SNAPSHOT_SCHEMA_VERSION}"
        )

    while version < SNAPSHOT_SCHEMA_VERSION:
        migrate = MIGRATIONS.get(version)
        if migrate is None:
            raise SnapshotError(f"No migration from snapshot version {version}")
        payload = migrate(payload)
        version = _detect_version(payload)

    try:
        return SessionSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot: {exc}") from exc
