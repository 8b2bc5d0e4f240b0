"""Persistence of the roster and category selection between runs."""

from .snapshot import SessionSnapshot, PlayerRecord, SNAPSHOT_SCHEMA_VERSION, parse_snapshot
from .storage import SnapshotStorage, DEFAULT_STATE_PATH

__all__ = [
    "SessionSnapshot",
    "PlayerRecord",
    "SNAPSHOT_SCHEMA_VERSION",
    "parse_snapshot",
    "SnapshotStorage",
    "DEFAULT_STATE_PATH",
]
