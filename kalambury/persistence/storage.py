"""Utilities for serializing session snapshots to a local JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..errors import SnapshotError
from .snapshot import SessionSnapshot, parse_snapshot

LOGGER = logging.getLogger(__name__)
DEFAULT_STATE_PATH = Path.home() / ".kalambury" / "session.json"


class SnapshotStorage:
    """Read and write session snapshots to a JSON file."""

    def __init__(self, path: Path | str = DEFAULT_STATE_PATH) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> SessionSnapshot:
        """Load the snapshot from disk, falling back to an empty one."""

        if not self._path.exists():
            return SessionSnapshot()
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.error("Failed to read session snapshot from %s: %s", self._path, exc)
            return SessionSnapshot()
        try:
            return parse_snapshot(payload)
        except SnapshotError as exc:
            LOGGER.error("Discarding session snapshot %s: %s", self._path, exc)
            return SessionSnapshot()

    def save(self, snapshot: SessionSnapshot) -> None:
        """Write the snapshot to disk."""

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
            tmp_path.write_text(
                json.dumps(snapshot.model_dump(mode="json"), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            tmp_path.replace(self._path)
        except OSError as exc:
            LOGGER.error("Failed to persist session snapshot to %s: %s", self._path, exc)

    def clear(self) -> None:
        """Remove the persisted snapshot file entirely."""

        try:
            if self._path.exists():
                self._path.unlink()
        except OSError as exc:
            LOGGER.error("Failed to delete session snapshot %s: %s", self._path, exc)


__all__ = ["SnapshotStorage", "DEFAULT_STATE_PATH"]
