"""
Errors - Exception types raised inside the package.

None of these escape the session boundary: GameSession catches
repository errors and SnapshotStorage catches snapshot errors.
"""


class KalamburyError(Exception):
    """Base class for package errors."""


class PhraseRepositoryError(KalamburyError):
    """The phrase store could not answer a query."""


class SnapshotError(KalamburyError):
    """A persisted snapshot could not be decoded or is from a newer version."""
