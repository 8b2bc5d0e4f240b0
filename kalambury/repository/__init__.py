"""
Repository module - Where categories and phrases come from.

Provides:
- PhraseRepository: Interface consumed by the session
- InMemoryPhraseRepository: Dict-backed store
- SqlPhraseRepository: SQLite store with default seed data
"""

from .base import PhraseRepository, InMemoryPhraseRepository
from .sqlite import SqlPhraseRepository
from .defaults import DEFAULT_CATEGORIES, DEFAULT_PHRASES

__all__ = [
    "PhraseRepository",
    "InMemoryPhraseRepository",
    "SqlPhraseRepository",
    "DEFAULT_CATEGORIES",
    "DEFAULT_PHRASES",
]
