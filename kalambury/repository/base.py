"""
Phrase Repository - Interface to the store of categories and phrases.

The session only ever reads from the repository. Both queries are
asynchronous and may fail; callers treat a failure as an empty result.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from ..engine_core.state import Category, Phrase
from .defaults import DEFAULT_CATEGORIES, DEFAULT_PHRASES


class PhraseRepository(ABC):
    """
    Abstract base class for phrase stores.

    Implementations may raise PhraseRepositoryError (or anything else);
    GameSession never lets those escape.
    """

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """Return every known category."""

    @abstractmethod
    async def list_phrases(self, category_id: str) -> list[Phrase]:
        """Return the phrases of one category (possibly none)."""


class InMemoryPhraseRepository(PhraseRepository):
    """
    Dict-backed repository.

    Usage:
        repo = InMemoryPhraseRepository.with_defaults()
        repo.add_category("animals", "Animals")
        repo.add_phrase("Dog", "animals")
    """

    def __init__(self):
        self._categories: dict[str, Category] = {}
        self._phrases: dict[str, list[Phrase]] = {}
        self._next_id = 1

    @classmethod
    def with_defaults(cls) -> InMemoryPhraseRepository:
        """Repository pre-filled with the default pool."""
        repo = cls()
        for category_id, name in DEFAULT_CATEGORIES:
            repo.add_category(category_id, name)
            for text in DEFAULT_PHRASES.get(category_id, []):
                repo.add_phrase(text, category_id)
        return repo

    def add_category(self, category_id: str, name: str) -> Category:
        category = Category(id=category_id, name=name)
        self._categories[category_id] = category
        self._phrases.setdefault(category_id, [])
        return category

    def add_phrase(self, text: str, category_id: str) -> Phrase:
        phrase = Phrase(id=str(self._next_id), text=text, category=category_id)
        self._next_id += 1
        self._phrases.setdefault(category_id, []).append(phrase)
        return phrase

    async def list_categories(self) -> list[Category]:
        return list(self._categories.values())

    async def list_phrases(self, category_id: str) -> list[Phrase]:
        return list(self._phrases.get(category_id, []))
