"""
Tests for the phrase repositories.
"""

import pytest

from ..errors import PhraseRepositoryError
from ..repository import (
    InMemoryPhraseRepository,
    SqlPhraseRepository,
    DEFAULT_CATEGORIES,
    DEFAULT_PHRASES,
)


@pytest.fixture
def sql_repository(tmp_path):
    repo = SqlPhraseRepository(f"sqlite:///{tmp_path / 'phrases.db'}")
    repo.create_tables()
    yield repo
    repo.dispose()


class TestInMemoryRepository:
    """Tests for InMemoryPhraseRepository."""

    @pytest.mark.anyio
    async def test_defaults(self):
        repo = InMemoryPhraseRepository.with_defaults()

        categories = await repo.list_categories()
        assert [c.id for c in categories] == [cid for cid, _ in DEFAULT_CATEGORIES]

        phrases = await repo.list_phrases("animals")
        assert [p.text for p in phrases] == DEFAULT_PHRASES["animals"]
        assert all(p.category == "animals" for p in phrases)

    @pytest.mark.anyio
    async def test_unknown_category_is_empty(self):
        repo = InMemoryPhraseRepository()
        assert await repo.list_phrases("nope") == []

    def test_phrase_ids_are_unique(self):
        repo = InMemoryPhraseRepository.with_defaults()
        ids = [p.id for phrases in repo._phrases.values() for p in phrases]
        assert len(ids) == len(set(ids))


class TestSqlRepository:
    """Tests for SqlPhraseRepository."""

    @pytest.mark.anyio
    async def test_seed_and_query(self, sql_repository):
        assert sql_repository.initialize_default_data() is True

        categories = await sql_repository.list_categories()
        assert {c.id for c in categories} == {cid for cid, _ in DEFAULT_CATEGORIES}

        phrases = await sql_repository.list_phrases("food")
        assert sorted(p.text for p in phrases) == sorted(DEFAULT_PHRASES["food"])

    def test_seed_is_skipped_when_data_exists(self, sql_repository):
        assert sql_repository.initialize_default_data() is True
        assert sql_repository.initialize_default_data() is False

    @pytest.mark.anyio
    async def test_add_category_and_phrase(self, sql_repository):
        sql_repository.add_category("empty-cat", "Empty")
        phrase = sql_repository.add_phrase("Kangaroo", "animals")

        assert phrase.text == "Kangaroo"
        assert phrase.id
        assert await sql_repository.list_phrases("empty-cat") == []
        assert [p.text for p in await sql_repository.list_phrases("animals")] == ["Kangaroo"]

    def test_duplicate_category_raises_repository_error(self, sql_repository):
        sql_repository.add_category("animals", "Animals")
        with pytest.raises(PhraseRepositoryError):
            sql_repository.add_category("animals", "Animals again")

    @pytest.mark.anyio
    async def test_missing_tables_raise_repository_error(self, tmp_path):
        repo = SqlPhraseRepository(f"sqlite:///{tmp_path / 'bare.db'}")
        with pytest.raises(PhraseRepositoryError):
            await repo.list_categories()
        repo.dispose()

    @pytest.mark.anyio
    async def test_in_memory_database_is_shared_across_threads(self):
        repo = SqlPhraseRepository("sqlite:///:memory:")
        repo.create_tables()
        repo.initialize_default_data()

        assert len(await repo.list_categories()) == len(DEFAULT_CATEGORIES)
        repo.dispose()
