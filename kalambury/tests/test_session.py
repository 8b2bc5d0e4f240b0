"""
Tests for GameSession (async fetches, persistence, logging).
"""

import asyncio
import logging
import random

import pytest

from ..engine_core.state import RoundPhase, WORD_CHANGE_BUDGET
from ..errors import PhraseRepositoryError
from ..persistence import SessionSnapshot, SnapshotStorage
from ..repository import InMemoryPhraseRepository
from ..session import GameSession


class FailingRepository(InMemoryPhraseRepository):
    """Repository whose queries always blow up."""

    async def list_categories(self):
        raise PhraseRepositoryError("database is locked")

    async def list_phrases(self, category_id):
        raise PhraseRepositoryError("database is locked")


class GatedRepository(InMemoryPhraseRepository):
    """Repository that holds phrase queries until their gate is opened."""

    def __init__(self):
        super().__init__()
        self.gates: dict[str, asyncio.Event] = {}

    async def list_phrases(self, category_id):
        gate = self.gates.get(category_id)
        if gate is not None:
            await gate.wait()
        return await super().list_phrases(category_id)


async def _ready_session(session: GameSession) -> GameSession:
    await session.load_categories()
    session.toggle_category("empty-cat")
    session.add_player("Ala")
    session.add_player("Bartek")
    return session


@pytest.mark.anyio
async def test_load_categories_enables_all_on_first_run(session):
    result = await session.load_categories()

    assert result.success
    assert [c.id for c in session.state.available_categories] == ["animals", "food", "empty-cat"]
    assert session.state.selected_categories == {"animals": True, "food": True, "empty-cat": True}
    assert not session.state.is_loading


@pytest.mark.anyio
async def test_load_categories_failure_is_swallowed(caplog, storage):
    caplog.set_level(logging.ERROR)
    session = GameSession(FailingRepository(), storage=storage)
    session.toggle_category("animals")

    result = await session.load_categories()

    assert result.success
    assert session.state.available_categories == []
    assert session.state.selected_categories == {"animals": True}
    assert not session.state.is_loading
    assert "Failed to load categories" in caplog.text


@pytest.mark.anyio
async def test_scenario_two_players_two_categories(session):
    """Players [A, B], {Animals, Food} enabled: offer two, then show an animal."""
    await _ready_session(session)

    session.start_new_game()
    assert len(session.category_options) == 2
    assert {c.id for c in session.category_options} == {"animals", "food"}

    await session.select_category("animals")

    assert session.state.current_word in {"Dog", "Cat"}
    assert session.state.word_changes_remaining == 3
    assert session.state.phase == RoundPhase.WORD_SHOWN
    assert not session.state.is_loading


@pytest.mark.anyio
async def test_empty_category_logs_warning(session, caplog):
    caplog.set_level(logging.WARNING)
    await _ready_session(session)

    await session.select_category("empty-cat")

    assert session.state.current_word is None
    assert not session.state.is_loading
    assert "No phrases found for category empty-cat" in caplog.text


@pytest.mark.anyio
async def test_phrase_fetch_failure_counts_as_empty(caplog, storage):
    caplog.set_level(logging.WARNING)
    session = GameSession(FailingRepository(), storage=storage)

    result = await session.select_category("animals")

    assert result.success
    assert session.state.current_word is None
    assert not session.state.is_loading
    assert "Failed to load phrases for category animals" in caplog.text


@pytest.mark.anyio
async def test_change_word_spends_budget_until_empty(session):
    await _ready_session(session)
    session.start_new_game()
    await session.select_category("food")

    for expected in range(WORD_CHANGE_BUDGET - 1, -1, -1):
        await session.change_word()
        assert session.state.current_word in {"Pizza", "Sushi", "Taco"}
        assert session.state.word_changes_remaining == expected

    word = session.state.current_word
    result = await session.change_word()

    assert not result.success
    assert session.state.current_word == word
    assert session.state.word_changes_remaining == 0


@pytest.mark.anyio
async def test_change_word_queries_same_category(repository, storage):
    calls = []

    class RecordingRepository(InMemoryPhraseRepository):
        async def list_phrases(self, category_id):
            calls.append(category_id)
            return await repository.list_phrases(category_id)

        async def list_categories(self):
            return await repository.list_categories()

    session = GameSession(RecordingRepository(), storage=storage, rng=random.Random(0))
    await session.load_categories()
    await session.select_category("animals")
    await session.change_word()

    assert calls == ["animals", "animals"]


@pytest.mark.anyio
async def test_stale_response_does_not_overwrite_newer_pick(storage):
    repo = GatedRepository()
    repo.add_category("animals", "Animals")
    repo.add_category("food", "Food")
    repo.add_phrase("Dog", "animals")
    repo.add_phrase("Pizza", "food")
    repo.gates["animals"] = asyncio.Event()

    session = GameSession(repo, storage=storage)
    await session.load_categories()

    slow = asyncio.create_task(session.select_category("animals"))
    await asyncio.sleep(0)
    assert session.state.is_loading

    await session.select_category("food")
    assert session.state.current_word == "Pizza"

    repo.gates["animals"].set()
    stale_result = await slow

    assert stale_result.error_code == "STALE_REQUEST"
    assert session.state.current_word == "Pizza"
    assert session.state.selected_category_id == "food"
    assert not session.state.is_loading


@pytest.mark.anyio
async def test_late_word_change_does_not_leak_into_next_round(storage):
    repo = GatedRepository()
    repo.add_category("animals", "Animals")
    repo.add_phrase("Dog", "animals")

    session = GameSession(repo, storage=storage)
    await session.load_categories()
    session.add_player("Ala")
    session.add_player("Bartek")
    session.start_new_game()
    await session.select_category("animals")

    repo.gates["animals"] = asyncio.Event()
    slow = asyncio.create_task(session.change_word())
    await asyncio.sleep(0)
    assert session.state.is_loading

    session.record_guess(None)
    assert not session.state.is_loading

    repo.gates["animals"].set()
    stale_result = await slow

    assert stale_result.error_code == "STALE_REQUEST"
    assert session.state.phase == RoundPhase.CATEGORY_OFFERED
    assert session.state.current_word is None
    assert session.state.word_changes_remaining == WORD_CHANGE_BUDGET
    assert session.state.selected_category_id is None


@pytest.mark.anyio
async def test_random_word_draws_from_enabled_categories(session):
    await session.load_categories()
    session.toggle_category("animals")

    seen = set()
    for _ in range(20):
        result = await session.random_word()
        assert result.success
        seen.add(session.state.current_word)

    assert seen <= {"Pizza", "Sushi", "Taco"}
    assert not session.state.is_loading
    assert session.state.players == []


@pytest.mark.anyio
async def test_random_word_leaves_turns_and_scores_alone(session):
    await _ready_session(session)
    session.add_point(session.state.players[1].id)
    before = [(p.id, p.score) for p in session.state.players]

    await session.random_word()

    assert session.state.current_word in {"Dog", "Cat", "Pizza", "Sushi", "Taco"}
    assert [(p.id, p.score) for p in session.state.players] == before
    assert session.state.active_player_index == 0


@pytest.mark.anyio
async def test_random_word_with_empty_pool(caplog, storage):
    caplog.set_level(logging.WARNING)
    repo = InMemoryPhraseRepository()
    repo.add_category("empty-cat", "Nothing here")
    session = GameSession(repo, storage=storage)
    await session.load_categories()

    result = await session.random_word()

    assert result.success
    assert session.state.current_word is None
    assert "No phrases found in the enabled categories" in caplog.text


@pytest.mark.anyio
async def test_random_word_without_enabled_categories(session):
    result = await session.random_word()

    assert not result.success
    assert result.error_code == "INVALID_ACTION"
    assert not session.state.is_loading


@pytest.mark.anyio
async def test_record_guess_scores_and_rotates(session):
    await _ready_session(session)
    session.start_new_game()
    await session.select_category("animals")
    session.end_round()
    assert session.state.phase == RoundPhase.SCORING

    bartek = session.state.players[1]
    session.record_guess(bartek.id)

    assert session.state.get_player(bartek.id).score == 1
    assert session.current_player.id == bartek.id
    assert session.state.phase == RoundPhase.CATEGORY_OFFERED
    assert session.state.current_word is None


def test_players_and_selection_survive_restart(repository, storage):
    session = GameSession(repository, storage=storage)
    session.add_player("Ala")
    session.add_player("Bartek")
    session.toggle_category("food")
    session.add_point(session.state.players[0].id)

    restored = GameSession(repository, storage=storage)

    assert [p.name for p in restored.state.players] == ["Ala", "Bartek"]
    assert [p.score for p in restored.state.players] == [1, 0]
    assert restored.state.selected_categories == {"food": True}
    assert restored.state.current_word is None


def test_round_state_is_not_persisted(repository, storage):
    session = GameSession(repository, storage=storage)
    session.add_player("Ala")
    session.end_game()

    restored = GameSession(repository, storage=storage)
    assert restored.state.phase == RoundPhase.IDLE


def test_only_persisted_changes_are_written(repository, tmp_path):
    saves = []

    class CountingStorage(SnapshotStorage):
        def save(self, snapshot: SessionSnapshot) -> None:
            saves.append(snapshot)
            super().save(snapshot)

    session = GameSession(repository, storage=CountingStorage(tmp_path / "s.json"))
    session.add_player("Ala")
    session.end_round()
    session.end_game()

    assert len(saves) == 1


def test_session_without_storage(repository):
    session = GameSession(repository)
    result = session.add_player("Ala")

    assert result.success
    assert session.state.players[0].name == "Ala"


def test_player_ids_are_unique(session):
    for name in ("A", "B", "C", "D"):
        session.add_player(name)
    assert len({p.id for p in session.state.players}) == 4


def test_reset_scores_via_session(session):
    session.add_player("Ala")
    session.add_player("Bartek")
    for player in session.state.players:
        session.add_point(player.id)
    session.next_word(session.state.players[1].id)

    session.reset_scores()

    assert all(p.score == 0 for p in session.state.players)
    assert session.state.active_player_index == 0


def test_sorted_players_by_score(session):
    for name in ("Ala", "Bartek", "Celina"):
        session.add_player(name)
    ala, bartek, celina = session.state.players
    session.add_point(celina.id)
    session.add_point(celina.id)
    session.add_point(ala.id)

    assert [p.name for p in session.sorted_players_by_score()] == ["Celina", "Ala", "Bartek"]
