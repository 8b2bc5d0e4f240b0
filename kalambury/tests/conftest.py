"""
Pytest fixtures for Kalambury tests.
"""

import random

import pytest

from ..engine_core.state import SessionState, Player, Category
from ..persistence import SnapshotStorage
from ..repository import InMemoryPhraseRepository
from ..session import GameSession


ANIMALS = Category(id="animals", name="Animals")
FOOD = Category(id="food", name="Food & Drinks")


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only."""
    return "asyncio"


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def repository() -> InMemoryPhraseRepository:
    """Two small categories plus one with no phrases."""
    repo = InMemoryPhraseRepository()
    repo.add_category("animals", "Animals")
    repo.add_category("food", "Food & Drinks")
    repo.add_category("empty-cat", "Nothing here")
    for text in ("Dog", "Cat"):
        repo.add_phrase(text, "animals")
    for text in ("Pizza", "Sushi", "Taco"):
        repo.add_phrase(text, "food")
    return repo


@pytest.fixture
def storage(tmp_path) -> SnapshotStorage:
    return SnapshotStorage(tmp_path / "session.json")


@pytest.fixture
def session(repository, storage, rng) -> GameSession:
    """Fresh persisted session with no players."""
    return GameSession(repository, storage=storage, rng=rng)


@pytest.fixture
def three_players() -> list[Player]:
    return [
        Player(id="a", name="Ala"),
        Player(id="b", name="Bartek"),
        Player(id="c", name="Celina"),
    ]


@pytest.fixture
def round_state(three_players) -> SessionState:
    """State with three players and two enabled categories, ready to play."""
    return SessionState(
        players=three_players,
        available_categories=[ANIMALS, FOOD],
        selected_categories={"animals": True, "food": True},
    )
