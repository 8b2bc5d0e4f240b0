"""
Selection - Randomised choices made between rounds.

Three rules live here:
1. Which categories to offer the active player
2. Which phrase to show for a chosen category
3. Who plays next once a round is scored

All functions are pure apart from the injected random generator,
so tests can pin behaviour with a seeded `random.Random`.
"""

from __future__ import annotations
import random
from typing import Sequence

from .state import Category, Phrase, Player


# How many categories are offered at the start of a round
OFFER_SIZE = 2


def generate_category_options(
    available: Sequence[Category],
    selected: dict[str, bool],
    rng: random.Random,
) -> tuple[list[Category], dict[str, bool]]:
    """
    Pick the categories offered before a round.

    Returns (options, selection). The selection is the input mapping
    unless nothing was enabled, in which case every known category is
    switched back on so the session can't dead-end.
    """
    enabled = [c for c in available if selected.get(c.id, False)]

    if not enabled and available:
        enabled = list(available)
        selected = {**selected, **{c.id: True for c in available}}

    if len(enabled) <= 1:
        return enabled, selected

    return rng.sample(enabled, OFFER_SIZE), selected


def pick_phrase(phrases: Sequence[Phrase], rng: random.Random) -> Phrase | None:
    """Uniform pick; no memory of earlier picks."""
    if not phrases:
        return None
    return rng.choice(list(phrases))


def advance_turn(
    players: Sequence[Player],
    active_index: int,
    winner_id: str | None,
    rng: random.Random,
) -> int:
    """
    Compute the next active player index.

    - 0 or 1 players: unchanged
    - Known winner: the winner goes next
    - Otherwise: anyone but the current player, uniformly
    """
    if len(players) <= 1:
        return active_index

    if winner_id is not None:
        for i, p in enumerate(players):
            if p.id == winner_id:
                return i

    candidates = [i for i in range(len(players)) if i != active_index]
    return rng.choice(candidates)
