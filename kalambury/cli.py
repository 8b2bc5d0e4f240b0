"""
Kalambury CLI - Command-line interface for a persisted session.

Usage:
    kalambury init-db                  Create and seed the phrase store
    kalambury categories               List categories and whether they are enabled
    kalambury toggle <category_id>     Enable/disable a category
    kalambury players                  List players with scores
    kalambury add-player <name>        Add a player
    kalambury remove-player <id>       Remove a player
    kalambury reset-scores             Zero all scores
    kalambury draw [--category ID]     Start a round and print the phrase
    kalambury quick [--count N]        Quick play: random phrases from enabled categories
"""

import argparse
import asyncio
import random
import sys

from .config import Settings
from .logging_utils import configure_logging
from .persistence import SnapshotStorage
from .repository import SqlPhraseRepository
from .session import GameSession, GameLoop, MIN_PLAYERS, MAX_PLAYERS


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Kalambury - Charades Session Engine",
        prog="kalambury",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("init-db", help="Create and seed the phrase store")
    subparsers.add_parser("categories", help="List categories")

    toggle_parser = subparsers.add_parser("toggle", help="Enable/disable a category")
    toggle_parser.add_argument("category_id", help="Category id")

    subparsers.add_parser("players", help="List players")

    add_parser = subparsers.add_parser("add-player", help="Add a player")
    add_parser.add_argument("name", help="Player name")

    remove_parser = subparsers.add_parser("remove-player", help="Remove a player")
    remove_parser.add_argument("player_id", help="Player id (see `players`)")

    subparsers.add_parser("reset-scores", help="Zero all scores")

    draw_parser = subparsers.add_parser("draw", help="Start a round and print the phrase")
    draw_parser.add_argument("--category", help="Category id (default: first offered)")

    quick_parser = subparsers.add_parser("quick", help="Quick play: random phrases, no turns")
    quick_parser.add_argument("--count", "-n", type=int, default=1, help="Number of phrases to draw")

    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(level=settings.log_level)

    commands = {
        "init-db": cmd_init_db,
        "categories": cmd_categories,
        "toggle": cmd_toggle,
        "players": cmd_players,
        "add-player": cmd_add_player,
        "remove-player": cmd_remove_player,
        "reset-scores": cmd_reset_scores,
        "draw": cmd_draw,
        "quick": cmd_quick,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    command(args, settings)


def _open_repository(settings: Settings) -> SqlPhraseRepository:
    repository = SqlPhraseRepository(settings.database_url)
    repository.create_tables()
    return repository


def _open_session(settings: Settings) -> GameSession:
    rng = random.Random(settings.random_seed) if settings.random_seed is not None else None
    return GameSession(
        _open_repository(settings),
        storage=SnapshotStorage(settings.state_path),
        rng=rng,
    )


def cmd_init_db(args, settings):
    """Create and seed the phrase store."""
    repository = _open_repository(settings)
    if repository.initialize_default_data():
        print("Phrase store initialized with default data")
    else:
        print("Phrase store already initialized")


def cmd_categories(args, settings):
    """List categories and whether they are enabled."""
    session = _open_session(settings)
    asyncio.run(session.load_categories())

    state = session.state
    if not state.available_categories:
        print("No categories. Run `kalambury init-db` first.")
        return
    for category in state.available_categories:
        mark = "x" if state.selected_categories.get(category.id, False) else " "
        print(f"[{mark}] {category.id:<12} {category.name}")


def cmd_toggle(args, settings):
    """Enable/disable a category."""
    session = _open_session(settings)
    session.toggle_category(args.category_id)
    enabled = session.state.selected_categories[args.category_id]
    print(f"{args.category_id}: {'enabled' if enabled else 'disabled'}")


def cmd_players(args, settings):
    """List players with scores."""
    session = _open_session(settings)
    if not session.state.players:
        print("No players")
        return
    for player in session.state.players:
        print(f"{player.id}  {player.name:<20} {player.score}")


def cmd_add_player(args, settings):
    """Add a player."""
    session = _open_session(settings)
    if session.state.num_players >= MAX_PLAYERS:
        print(f"Error: at most {MAX_PLAYERS} players")
        sys.exit(1)

    result = session.add_player(args.name)
    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)
    player = session.state.players[-1]
    print(f"Added {player.name} ({player.id})")


def cmd_remove_player(args, settings):
    """Remove a player."""
    session = _open_session(settings)
    result = session.remove_player(args.player_id)
    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)
    print(result.state_changes[0])


def cmd_reset_scores(args, settings):
    """Zero all scores."""
    session = _open_session(settings)
    session.reset_scores()
    print("Scores reset")


def cmd_draw(args, settings):
    """Start a round and print the phrase."""
    session = _open_session(settings)
    asyncio.run(session.load_categories())

    loop = GameLoop(session)
    if not loop.can_start():
        print(f"Error: need {MIN_PLAYERS}-{MAX_PLAYERS} players and at least one enabled category")
        sys.exit(1)

    loop.begin()
    offered = session.category_options
    category_id = args.category or (offered[0].id if offered else None)
    if category_id is None:
        print("Error: no categories to offer")
        sys.exit(1)

    result = asyncio.run(loop.choose_category(category_id))
    if not result.success:
        for alert in result.alerts:
            print(f"{alert.title}: {alert.message}")
        sys.exit(1)

    print(f"Offered: {', '.join(c.name for c in offered)}")
    print(f"Player: {result.current_player.name}")
    print(f"Phrase: {result.current_word}")



def cmd_quick(args, settings):
    """Quick play: random phrases from enabled categories."""
    session = _open_session(settings)

    async def draw():
        await session.load_categories()
        session.start_new_game()
        words = []
        for _ in range(max(args.count, 1)):
            await session.random_word()
            words.append(session.state.current_word)
        return words

    for word in asyncio.run(draw()):
        print(f"Phrase: {word}" if word else "No phrase available")


if __name__ == "__main__":
    main()
