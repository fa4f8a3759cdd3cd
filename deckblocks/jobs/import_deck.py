"""
Import a deck list file into the deck store.

Validates the file, resolves every card through Scryfall, sorts the cards
into the default blocks and saves the result as a new deck.

    python -m deckblocks.jobs.import_deck my-deck.txt --name "Atraxa Superfriends"
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from deckblocks.db.database import async_session_factory, init_db
from deckblocks.db.operations import DeckStore
from deckblocks.models.deck import Deck
from deckblocks.models.errors import EmptyImportError, FormatError, StorageError
from deckblocks.services.deck_editor import DeckEditor
from deckblocks.services.scryfall import CardLookupGateway, ScryfallClient

logger = logging.getLogger(__name__)


async def import_deck_file(
    path: Path,
    name: str | None,
    gateway: CardLookupGateway,
    store: DeckStore,
) -> Deck:
    """
    Import a deck list file and save it as a new deck.

    Args:
        path: Deck list text file
        name: Deck name. Defaults to the file name without extension.
        gateway: Card lookup gateway
        store: Deck store to save into

    Returns:
        The saved deck

    Raises:
        FormatError: If the file has invalid lines
        EmptyImportError: If no card could be resolved
        StorageError: If the deck cannot be saved
    """
    text = path.read_text(encoding="utf-8")

    editor = DeckEditor(Deck.new(name or path.stem), gateway=gateway)
    result = await editor.import_deck(text)
    for card_name in result.unresolved:
        logger.warning("Skipped unknown card: %s", card_name)

    saved = await editor.save_deck(store)
    logger.info(
        "Saved deck %r (%s): %d different cards, %d total",
        saved.name,
        saved.id,
        result.unique_cards,
        saved.total_cards,
    )
    return saved


async def run_import(path: Path, name: str | None) -> int:
    """Run the import against the configured database. Returns an exit code."""
    await init_db()
    store = DeckStore(async_session_factory)

    try:
        async with ScryfallClient() as client:
            await import_deck_file(path, name, client, store)
    except FormatError as e:
        for error in e.errors:
            logger.error(error)
        return 1
    except (EmptyImportError, StorageError, OSError) as e:
        logger.error("%s", e)
        return 1

    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Import a deck list into the deck store")
    parser.add_argument("path", type=Path, help="Deck list text file")
    parser.add_argument("--name", help="Deck name (defaults to the file name)")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(run_import(args.path, args.name)))


if __name__ == "__main__":
    main()
