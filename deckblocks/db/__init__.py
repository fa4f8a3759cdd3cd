from deckblocks.db.database import get_session, init_db
from deckblocks.db.operations import (
    DeckStore,
    db_to_deck,
    deck_to_db,
    delete_deck,
    get_deck,
    load_all_decks,
    save_deck,
)

__all__ = [
    "DeckStore",
    "db_to_deck",
    "deck_to_db",
    "delete_deck",
    "get_deck",
    "get_session",
    "init_db",
    "load_all_decks",
    "save_deck",
]
