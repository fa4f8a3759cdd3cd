from deckblocks.api.decks import router as decks_router
from deckblocks.api.health import router as health_router
from deckblocks.api.scryfall import router as scryfall_router

__all__ = [
    "decks_router",
    "health_router",
    "scryfall_router",
]
