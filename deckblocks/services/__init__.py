"""
DeckBlocks services.

Deck editing, statistics, deck list export and the card lookup gateway.
"""

from deckblocks.services.deck_editor import DeckEditor, ImportResult
from deckblocks.services.deck_formatter import export_deck, export_filename
from deckblocks.services.deck_stats import DeckStats, generate_deck_stats
from deckblocks.services.scryfall import CardLookupGateway, ScryfallClient, SearchPage

__all__ = [
    "CardLookupGateway",
    "DeckEditor",
    "DeckStats",
    "ImportResult",
    "ScryfallClient",
    "SearchPage",
    "export_deck",
    "export_filename",
    "generate_deck_stats",
]
