from deckblocks.models.card import Card
from deckblocks.models.deck import (
    BLOCK_COLORS,
    CANONICAL_BLOCK_IDS,
    COMMANDERS,
    LANDS,
    MAYBEBOARD,
    NONLANDS,
    Block,
    Deck,
    DeckCardEntry,
)
from deckblocks.models.errors import (
    CardNotFoundError,
    DeckBlocksError,
    EmptyImportError,
    FormatError,
    GatewayTransportError,
    StorageError,
)

__all__ = [
    "BLOCK_COLORS",
    "CANONICAL_BLOCK_IDS",
    "COMMANDERS",
    "Block",
    "Card",
    "CardNotFoundError",
    "Deck",
    "DeckBlocksError",
    "DeckCardEntry",
    "EmptyImportError",
    "FormatError",
    "GatewayTransportError",
    "LANDS",
    "MAYBEBOARD",
    "NONLANDS",
    "StorageError",
]
