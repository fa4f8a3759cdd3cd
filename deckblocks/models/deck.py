from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from deckblocks.models.card import Card

# Block color palette, cycled when blocks are added
BLOCK_COLORS: tuple[str, ...] = (
    "#ef4444",  # red
    "#3b82f6",  # blue
    "#10b981",  # green
    "#f59e0b",  # yellow
    "#8b5cf6",  # purple
    "#ec4899",  # pink
    "#6b7280",  # gray
)

COMMANDERS = "commanders"
NONLANDS = "nonlands"
LANDS = "lands"
MAYBEBOARD = "maybeboard"

# Block ids the deck list parser routes cards into
CANONICAL_BLOCK_IDS: tuple[str, ...] = (COMMANDERS, NONLANDS, LANDS, MAYBEBOARD)

DEFAULT_BLOCK_NAMES: dict[str, str] = {
    COMMANDERS: "Commanders",
    NONLANDS: "Nonlands",
    LANDS: "Lands",
    MAYBEBOARD: "Maybeboard",
}

DEFAULT_FORMAT = "Commander"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


@dataclass
class DeckCardEntry:
    """
    N copies of one card inside one block.

    Attributes:
        card: The card (immutable)
        quantity: Number of copies, always >= 1
        block_id: Id of the block holding this entry
    """

    card: Card
    quantity: int
    block_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"card": self.card.to_dict(), "quantity": self.quantity, "block_id": self.block_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any], block_id: str) -> "DeckCardEntry":
        return cls(
            card=Card.from_scryfall(data["card"]),
            quantity=int(data["quantity"]),
            block_id=block_id,
        )


@dataclass
class Block:
    """
    A named, colored group of card entries.

    Entries keep insertion order. At most one entry exists per card id.
    """

    id: str
    name: str
    color: str
    cards: list[DeckCardEntry] = field(default_factory=list)

    def find(self, card_id: str) -> DeckCardEntry | None:
        """Get the entry for a card id, or None."""
        for entry in self.cards:
            if entry.card.id == card_id:
                return entry
        return None

    def card_count(self) -> int:
        """Total copies in this block."""
        return sum(entry.quantity for entry in self.cards)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "cards": [entry.to_dict() for entry in self.cards],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Block":
        """Build a Block from its dict form. Raises ValueError on a repeated card id."""
        block_id = str(data["id"])
        entries = [DeckCardEntry.from_dict(entry, block_id) for entry in data.get("cards", [])]
        card_ids = [entry.card.id for entry in entries]
        if len(card_ids) != len(set(card_ids)):
            raise ValueError(f"block {block_id!r} lists the same card more than once")
        return cls(
            id=block_id,
            name=str(data.get("name", "")),
            color=str(data.get("color", BLOCK_COLORS[0])),
            cards=entries,
        )


@dataclass
class Deck:
    """
    A deck: metadata plus an ordered list of blocks.

    Attributes:
        name: Deck name
        blocks: Ordered blocks
        id: Storage id, None until first save
        description: Optional free text
        format: Optional free-text format (e.g., "Commander")
        total_cards: Cached sum of all entry quantities
        created_at: Creation timestamp (UTC)
        updated_at: Last structural change (UTC)
    """

    name: str
    blocks: list[Block] = field(default_factory=list)
    id: str | None = None
    description: str | None = None
    format: str | None = None
    total_cards: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def new(cls, name: str = "") -> "Deck":
        """Create an empty deck with the default commander-format blocks."""
        blocks = [
            Block(id=block_id, name=DEFAULT_BLOCK_NAMES[block_id], color=BLOCK_COLORS[i])
            for i, block_id in enumerate(CANONICAL_BLOCK_IDS)
        ]
        now = utcnow()
        return cls(
            name=name,
            blocks=blocks,
            description="",
            format=DEFAULT_FORMAT,
            created_at=now,
            updated_at=now,
        )

    def get_block(self, block_id: str) -> Block | None:
        """Get a block by id, or None."""
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def all_entries(self) -> list[DeckCardEntry]:
        """Every entry across every block."""
        return [entry for block in self.blocks for entry in block.cards]

    def count_cards(self) -> int:
        """Sum of quantities over all entries."""
        return sum(block.card_count() for block in self.blocks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "format": self.format,
            "blocks": [block.to_dict() for block in self.blocks],
            "total_cards": self.total_cards,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Deck":
        """
        Build a Deck from its dict form.

        total_cards is recomputed from the entries; any stored value is ignored.
        Raises ValueError when two blocks share an id.
        """
        blocks = [Block.from_dict(block) for block in data.get("blocks", [])]
        block_ids = [block.id for block in blocks]
        if len(block_ids) != len(set(block_ids)):
            raise ValueError("deck has more than one block with the same id")
        deck = cls(
            id=data.get("id"),
            name=str(data.get("name", "")),
            description=data.get("description"),
            format=data.get("format"),
            blocks=blocks,
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )
        deck.total_cards = deck.count_cards()
        return deck


def parse_timestamp(value: Any) -> datetime:
    """Read an ISO-8601 string or datetime as an aware UTC datetime. Empty means now."""
    if isinstance(value, datetime):
        parsed = value
    elif value:
        parsed = datetime.fromisoformat(str(value))
    else:
        return utcnow()
    # SQLite and older exports drop the offset
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
