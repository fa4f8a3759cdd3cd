"""
Deck statistics.

Counts cards by type. Each entry lands in exactly one type bucket,
picked by the first match in this order:

    creature > land > artifact > planeswalker > enchantment > spells

so an "Artifact Creature" counts as a creature and an "Artifact Land"
as a land. Stats are always recomputed from the entries, never patched.
"""

from collections.abc import Iterable
from dataclasses import asdict, dataclass

from deckblocks.models.deck import DeckCardEntry

# (type line keyword, bucket) in priority order
TYPE_BUCKETS: tuple[tuple[str, str], ...] = (
    ("creature", "creatures"),
    ("land", "lands"),
    ("artifact", "artifacts"),
    ("planeswalker", "planeswalkers"),
    ("enchantment", "enchantments"),
)

FALLBACK_BUCKET = "spells"


@dataclass(frozen=True)
class DeckStats:
    """Card counts by type."""

    total_cards: int = 0
    creatures: int = 0
    spells: int = 0
    lands: int = 0
    artifacts: int = 0
    planeswalkers: int = 0
    enchantments: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def classify_type_line(type_line: str) -> str:
    """Get the stats bucket for a type line."""
    lowered = type_line.lower()
    for keyword, bucket in TYPE_BUCKETS:
        if keyword in lowered:
            return bucket
    return FALLBACK_BUCKET


def generate_deck_stats(entries: Iterable[DeckCardEntry]) -> DeckStats:
    """
    Count cards by type.

    Args:
        entries: Entries from any number of blocks

    Returns:
        DeckStats where total_cards is the sum of all quantities
    """
    counts = {field: 0 for field in DeckStats.__dataclass_fields__}

    for entry in entries:
        counts["total_cards"] += entry.quantity
        counts[classify_type_line(entry.card.type_line)] += entry.quantity

    return DeckStats(**counts)
