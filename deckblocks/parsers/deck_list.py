"""
Parser for plain-text deck lists.

Format:
    <quantity>[x] <card name>

Example:
    // Commander
    1 Atraxa, Grand Unifier
    // Main
    4 Lightning Bolt
    10x Forest

Lines starting with "//" or "#" are comments. A comment containing
"commander" switches the current section to the commanders block; one
containing "outside", "sideboard" or "maybe" switches to the maybeboard;
one containing "land" (such as "Nonlands" or "Lands") switches back to
nonlands. Any other comment is a label and leaves the section unchanged.
Every parse starts in the nonlands section.

Cards read in the nonlands section are routed to the lands block when
their type line is a land and nothing else. The lands block is never a
section a comment can select.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from deckblocks.config import MAX_QUANTITY, MIN_QUANTITY, settings
from deckblocks.models.card import Card
from deckblocks.models.deck import (
    CANONICAL_BLOCK_IDS,
    COMMANDERS,
    LANDS,
    MAYBEBOARD,
    NONLANDS,
    DeckCardEntry,
)
from deckblocks.models.errors import CardNotFoundError, GatewayTransportError

if TYPE_CHECKING:
    from deckblocks.services.scryfall import CardLookupGateway

logger = logging.getLogger(__name__)

# Pattern: "4 Lightning Bolt" or "4x Lightning Bolt"
# Groups: (quantity, card_name)
CARD_LINE_PATTERN = re.compile(r"^(\d+)x?\s+(.+)$")

COMMENT_MARKERS = ("//", "#")

MAYBEBOARD_KEYWORDS = ("outside", "sideboard", "maybe")

LAND_KEYWORD = "land"

NONLAND_TYPES = ("creature", "artifact", "enchantment", "planeswalker", "instant", "sorcery")


@dataclass(frozen=True)
class FormatValidation:
    """Result of validating deck list text."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DeckLine:
    """A well-formed card line and the section it was read in."""

    line_number: int
    section: str
    quantity: int
    name: str


@dataclass
class ParseResult:
    """
    Resolved deck list.

    Attributes:
        blocks: Canonical block id -> entries, all four ids always present
        unresolved: Card names the gateway could not resolve, in line order
    """

    blocks: dict[str, list[DeckCardEntry]]
    unresolved: list[str] = field(default_factory=list)

    def unique_cards(self) -> int:
        return sum(len(entries) for entries in self.blocks.values())

    def total_cards(self) -> int:
        return sum(entry.quantity for entries in self.blocks.values() for entry in entries)


def _content_lines(text: str) -> list[tuple[int, str]]:
    """Stripped non-blank lines, numbered from 1 as they appear."""
    stripped = (raw_line.strip() for raw_line in text.split("\n"))
    return list(enumerate((line for line in stripped if line), 1))


def _comment_body(line: str) -> str | None:
    """Return the text after a comment marker, or None if not a comment."""
    for marker in COMMENT_MARKERS:
        if line.startswith(marker):
            return line[len(marker) :].strip()
    return None


def detect_section(comment: str, current: str) -> str:
    """
    Apply a comment directive to the current section.

    Returns the new section, or `current` when the comment is just a label.
    """
    text = comment.lower()
    if "commander" in text:
        return COMMANDERS
    if any(keyword in text for keyword in MAYBEBOARD_KEYWORDS):
        return MAYBEBOARD
    if LAND_KEYWORD in text:
        return NONLANDS
    return current


def route_block(card: Card, section: str) -> str:
    """
    Pick the canonical block for a card read in `section`.

    Commander and maybeboard sections keep their cards. In the nonlands
    section, a card goes to lands only when its type line names a land and
    no nonland type; dual-typed and unrecognized type lines stay in nonlands.
    """
    if section != NONLANDS:
        return section

    type_line = card.type_line.lower()
    has_land = "land" in type_line
    has_nonland = any(card_type in type_line for card_type in NONLAND_TYPES)

    if has_land and not has_nonland:
        return LANDS
    return NONLANDS


def validate_deck_format(text: str) -> FormatValidation:
    """
    Check deck list syntax without resolving any card names.

    Every offending line is reported, not just the first. Line numbers
    count non-blank lines only, starting at 1.

    Args:
        text: Raw deck list

    Returns:
        FormatValidation with is_valid and the list of line errors
    """
    errors: list[str] = []

    for line_num, line in _content_lines(text):
        if _comment_body(line) is not None:
            continue

        match = CARD_LINE_PATTERN.match(line)
        if not match:
            errors.append(f"Line {line_num}: invalid format")
            continue

        quantity_str, name = match.groups()
        quantity = int(quantity_str)
        if quantity < MIN_QUANTITY or quantity > MAX_QUANTITY:
            errors.append(f"Line {line_num}: invalid quantity")

        if not name.strip():
            errors.append(f"Line {line_num}: missing card name")

    return FormatValidation(is_valid=not errors, errors=errors)


def read_deck_lines(text: str) -> list[DeckLine]:
    """
    Walk the deck list and collect card lines with their sections.

    Malformed lines and zero quantities are skipped; run
    validate_deck_format first to report them.
    """
    section = NONLANDS
    lines: list[DeckLine] = []

    for line_num, line in _content_lines(text):
        comment = _comment_body(line)
        if comment is not None:
            section = detect_section(comment, section)
            continue

        match = CARD_LINE_PATTERN.match(line)
        if not match:
            continue

        quantity_str, name = match.groups()
        quantity = int(quantity_str)
        name = name.strip()
        if quantity < MIN_QUANTITY or not name:
            continue

        lines.append(DeckLine(line_number=line_num, section=section, quantity=quantity, name=name))

    return lines


async def resolve_deck_list(text: str, gateway: CardLookupGateway) -> ParseResult:
    """
    Parse a deck list and resolve every card through the gateway.

    Lookups run concurrently. A card that cannot be resolved is logged
    and skipped; it never aborts the rest of the list. Results are
    assembled only after every lookup has settled, in source line order.

    Args:
        text: Raw deck list
        gateway: Card lookup gateway used for exact-name resolution

    Returns:
        ParseResult with entries for each canonical block
    """
    deck_lines = read_deck_lines(text)
    limit = asyncio.Semaphore(max(1, settings.lookup_concurrency))

    async def resolve(deck_line: DeckLine) -> Card | None:
        async with limit:
            try:
                return await gateway.get_card_by_name(deck_line.name)
            except (CardNotFoundError, GatewayTransportError) as e:
                logger.warning(
                    "Could not find card on line %d (%s): %s",
                    deck_line.line_number,
                    deck_line.name,
                    e,
                )
                return None

    cards = await asyncio.gather(*(resolve(deck_line) for deck_line in deck_lines))

    result = ParseResult(blocks={block_id: [] for block_id in CANONICAL_BLOCK_IDS})

    for deck_line, card in zip(deck_lines, cards, strict=True):
        if card is None:
            result.unresolved.append(deck_line.name)
            continue

        block_id = route_block(card, deck_line.section)
        entries = result.blocks[block_id]

        existing = next((entry for entry in entries if entry.card.id == card.id), None)
        if existing is not None:
            existing.quantity += deck_line.quantity
        else:
            entries.append(DeckCardEntry(card=card, quantity=deck_line.quantity, block_id=block_id))

    return result


async def parse_deck_list(
    text: str, gateway: CardLookupGateway
) -> dict[str, list[DeckCardEntry]]:
    """
    Parse a deck list into canonical block id -> entries.

    Convenience wrapper over resolve_deck_list that drops the list of
    unresolved names.
    """
    result = await resolve_deck_list(text, gateway)
    return result.blocks
