"""
Deck list formatter.

Renders a deck as plain text that the deck list parser reads back:

    // <deck name>
    // <description>

    // <block name>
    <quantity> <card name>
    ...

Empty blocks are omitted. Block names become comment lines, so a block
named after a section keyword ("Commanders", "Maybeboard") switches the
parser's section when the text is imported again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deckblocks.models.deck import Deck, DeckCardEntry


def export_deck(deck: Deck) -> str:
    """
    Format a deck as deck list text.

    Args:
        deck: The deck to export

    Returns:
        Deck list text, ending with a blank line
    """
    lines: list[str] = [f"// {deck.name}"]
    if deck.description:
        lines.append(f"// {deck.description}")
    lines.append("")

    for block in deck.blocks:
        if not block.cards:
            continue
        lines.append(f"// {block.name}")
        for entry in block.cards:
            lines.append(_format_card_line(entry))
        lines.append("")

    return "\n".join(lines) + "\n"


def export_filename(deck: Deck) -> str:
    """File name for a downloaded deck list."""
    name = deck.name.strip()
    return f"{name or 'deck'}.txt"


def _format_card_line(entry: DeckCardEntry) -> str:
    """Format a single card line."""
    return f"{entry.quantity} {entry.card.name}"
