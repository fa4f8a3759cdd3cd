from deckblocks.parsers.deck_list import (
    DeckLine,
    FormatValidation,
    ParseResult,
    parse_deck_list,
    read_deck_lines,
    resolve_deck_list,
    route_block,
    validate_deck_format,
)

__all__ = [
    "DeckLine",
    "FormatValidation",
    "ParseResult",
    "parse_deck_list",
    "read_deck_lines",
    "resolve_deck_list",
    "route_block",
    "validate_deck_format",
]
