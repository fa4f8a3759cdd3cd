"""Tests for deck list validation and parsing."""

import pytest

from deckblocks.models.deck import CANONICAL_BLOCK_IDS
from deckblocks.parsers.deck_list import (
    detect_section,
    parse_deck_list,
    read_deck_lines,
    resolve_deck_list,
    route_block,
    validate_deck_format,
)


def _summary(blocks) -> dict[str, list[tuple[str, int]]]:
    return {
        block_id: [(entry.card.name, entry.quantity) for entry in entries]
        for block_id, entries in blocks.items()
    }


class TestValidateDeckFormat:
    def test_valid_list(self) -> None:
        result = validate_deck_format("4 Lightning Bolt\n1 Sol Ring")

        assert result.is_valid is True
        assert result.errors == []

    def test_reports_every_error(self) -> None:
        text = "4 Lightning Bolt\n0 Island\nfoo\n// Commander\n1 Atraxa"
        result = validate_deck_format(text)

        assert result.is_valid is False
        assert result.errors == ["Line 2: invalid quantity", "Line 3: invalid format"]

    def test_quantity_upper_bound(self) -> None:
        assert validate_deck_format("99 Relentless Rats").is_valid is True
        assert validate_deck_format("100 Relentless Rats").errors == ["Line 1: invalid quantity"]

    def test_x_suffix_is_accepted(self) -> None:
        assert validate_deck_format("4x Lightning Bolt").is_valid is True

    def test_comments_and_blank_lines_ignored(self) -> None:
        text = "// Deck name\n\n# anything goes here\n   \n4 Lightning Bolt"
        assert validate_deck_format(text).is_valid is True

    def test_line_numbers_skip_blank_lines(self) -> None:
        result = validate_deck_format("4 Lightning Bolt\n\nnot a card")

        assert result.errors == ["Line 2: invalid format"]

    def test_line_numbers_count_comments(self) -> None:
        result = validate_deck_format("// Burn\n\n   \n4 Lightning Bolt\n0 Island")

        assert result.errors == ["Line 3: invalid quantity"]

    def test_quantity_without_name(self) -> None:
        result = validate_deck_format("4")

        assert result.errors == ["Line 1: invalid format"]

    def test_empty_text_is_valid(self) -> None:
        result = validate_deck_format("")

        assert result.is_valid is True


class TestDetectSection:
    @pytest.mark.parametrize(
        ("comment", "expected"),
        [
            ("Commander", "commanders"),
            ("COMMANDERS", "commanders"),
            ("Sideboard", "maybeboard"),
            ("Maybeboard", "maybeboard"),
            ("Cards outside the deck", "maybeboard"),
            ("Ramp package", "nonlands"),
            ("Lands", "nonlands"),
            ("Nonlands", "nonlands"),
            ("Basic lands", "nonlands"),
        ],
    )
    def test_directives(self, comment: str, expected: str) -> None:
        assert detect_section(comment, "nonlands") == expected

    def test_label_keeps_current_section(self) -> None:
        assert detect_section("Ramp package", "commanders") == "commanders"
        assert detect_section("Ramp package", "maybeboard") == "maybeboard"

    def test_nonlands_switches_back(self) -> None:
        assert detect_section("nonlands implied", "commanders") == "nonlands"

    def test_lands_switches_back(self) -> None:
        assert detect_section("Lands", "commanders") == "nonlands"
        assert detect_section("Lands", "maybeboard") == "nonlands"

    def test_maybeboard_wins_over_lands(self) -> None:
        assert detect_section("Maybe lands", "nonlands") == "maybeboard"

    def test_commander_wins_over_other_keywords(self) -> None:
        assert detect_section("Commander maybes", "nonlands") == "commanders"


class TestRouteBlock:
    def test_basic_land_goes_to_lands(self, cards) -> None:
        assert route_block(cards["Forest"], "nonlands") == "lands"

    def test_instant_stays_in_nonlands(self, cards) -> None:
        assert route_block(cards["Lightning Bolt"], "nonlands") == "nonlands"

    def test_land_creature_stays_in_nonlands(self, cards) -> None:
        assert route_block(cards["Dryad Arbor"], "nonlands") == "nonlands"

    def test_unrecognized_type_stays_in_nonlands(self, card_factory) -> None:
        card = card_factory("Some Tribal Thing", "Kindred — Goblin")
        assert route_block(card, "nonlands") == "nonlands"

    def test_commander_section_is_kept(self, cards) -> None:
        assert route_block(cards["Forest"], "commanders") == "commanders"

    def test_maybeboard_section_is_kept(self, cards) -> None:
        assert route_block(cards["Forest"], "maybeboard") == "maybeboard"


class TestReadDeckLines:
    def test_sections_persist_until_changed(self) -> None:
        text = "1 A\n// Commander\n1 B\n// just a label\n1 C\n# Sideboard\n1 D"
        lines = read_deck_lines(text)

        assert [(line.name, line.section) for line in lines] == [
            ("A", "nonlands"),
            ("B", "commanders"),
            ("C", "commanders"),
            ("D", "maybeboard"),
        ]

    def test_each_parse_starts_in_nonlands(self) -> None:
        read_deck_lines("// Commander\n1 A")
        lines = read_deck_lines("1 B")

        assert lines[0].section == "nonlands"

    def test_skips_malformed_lines(self) -> None:
        lines = read_deck_lines("foo\n0 Island\n2x Island")

        assert len(lines) == 1
        assert lines[0].quantity == 2
        assert lines[0].name == "Island"
        assert lines[0].line_number == 3

    def test_line_numbers_skip_blank_lines(self) -> None:
        lines = read_deck_lines("\n// Commander\n\n1 Atraxa, Grand Unifier")

        assert lines[0].line_number == 2


class TestParseDeckList:
    async def test_section_routing(self, gateway) -> None:
        text = (
            "// Commander\n1 Atraxa, Grand Unifier\n// nonlands implied\n"
            "4 Lightning Bolt\n10 Forest"
        )
        blocks = await parse_deck_list(text, gateway)

        assert _summary(blocks) == {
            "commanders": [("Atraxa, Grand Unifier", 1)],
            "nonlands": [("Lightning Bolt", 4)],
            "lands": [("Forest", 10)],
            "maybeboard": [],
        }

    async def test_section_routing_from_nonlands(self, gateway) -> None:
        text = "4 Lightning Bolt\n10 Forest\n// Commander\n1 Atraxa, Grand Unifier"
        blocks = await parse_deck_list(text, gateway)

        assert _summary(blocks) == {
            "commanders": [("Atraxa, Grand Unifier", 1)],
            "nonlands": [("Lightning Bolt", 4)],
            "lands": [("Forest", 10)],
            "maybeboard": [],
        }

    async def test_always_returns_all_canonical_blocks(self, gateway) -> None:
        blocks = await parse_deck_list("", gateway)

        assert set(blocks) == set(CANONICAL_BLOCK_IDS)
        assert all(entries == [] for entries in blocks.values())

    async def test_merges_repeated_cards_in_block(self, gateway) -> None:
        blocks = await parse_deck_list("2 Lightning Bolt\n2x Lightning Bolt", gateway)

        assert _summary(blocks)["nonlands"] == [("Lightning Bolt", 4)]

    async def test_same_card_in_different_blocks_not_merged(self, gateway) -> None:
        blocks = await parse_deck_list("2 Counterspell\n// Maybe\n1 Counterspell", gateway)

        assert _summary(blocks)["nonlands"] == [("Counterspell", 2)]
        assert _summary(blocks)["maybeboard"] == [("Counterspell", 1)]

    async def test_entries_carry_block_ids(self, gateway) -> None:
        blocks = await parse_deck_list("10 Forest\n4 Lightning Bolt", gateway)

        assert blocks["lands"][0].block_id == "lands"
        assert blocks["nonlands"][0].block_id == "nonlands"

    async def test_unknown_card_is_skipped(self, gateway) -> None:
        result = await resolve_deck_list("4 Lightning Bolt\n1 Not A Real Card\n1 Sol Ring", gateway)

        assert _summary(result.blocks)["nonlands"] == [("Lightning Bolt", 4), ("Sol Ring", 1)]
        assert result.unresolved == ["Not A Real Card"]

    async def test_transport_failure_is_skipped(self, gateway_factory, cards) -> None:
        gateway = gateway_factory(list(cards.values()), failing={"Sol Ring"})
        result = await resolve_deck_list("4 Lightning Bolt\n1 Sol Ring", gateway)

        assert _summary(result.blocks)["nonlands"] == [("Lightning Bolt", 4)]
        assert result.unresolved == ["Sol Ring"]

    async def test_preserves_line_order(self, gateway) -> None:
        blocks = await parse_deck_list("1 Sol Ring\n4 Lightning Bolt\n1 Rhystic Study", gateway)

        assert [entry.card.name for entry in blocks["nonlands"]] == [
            "Sol Ring",
            "Lightning Bolt",
            "Rhystic Study",
        ]

    async def test_totals(self, gateway, sample_deck_list: str) -> None:
        result = await resolve_deck_list(sample_deck_list, gateway)

        assert result.unique_cards() == 6
        assert result.total_cards() == 19

    async def test_sample_deck_list(self, gateway, sample_deck_list: str) -> None:
        blocks = await parse_deck_list(sample_deck_list, gateway)

        assert _summary(blocks) == {
            "commanders": [("Atraxa, Grand Unifier", 1)],
            "nonlands": [("Lightning Bolt", 4), ("Sol Ring", 1), ("Dryad Arbor", 1)],
            "lands": [("Forest", 10)],
            "maybeboard": [("Counterspell", 2)],
        }
