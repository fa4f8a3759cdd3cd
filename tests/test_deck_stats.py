"""Tests for deck statistics."""

import pytest

from deckblocks.models.deck import DeckCardEntry
from deckblocks.services.deck_stats import DeckStats, classify_type_line, generate_deck_stats


class TestClassifyTypeLine:
    @pytest.mark.parametrize(
        ("type_line", "bucket"),
        [
            ("Creature — Lhurgoyf", "creatures"),
            ("Artifact Creature — Golem", "creatures"),
            ("Land Creature — Forest Dryad", "creatures"),
            ("Basic Land — Forest", "lands"),
            ("Artifact Land", "lands"),
            ("Artifact", "artifacts"),
            ("Legendary Planeswalker — Teferi", "planeswalkers"),
            ("Enchantment", "enchantments"),
            ("Kindred Enchantment — Faerie", "enchantments"),
            ("Instant", "spells"),
            ("Sorcery", "spells"),
            ("", "spells"),
        ],
    )
    def test_priority_order(self, type_line: str, bucket: str) -> None:
        assert classify_type_line(type_line) == bucket

    def test_case_insensitive(self) -> None:
        assert classify_type_line("LEGENDARY CREATURE") == "creatures"


class TestGenerateDeckStats:
    def test_empty(self) -> None:
        assert generate_deck_stats([]) == DeckStats()

    def test_counts_quantities(self, cards) -> None:
        entries = [
            DeckCardEntry(card=cards["Atraxa, Grand Unifier"], quantity=1, block_id="commanders"),
            DeckCardEntry(card=cards["Lightning Bolt"], quantity=4, block_id="nonlands"),
            DeckCardEntry(card=cards["Solemn Simulacrum"], quantity=2, block_id="nonlands"),
            DeckCardEntry(card=cards["Sol Ring"], quantity=1, block_id="nonlands"),
            DeckCardEntry(card=cards["Rhystic Study"], quantity=1, block_id="nonlands"),
            DeckCardEntry(card=cards["Teferi, Hero of Dominaria"], quantity=1, block_id="nonlands"),
            DeckCardEntry(card=cards["Forest"], quantity=10, block_id="lands"),
        ]

        stats = generate_deck_stats(entries)

        assert stats.to_dict() == {
            "total_cards": 20,
            "creatures": 3,
            "spells": 4,
            "lands": 10,
            "artifacts": 1,
            "planeswalkers": 1,
            "enchantments": 1,
        }

    def test_total_matches_bucket_sum(self, cards) -> None:
        entries = [
            DeckCardEntry(card=card, quantity=i + 1, block_id="nonlands")
            for i, card in enumerate(cards.values())
        ]

        stats = generate_deck_stats(entries).to_dict()
        total = stats.pop("total_cards")

        assert total == sum(stats.values())

    def test_includes_maybeboard(self, cards) -> None:
        entries = [DeckCardEntry(card=cards["Counterspell"], quantity=2, block_id="maybeboard")]

        assert generate_deck_stats(entries).spells == 2
