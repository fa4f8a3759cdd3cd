"""
Deck editor.

DeckEditor owns the deck being edited. All changes go through its
operations, which keep two invariants:

- within a block there is at most one entry per card id
  (adding the same card again raises its quantity)
- deck.total_cards equals the sum of every entry's quantity

Every structural change also refreshes deck.updated_at.

Operations that need the card gateway (import_deck, add_card_by_name)
resolve cards first and only touch the deck once resolution has
settled, so a failed lookup never leaves the deck half-updated.
"""

import asyncio
import copy
import logging
import uuid
from dataclasses import dataclass, field
from typing import Protocol

from deckblocks.models.card import Card
from deckblocks.models.deck import (
    BLOCK_COLORS,
    CANONICAL_BLOCK_IDS,
    Block,
    Deck,
    DeckCardEntry,
    utcnow,
)
from deckblocks.models.errors import EmptyImportError, FormatError
from deckblocks.parsers.deck_list import resolve_deck_list, validate_deck_format
from deckblocks.services.deck_formatter import export_deck
from deckblocks.services.deck_stats import DeckStats, generate_deck_stats
from deckblocks.services.scryfall import CardLookupGateway

logger = logging.getLogger(__name__)

NEW_BLOCK_NAME = "New Block"


class DeckSaver(Protocol):
    """Persistence store as seen by the editor."""

    async def save(self, deck: Deck) -> Deck: ...


@dataclass(frozen=True)
class ImportResult:
    """Summary of a successful import."""

    unique_cards: int
    total_cards: int
    unresolved: list[str] = field(default_factory=list)


class DeckEditor:
    """
    In-memory editing session for one deck.

    Usage:
        editor = DeckEditor(gateway=client)
        await editor.import_deck(text)
        editor.move_card(card_id, "nonlands", "maybeboard")
        await editor.save_deck(store)

    `editor.deck` returns a copy; mutating it has no effect on the session.
    """

    def __init__(
        self,
        deck: Deck | None = None,
        gateway: CardLookupGateway | None = None,
    ) -> None:
        self._deck = copy.deepcopy(deck) if deck is not None else Deck.new()
        self._deck.total_cards = self._deck.count_cards()
        self._gateway = gateway
        self._import_lock = asyncio.Lock()

    @property
    def deck(self) -> Deck:
        """Snapshot of the current deck."""
        return copy.deepcopy(self._deck)

    @property
    def stats(self) -> DeckStats:
        """Type statistics over every block, recomputed on each access."""
        return generate_deck_stats(self._deck.all_entries())

    @property
    def total_cards(self) -> int:
        return self._deck.total_cards

    def _touch(self) -> None:
        """Recompute the cached total and stamp the change."""
        self._deck.total_cards = self._deck.count_cards()
        self._deck.updated_at = utcnow()

    def _new_block_id(self) -> str:
        existing = {block.id for block in self._deck.blocks}
        while True:
            block_id = f"block-{uuid.uuid4().hex[:12]}"
            if block_id not in existing:
                return block_id

    def _require_gateway(self) -> CardLookupGateway:
        if self._gateway is None:
            raise RuntimeError("DeckEditor has no card lookup gateway")
        return self._gateway

    # --- Deck details ---

    def update_details(
        self,
        *,
        name: str | None = None,
        description: str | None = None,
        format: str | None = None,  # noqa: A002
    ) -> None:
        """Change deck name, description or format. None leaves a field as is."""
        if name is not None:
            self._deck.name = name
        if description is not None:
            self._deck.description = description
        if format is not None:
            self._deck.format = format
        self._deck.updated_at = utcnow()

    # --- Blocks ---

    def add_block(self) -> str:
        """
        Append an empty block.

        The color cycles through BLOCK_COLORS by current block count.

        Returns:
            Id of the new block
        """
        block = Block(
            id=self._new_block_id(),
            name=NEW_BLOCK_NAME,
            color=BLOCK_COLORS[len(self._deck.blocks) % len(BLOCK_COLORS)],
        )
        self._deck.blocks.append(block)
        self._touch()
        return block.id

    def update_block(
        self,
        block_id: str,
        *,
        name: str | None = None,
        color: str | None = None,
    ) -> bool:
        """
        Rename or recolor a block.

        Returns:
            False if the block does not exist
        """
        block = self._deck.get_block(block_id)
        if block is None:
            logger.debug("update_block: no block %s", block_id)
            return False

        if name is not None:
            block.name = name
        if color is not None:
            block.color = color
        self._touch()
        return True

    def delete_block(self, block_id: str) -> bool:
        """
        Remove a block and discard its cards.

        Returns:
            False if the block does not exist
        """
        block = self._deck.get_block(block_id)
        if block is None:
            return False

        self._deck.blocks.remove(block)
        self._touch()
        return True

    # --- Cards ---

    def add_card_to_block(self, card: Card, block_id: str, quantity: int = 1) -> bool:
        """
        Add copies of a card to a block.

        Merges into an existing entry for the same card id; otherwise
        appends a new entry at the end of the block.

        Returns:
            False if the block does not exist

        Raises:
            ValueError: If quantity is less than 1
        """
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}")

        block = self._deck.get_block(block_id)
        if block is None:
            logger.debug("add_card_to_block: no block %s", block_id)
            return False

        _merge_into(block, card, quantity)
        self._touch()
        return True

    def remove_card_from_block(
        self, card_id: str, block_id: str, quantity: int | None = None
    ) -> bool:
        """
        Remove copies of a card from a block.

        With a quantity smaller than the entry's, the entry is decremented.
        Otherwise the entry is removed entirely.

        Returns:
            False if the block or entry does not exist

        Raises:
            ValueError: If quantity is given and less than 1
        """
        if quantity is not None and quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}")

        block = self._deck.get_block(block_id)
        entry = block.find(card_id) if block is not None else None
        if block is None or entry is None:
            return False

        if quantity is not None and quantity < entry.quantity:
            entry.quantity -= quantity
        else:
            block.cards.remove(entry)
        self._touch()
        return True

    def move_card(self, card_id: str, from_block_id: str, to_block_id: str) -> bool:
        """
        Move every copy of a card from one block to another.

        Quantities merge if the destination already holds the card.

        Returns:
            False if the source entry or destination block does not exist
        """
        source = self._deck.get_block(from_block_id)
        target = self._deck.get_block(to_block_id)
        entry = source.find(card_id) if source is not None else None
        if source is None or entry is None or target is None:
            return False

        if source is target:
            return True

        source.cards.remove(entry)
        _merge_into(target, entry.card, entry.quantity)
        self._touch()
        return True

    async def add_card_by_name(
        self, name: str, block_id: str, quantity: int = 1
    ) -> Card | None:
        """
        Resolve a card by exact name and add it to a block.

        The deck is only changed once the lookup succeeds. Returns the added
        card, or None when the block does not exist (no lookup is made).

        Raises:
            CardNotFoundError: If no card has this name
            GatewayTransportError: If the lookup service fails
            ValueError: If quantity is less than 1
        """
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}")

        gateway = self._require_gateway()
        if self._deck.get_block(block_id) is None:
            return None

        card = await gateway.get_card_by_name(name)
        if not self.add_card_to_block(card, block_id, quantity):
            return None
        return card

    # --- Import / export ---

    async def import_deck(self, text: str) -> ImportResult:
        """
        Replace the canonical blocks' cards with a parsed deck list.

        Blocks whose ids are not canonical keep their cards. Imports are
        serialized: a second import waits for the first to finish.

        Raises:
            FormatError: If the text fails validation (deck unchanged)
            EmptyImportError: If no card could be resolved (deck unchanged)
        """
        validation = validate_deck_format(text)
        if not validation.is_valid:
            raise FormatError(validation.errors)

        async with self._import_lock:
            result = await resolve_deck_list(text, self._require_gateway())

            if result.unique_cards() == 0:
                raise EmptyImportError(result.unresolved)

            for block in self._deck.blocks:
                if block.id not in CANONICAL_BLOCK_IDS:
                    continue
                block.cards = [
                    DeckCardEntry(card=entry.card, quantity=entry.quantity, block_id=block.id)
                    for entry in result.blocks[block.id]
                ]
            self._touch()

        logger.info(
            "Imported %d different cards (%d total), %d unresolved",
            result.unique_cards(),
            result.total_cards(),
            len(result.unresolved),
        )
        return ImportResult(
            unique_cards=result.unique_cards(),
            total_cards=result.total_cards(),
            unresolved=result.unresolved,
        )

    def export_deck(self) -> str:
        """Current deck as deck list text."""
        return export_deck(self._deck)

    async def save_deck(self, store: DeckSaver) -> Deck:
        """
        Persist the current deck.

        On success the editor adopts the stored id and timestamps. On
        StorageError the in-memory deck is left untouched.

        Raises:
            StorageError: If the store cannot be written
        """
        saved = await store.save(self.deck)
        self._deck.id = saved.id
        self._deck.created_at = saved.created_at
        self._deck.updated_at = saved.updated_at
        return copy.deepcopy(saved)


def _merge_into(block: Block, card: Card, quantity: int) -> None:
    entry = block.find(card.id)
    if entry is not None:
        entry.quantity += quantity
    else:
        block.cards.append(DeckCardEntry(card=card, quantity=quantity, block_id=block.id))
