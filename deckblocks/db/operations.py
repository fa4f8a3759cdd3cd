"""
Deck persistence operations.

Async CRUD functions over a session, plus DeckStore, which wraps them in
the save / load_all / delete contract used outside a request scope.

Reads never raise: a failing load degrades to an empty result. Writes
raise StorageError so the caller can keep the in-memory deck and retry.
"""

import logging
import uuid
from dataclasses import replace

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from deckblocks.models.db import DeckDB
from deckblocks.models.deck import Deck, parse_timestamp, utcnow
from deckblocks.models.errors import StorageError

logger = logging.getLogger(__name__)


def generate_deck_id() -> str:
    """New unique deck id."""
    return uuid.uuid4().hex


def deck_to_db(deck: Deck, db_deck: DeckDB | None = None) -> DeckDB:
    """Copy a domain deck onto a (new or existing) database row."""
    if deck.id is None:
        raise ValueError("Deck must have an id before it is stored")

    db_deck = db_deck or DeckDB(id=deck.id)
    db_deck.name = deck.name
    db_deck.description = deck.description
    db_deck.format = deck.format
    db_deck.blocks = [block.to_dict() for block in deck.blocks]
    db_deck.total_cards = deck.count_cards()
    db_deck.created_at = deck.created_at.isoformat()
    db_deck.updated_at = deck.updated_at.isoformat()
    return db_deck


def db_to_deck(db_deck: DeckDB) -> Deck:
    """
    Convert a database row to a domain deck.

    Raises:
        KeyError, TypeError, ValueError: If the stored JSON is malformed
    """
    return Deck.from_dict(
        {
            "id": db_deck.id,
            "name": db_deck.name,
            "description": db_deck.description,
            "format": db_deck.format,
            "blocks": db_deck.blocks or [],
            "created_at": db_deck.created_at,
            "updated_at": db_deck.updated_at,
        }
    )


async def load_all_decks(session: AsyncSession) -> list[Deck]:
    """
    Get every saved deck, most recently updated first.

    Returns an empty list if the store cannot be read.
    """
    try:
        result = await session.execute(select(DeckDB).order_by(DeckDB.updated_at.desc()))
        return [db_to_deck(row) for row in result.scalars().all()]
    except (SQLAlchemyError, KeyError, TypeError, ValueError) as e:
        logger.error("Error loading decks from storage: %s", e)
        return []


async def get_deck(session: AsyncSession, deck_id: str) -> Deck | None:
    """
    Get one saved deck.

    Returns None if no deck has this id or the record cannot be read.
    """
    try:
        db_deck = await session.get(DeckDB, deck_id)
        return db_to_deck(db_deck) if db_deck is not None else None
    except (SQLAlchemyError, KeyError, TypeError, ValueError) as e:
        logger.error("Error loading deck %s from storage: %s", deck_id, e)
        return None


async def save_deck(session: AsyncSession, deck: Deck) -> Deck:
    """
    Insert or update a deck.

    A deck without an id gets a new id and fresh created_at/updated_at.
    A deck with an id replaces the stored record, keeping its created_at
    and refreshing updated_at. An id not yet stored is inserted as is.

    Returns:
        The deck as stored (id and timestamps filled in)

    Raises:
        StorageError: If the database write fails
    """
    now = utcnow()

    try:
        existing = await session.get(DeckDB, deck.id) if deck.id is not None else None

        if deck.id is None:
            saved = replace(deck, id=generate_deck_id(), created_at=now, updated_at=now)
        elif existing is not None:
            created_at = parse_timestamp(existing.created_at)
            saved = replace(deck, created_at=created_at, updated_at=now)
        else:
            saved = replace(deck, updated_at=now)

        saved.total_cards = saved.count_cards()
        row = deck_to_db(saved, existing)
        if existing is None:
            session.add(row)
        await session.flush()
    except SQLAlchemyError as e:
        logger.error("Error saving deck %r: %s", deck.name, e)
        raise StorageError(f"Failed to save deck {deck.name!r}") from e

    return saved


async def delete_deck(session: AsyncSession, deck_id: str) -> bool:
    """
    Delete a saved deck.

    Returns:
        True if deleted, False if no deck had this id

    Raises:
        StorageError: If the database write fails
    """
    try:
        result = await session.execute(delete(DeckDB).where(DeckDB.id == deck_id))
        await session.flush()
    except SQLAlchemyError as e:
        logger.error("Error deleting deck %s: %s", deck_id, e)
        raise StorageError(f"Failed to delete deck {deck_id}") from e

    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount) > 0  # type: ignore[attr-defined]


class DeckStore:
    """
    Deck persistence with one committed session per call.

    Usage:
        store = DeckStore(async_session_factory)
        saved = await store.save(deck)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load_all(self) -> list[Deck]:
        async with self._session_factory() as session:
            return await load_all_decks(session)

    async def get(self, deck_id: str) -> Deck | None:
        async with self._session_factory() as session:
            return await get_deck(session, deck_id)

    async def save(self, deck: Deck) -> Deck:
        async with self._session_factory() as session:
            saved = await save_deck(session, deck)
            await _commit(session)
            return saved

    async def delete(self, deck_id: str) -> bool:
        async with self._session_factory() as session:
            deleted = await delete_deck(session, deck_id)
            await _commit(session)
            return deleted


async def _commit(session: AsyncSession) -> None:
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise StorageError("Failed to commit deck storage changes") from e

