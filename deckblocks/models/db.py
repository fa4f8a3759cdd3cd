"""
SQLAlchemy ORM models for persistent storage.

Blocks and their card entries are stored as one JSON document per deck;
decks are always loaded and saved whole.
"""

from typing import Any

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DeckDB(Base):
    """A saved deck."""

    __tablename__ = "decks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    format: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Deck contents stored as JSON: list of blocks with their entries
    blocks: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    total_cards: Mapped[int] = mapped_column(Integer, default=0)

    # ISO-8601 timestamps, set by the application
    created_at: Mapped[str] = mapped_column(String(40))
    updated_at: Mapped[str] = mapped_column(String(40), index=True)

    def __repr__(self) -> str:
        return f"<DeckDB(id={self.id}, name={self.name})>"
