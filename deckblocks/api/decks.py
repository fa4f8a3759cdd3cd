"""
Deck API endpoints.

Saved deck CRUD, deck list validation/parsing, text import into a saved
deck, export as text and deck statistics.
"""

from typing import Annotated, Any
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from deckblocks.api.dependencies import get_card_gateway
from deckblocks.db import delete_deck, get_deck, load_all_decks, save_deck
from deckblocks.db.database import get_session
from deckblocks.models.deck import Deck
from deckblocks.models.errors import EmptyImportError, FormatError, StorageError
from deckblocks.parsers.deck_list import resolve_deck_list, validate_deck_format
from deckblocks.services.deck_editor import DeckEditor
from deckblocks.services.deck_formatter import export_deck, export_filename
from deckblocks.services.deck_stats import generate_deck_stats
from deckblocks.services.scryfall import CardLookupGateway

router = APIRouter(prefix="/api/decks", tags=["decks"])


class EntryModel(BaseModel):
    """N copies of a card in a block."""

    card: dict[str, Any] = Field(..., description="Scryfall card object (needs id and name)")
    quantity: int = Field(..., ge=1)
    block_id: str | None = None


class BlockModel(BaseModel):
    """A named, colored group of cards."""

    id: str
    name: str
    color: str
    cards: list[EntryModel] = Field(default_factory=list)


class DeckModel(BaseModel):
    """A deck as sent and received by the API."""

    id: str | None = None
    name: str = ""
    description: str | None = None
    format: str | None = None
    blocks: list[BlockModel] = Field(default_factory=list)
    total_cards: int = Field(default=0, description="Ignored on input; always recomputed")
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckModel":
        return cls.model_validate(deck.to_dict())

    def to_deck(self) -> Deck:
        try:
            return Deck.from_dict(self.model_dump())
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid deck payload: {e}",
            ) from e


class DeckListResponse(BaseModel):
    """All saved decks."""

    decks: list[DeckModel]
    count: int


class DeckTextRequest(BaseModel):
    """A deck list as plain text."""

    text: str = Field(
        ...,
        description="Deck list, one '<quantity> <card name>' per line",
        examples=["// Commander\n1 Atraxa, Grand Unifier\n4 Lightning Bolt\n10 Forest"],
    )


class ValidationResponse(BaseModel):
    """Result of deck list validation."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class ParseResponse(BaseModel):
    """Deck list resolved into canonical blocks."""

    blocks: dict[str, list[EntryModel]]
    unresolved: list[str] = Field(default_factory=list)
    unique_cards: int
    total_cards: int


class ImportResponse(BaseModel):
    """A saved deck after a text import."""

    deck: DeckModel
    unique_cards: int
    total_cards: int
    unresolved: list[str] = Field(default_factory=list)


class StatsResponse(BaseModel):
    """Card counts by type."""

    total_cards: int
    creatures: int
    spells: int
    lands: int
    artifacts: int
    planeswalkers: int
    enchantments: int


async def _load_or_404(session: AsyncSession, deck_id: str) -> Deck:
    deck = await get_deck(session, deck_id)
    if deck is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck '{deck_id}' not found",
        )
    return deck


async def _save_or_507(session: AsyncSession, deck: Deck) -> Deck:
    try:
        return await save_deck(session, deck)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_507_INSUFFICIENT_STORAGE, detail=str(e)) from e


@router.get("", response_model=DeckListResponse)
async def list_decks(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckListResponse:
    """All saved decks, most recently updated first."""
    decks = await load_all_decks(session)
    return DeckListResponse(decks=[DeckModel.from_deck(d) for d in decks], count=len(decks))


@router.post("", response_model=DeckModel)
async def create_or_update_deck(
    payload: DeckModel,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckModel:
    """
    Save a deck.

    Without an id a new deck is created; with an id the stored deck is
    replaced and keeps its creation time.
    """
    saved = await _save_or_507(session, payload.to_deck())
    return DeckModel.from_deck(saved)


@router.post("/validate", response_model=ValidationResponse)
async def validate_deck_text(request: DeckTextRequest) -> ValidationResponse:
    """Check deck list syntax. No card names are looked up."""
    validation = validate_deck_format(request.text)
    return ValidationResponse(is_valid=validation.is_valid, errors=validation.errors)


@router.post("/parse", response_model=ParseResponse)
async def parse_deck_text(
    request: DeckTextRequest,
    gateway: Annotated[CardLookupGateway, Depends(get_card_gateway)],
) -> ParseResponse:
    """
    Resolve a deck list into commanders, nonlands, lands and maybeboard.

    Returns 422 with every line error if the syntax is invalid. Cards
    that cannot be found are listed in `unresolved`.
    """
    validation = validate_deck_format(request.text)
    if not validation.is_valid:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": validation.errors},
        )

    result = await resolve_deck_list(request.text, gateway)
    return ParseResponse(
        blocks={
            block_id: [EntryModel.model_validate(entry.to_dict()) for entry in entries]
            for block_id, entries in result.blocks.items()
        },
        unresolved=result.unresolved,
        unique_cards=result.unique_cards(),
        total_cards=result.total_cards(),
    )


@router.get("/{deck_id}", response_model=DeckModel)
async def get_saved_deck(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckModel:
    """Get a saved deck. Returns 404 if not found."""
    return DeckModel.from_deck(await _load_or_404(session, deck_id))


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_deck(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    """Delete a saved deck. Deleting an unknown id is a no-op."""
    try:
        await delete_deck(session, deck_id)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_507_INSUFFICIENT_STORAGE, detail=str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{deck_id}/import", response_model=ImportResponse)
async def import_into_deck(
    deck_id: str,
    request: DeckTextRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    gateway: Annotated[CardLookupGateway, Depends(get_card_gateway)],
) -> ImportResponse:
    """
    Replace a saved deck's canonical blocks with a deck list and save it.

    Blocks the user added keep their cards. Returns 422 for invalid
    syntax or when no card could be found.
    """
    editor = DeckEditor(await _load_or_404(session, deck_id), gateway=gateway)

    try:
        result = await editor.import_deck(request.text)
    except FormatError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": e.errors},
        ) from e
    except EmptyImportError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": [str(e)], "unresolved": e.unresolved},
        ) from e

    saved = await _save_or_507(session, editor.deck)
    return ImportResponse(
        deck=DeckModel.from_deck(saved),
        unique_cards=result.unique_cards,
        total_cards=result.total_cards,
        unresolved=result.unresolved,
    )


@router.get("/{deck_id}/export", response_class=PlainTextResponse)
async def export_saved_deck(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PlainTextResponse:
    """Download a saved deck as a deck list text file."""
    deck = await _load_or_404(session, deck_id)
    return PlainTextResponse(
        export_deck(deck),
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(export_filename(deck))}"
        },
    )


@router.get("/{deck_id}/stats", response_model=StatsResponse)
async def get_deck_stats(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> StatsResponse:
    """Card counts by type for a saved deck."""
    deck = await _load_or_404(session, deck_id)
    return StatsResponse(**generate_deck_stats(deck.all_entries()).to_dict())
