"""
Scryfall proxy endpoints.

The browser calls these instead of Scryfall directly, so the front end
is not subject to cross-origin restrictions. Responses keep Scryfall's
JSON shape.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from deckblocks.api.dependencies import get_card_gateway
from deckblocks.models.errors import CardNotFoundError, GatewayTransportError
from deckblocks.services.scryfall import CardLookupGateway

router = APIRouter(prefix="/api/scryfall", tags=["scryfall"])


class AutocompleteResponse(BaseModel):
    """Card name suggestions."""

    data: list[str] = Field(default_factory=list)


class CardListResponse(BaseModel):
    """A list of Scryfall card objects."""

    data: list[dict[str, Any]] = Field(default_factory=list)


class SearchResponse(CardListResponse):
    """One page of search results."""

    has_more: bool = False
    total_cards: int = 0


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(
    gateway: Annotated[CardLookupGateway, Depends(get_card_gateway)],
    q: str = "",
) -> AutocompleteResponse:
    """Card name suggestions. Empty for queries under two characters."""
    return AutocompleteResponse(data=await gateway.autocomplete(q))


@router.get("/search", response_model=SearchResponse)
async def search(
    gateway: Annotated[CardLookupGateway, Depends(get_card_gateway)],
    q: str = "",
    page: Annotated[int, Query(ge=1)] = 1,
) -> SearchResponse:
    """
    Search cards by Scryfall query syntax.

    No matches and upstream failures both return an empty page.
    """
    result = await gateway.search_cards(q, page=page)
    return SearchResponse(
        data=[card.to_dict() for card in result.data],
        has_more=result.has_more,
        total_cards=result.total_cards,
    )


@router.get("/card/{card_id}")
async def get_card(
    card_id: str,
    gateway: Annotated[CardLookupGateway, Depends(get_card_gateway)],
) -> dict[str, Any]:
    """
    Get a card by Scryfall id.

    Returns 404 if the card does not exist, 502 if Scryfall fails.
    """
    try:
        card = await gateway.get_card_by_id(card_id)
    except CardNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except GatewayTransportError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return card.to_dict()


@router.get("/card-named")
async def get_card_named(
    gateway: Annotated[CardLookupGateway, Depends(get_card_gateway)],
    name: str = "",
) -> dict[str, Any]:
    """
    Get a card by exact name.

    Returns 400 without a name, 404 if no card matches, 502 if Scryfall fails.
    """
    if not name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Card name is required",
        )

    try:
        card = await gateway.get_card_by_name(name)
    except CardNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except GatewayTransportError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return card.to_dict()


@router.get("/card-prints/{oracle_id}", response_model=CardListResponse)
async def get_card_prints(
    oracle_id: str,
    gateway: Annotated[CardLookupGateway, Depends(get_card_gateway)],
) -> CardListResponse:
    """Every printing of a card, oldest first. Empty if none are found."""
    prints = await gateway.get_card_prints(oracle_id)
    return CardListResponse(data=[card.to_dict() for card in prints])
