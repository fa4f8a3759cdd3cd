"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator

from deckblocks.services.scryfall import CardLookupGateway, ScryfallClient


async def get_card_gateway() -> AsyncGenerator[CardLookupGateway, None]:
    """
    Dependency that provides a Scryfall client for one request.

    Tests override this with an in-memory gateway.
    """
    async with ScryfallClient() as client:
        yield client
