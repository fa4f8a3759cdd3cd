"""
Scryfall card lookup gateway.

Resolves card names and ids to full card data and backs search,
autocomplete and printings lookups.

Read-only lookups (autocomplete, search, prints) degrade to empty results
on any failure so callers can show "no results". Exact lookups raise
CardNotFoundError or GatewayTransportError.

API docs: https://scryfall.com/docs/api
"""

import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Protocol

import httpx

from deckblocks.config import MIN_QUERY_LENGTH, settings
from deckblocks.models.card import Card
from deckblocks.models.errors import CardNotFoundError, GatewayTransportError

logger = logging.getLogger(__name__)


@dataclass
class SearchPage:
    """One page of card search results."""

    data: list[Card] = field(default_factory=list)
    has_more: bool = False
    total_cards: int = 0


class CardLookupGateway(Protocol):
    """Anything that can resolve cards: the Scryfall client, a local index, a test double."""

    async def autocomplete(self, prefix: str) -> list[str]: ...

    async def search_cards(self, query: str, page: int = 1) -> SearchPage: ...

    async def get_card_by_name(self, name: str) -> Card: ...

    async def get_card_by_id(self, card_id: str) -> Card: ...

    async def get_card_prints(self, oracle_id: str) -> list[Card]: ...


class ScryfallClient:
    """
    Async Scryfall API client.

    Usage:
        async with ScryfallClient() as client:
            card = await client.get_card_by_name("Lightning Bolt")

    An existing httpx.AsyncClient may be passed in; it is then left open
    on exit and its owner is responsible for closing it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.scryfall_timeout,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        )

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        GET a Scryfall endpoint and decode the JSON body.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses
            httpx.HTTPError: On transport failures
        """
        response = await self._client.get(f"{self.base_url}{path}", params=params)
        response.raise_for_status()
        data: dict[str, Any] = response.json()
        return data

    async def autocomplete(self, prefix: str) -> list[str]:
        """
        Get card name suggestions for a prefix.

        Returns an empty list for prefixes shorter than two characters
        or when Scryfall cannot be reached.
        """
        if len(prefix) < MIN_QUERY_LENGTH:
            return []

        try:
            data = await self._get("/cards/autocomplete", params={"q": prefix})
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Autocomplete failed for %r: %s", prefix, e)
            return []

        return [str(name) for name in data.get("data", [])]

    async def search_cards(self, query: str, page: int = 1) -> SearchPage:
        """
        Run a Scryfall full-text search, ordered by name.

        Scryfall answers 404 when nothing matches; that and any transport
        failure yield an empty page.
        """
        if len(query) < MIN_QUERY_LENGTH:
            return SearchPage()

        try:
            data = await self._get(
                "/cards/search",
                params={"q": query, "page": page, "order": "name"},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 404:
                logger.warning("Search failed for %r: HTTP %s", query, e.response.status_code)
            return SearchPage()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Search failed for %r: %s", query, e)
            return SearchPage()

        return SearchPage(
            data=_cards_from_list(data),
            has_more=bool(data.get("has_more", False)),
            total_cards=int(data.get("total_cards", 0)),
        )

    async def get_card_by_name(self, name: str) -> Card:
        """
        Get a card by its exact name.

        Raises:
            CardNotFoundError: If no card has exactly this name
            GatewayTransportError: If Scryfall cannot be reached
        """
        return await self._get_card("/cards/named", name, params={"exact": name})

    async def get_card_by_id(self, card_id: str) -> Card:
        """
        Get a card by Scryfall id.

        Raises:
            CardNotFoundError: If the id does not exist
            GatewayTransportError: If Scryfall cannot be reached
        """
        return await self._get_card(f"/cards/{card_id}", card_id)

    async def get_card_prints(self, oracle_id: str) -> list[Card]:
        """
        Get every printing of a card, oldest first.

        Returns an empty list when nothing is found or Scryfall fails.
        """
        try:
            data = await self._get(
                "/cards/search",
                params={"q": f"oracleid:{oracle_id}", "unique": "prints", "order": "released"},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 404:
                logger.warning(
                    "Prints lookup failed for %s: HTTP %s", oracle_id, e.response.status_code
                )
            return []
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Prints lookup failed for %s: %s", oracle_id, e)
            return []

        return _cards_from_list(data)

    async def _get_card(self, path: str, query: str, params: dict[str, Any] | None = None) -> Card:
        try:
            data = await self._get(path, params=params)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise CardNotFoundError(query) from e
            raise GatewayTransportError(
                f"Scryfall lookup for {query!r} failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GatewayTransportError(f"Scryfall lookup for {query!r} failed: {e}") from e
        except ValueError as e:
            raise GatewayTransportError(f"Scryfall returned invalid JSON for {query!r}") from e

        try:
            return Card.from_scryfall(data)
        except KeyError as e:
            raise GatewayTransportError(f"Scryfall returned a malformed card for {query!r}") from e


def _cards_from_list(data: dict[str, Any]) -> list[Card]:
    """Convert a Scryfall list object to Cards, skipping malformed entries."""
    cards: list[Card] = []
    for payload in data.get("data", []):
        try:
            cards.append(Card.from_scryfall(payload))
        except KeyError:
            logger.debug("Skipping malformed card payload: %r", payload)
    return cards
