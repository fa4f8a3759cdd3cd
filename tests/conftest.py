import pytest

from deckblocks.models.card import Card
from deckblocks.models.errors import CardNotFoundError, GatewayTransportError
from deckblocks.services.scryfall import SearchPage


def make_card(name: str, type_line: str, card_id: str | None = None) -> Card:
    """Build a card with a Scryfall-shaped raw payload."""
    card_id = card_id or name.lower().replace(" ", "-").replace(",", "")
    return Card.from_scryfall(
        {
            "id": card_id,
            "oracle_id": f"oracle-{card_id}",
            "name": name,
            "type_line": type_line,
            "mana_cost": "",
            "cmc": 0.0,
            "set": "tst",
            "rarity": "common",
        }
    )


CARDS = [
    make_card("Atraxa, Grand Unifier", "Legendary Creature — Phyrexian Angel"),
    make_card("Lightning Bolt", "Instant"),
    make_card("Forest", "Basic Land — Forest"),
    make_card("Island", "Basic Land — Island"),
    make_card("Sol Ring", "Artifact"),
    make_card("Solemn Simulacrum", "Artifact Creature — Golem"),
    make_card("Dryad Arbor", "Land Creature — Forest Dryad"),
    make_card("Rhystic Study", "Enchantment"),
    make_card("Teferi, Hero of Dominaria", "Legendary Planeswalker — Teferi"),
    make_card("Counterspell", "Instant"),
    make_card("Bitterblossom", "Kindred Enchantment — Faerie"),
    make_card("Tarmogoyf", "Creature — Lhurgoyf"),
]


class FakeGateway:
    """In-memory card lookup gateway."""

    def __init__(self, cards: list[Card], failing: set[str] | None = None) -> None:
        self.cards = {card.name: card for card in cards}
        self.failing = failing or set()
        self.lookups: list[str] = []

    async def autocomplete(self, prefix: str) -> list[str]:
        if len(prefix) < 2:
            return []
        return sorted(name for name in self.cards if name.lower().startswith(prefix.lower()))

    async def search_cards(self, query: str, page: int = 1) -> SearchPage:  # noqa: ARG002
        if len(query) < 2:
            return SearchPage()
        matches = [card for name, card in self.cards.items() if query.lower() in name.lower()]
        return SearchPage(data=matches, has_more=False, total_cards=len(matches))

    async def get_card_by_name(self, name: str) -> Card:
        self.lookups.append(name)
        if name in self.failing:
            raise GatewayTransportError(f"lookup for {name} timed out")
        try:
            return self.cards[name]
        except KeyError:
            raise CardNotFoundError(name) from None

    async def get_card_by_id(self, card_id: str) -> Card:
        for card in self.cards.values():
            if card.id == card_id:
                return card
        raise CardNotFoundError(card_id)

    async def get_card_prints(self, oracle_id: str) -> list[Card]:
        return [card for card in self.cards.values() if card.oracle_id == oracle_id]


@pytest.fixture
def cards() -> dict[str, Card]:
    """Test cards by name."""
    return {card.name: card for card in CARDS}


@pytest.fixture
def card_factory():
    """Build extra cards: card_factory(name, type_line, card_id=None)."""
    return make_card


@pytest.fixture
def gateway_factory():
    """Build a gateway over custom cards: gateway_factory(cards, failing=None)."""
    return FakeGateway


@pytest.fixture
def gateway() -> FakeGateway:
    """Gateway that resolves every test card."""
    return FakeGateway(CARDS)


@pytest.fixture
def sample_deck_list() -> str:
    """Deck list touching every section."""
    return """// Atraxa Superfriends
4 Lightning Bolt
1 Sol Ring
10 Forest
1 Dryad Arbor

// Commander
1 Atraxa, Grand Unifier

# Sideboard
2 Counterspell"""
