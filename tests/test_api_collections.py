"""Tests for collection API endpoints."""

import pytest
from httpx import AsyncClient

from deckforge.analysis.buildable import BuildableDecksAnalyzer
from deckforge.db.operations import (
    SqlCardCatalog,
    SqlCollectionStore,
    SqlDeckStore,
    create_deck,
    upsert_cards,
)
from deckforge.main import app
from deckforge.models.buildable import DeckTemplate, TemplateCard
from deckforge.models.format_config import CardCategory, FormatType
from deckforge.services.recommendation_service import RecommendationEngine

CARDS = "/collections/col-1/cards"


@pytest.fixture
async def seeded(session, make_card, make_basic):
    await upsert_cards(
        session,
        [
            make_card("Shock", types=("Instant",), colors="R", oracle_text="Deals 2 damage."),
            make_card("Krenko, Mob Boss", colors="R", supertypes=("Legendary",)),
            make_basic(),
        ],
    )
    await create_deck(session, "Burn", "standard", deck_id="burn")
    await session.commit()


@pytest.fixture
def two_card_engine(session_factory) -> RecommendationEngine:
    """An engine whose only Standard template needs Shock and Krenko."""
    template = DeckTemplate(
        name="Krenko Burn",
        archetype="aggro",
        format="standard",
        core_cards=(
            TemplateCard("Shock", 1, CardCategory.REMOVAL),
            TemplateCard("Krenko, Mob Boss", 1, CardCategory.CREATURES),
        ),
    )
    return RecommendationEngine(
        catalog=SqlCardCatalog(session_factory),
        collection_store=SqlCollectionStore(session_factory),
        deck_store=SqlDeckStore(session_factory),
        analyzer=BuildableDecksAnalyzer({FormatType.STANDARD: (template,)}),
    )


class TestListCollectionCards:
    async def test_unknown_collection_is_empty(self, client: AsyncClient) -> None:
        """A collection that was never written to owns nothing."""
        response = await client.get("/collections/new-collection/cards")

        assert response.status_code == 200
        data = response.json()
        assert data["collection_id"] == "new-collection"
        assert data["cards"] == []
        assert data["total_cards"] == 0

    async def test_lists_owned_cards(self, client: AsyncClient, seeded) -> None:
        await client.post(CARDS, json={"card_id": "shock", "delta": 3})
        await client.post(CARDS, json={"card_id": "mountain", "delta": 10})

        response = await client.get(CARDS)

        data = response.json()
        assert [card["name"] for card in data["cards"]] == ["Mountain", "Shock"]
        assert data["total_cards"] == 13
        assert data["unique_cards"] == 2


class TestChangeCollectionCard:
    async def test_add_and_remove(self, client: AsyncClient, seeded) -> None:
        response = await client.post(CARDS, json={"card_id": "shock", "delta": 3})
        assert response.status_code == 200
        assert response.json()["quantity"] == 3

        response = await client.post(CARDS, json={"card_id": "shock", "delta": -5})
        assert response.json()["quantity"] == 0

    async def test_first_change_is_a_baseline(self, client: AsyncClient, seeded) -> None:
        response = await client.post(CARDS, json={"card_id": "shock", "delta": 1})
        assert response.json()["notifications"] == []

    async def test_zero_delta_rejected(self, client: AsyncClient, seeded) -> None:
        response = await client.post(CARDS, json={"card_id": "shock", "delta": 0})
        assert response.status_code == 422

    async def test_unknown_card(self, client: AsyncClient, seeded) -> None:
        response = await client.post(CARDS, json={"card_id": "nope", "delta": 1})

        assert response.status_code == 404
        assert response.json()["failure"]["kind"] == "not_found"

    async def test_change_refreshes_suggestions(self, client: AsyncClient, seeded) -> None:
        """Cached suggestions for the collection are dropped on change."""
        params = {"deck_id": "burn", "collection_id": "col-1", "format": "standard"}
        before = await client.get("/recommendations/suggestions", params=params)
        assert before.json()["total"] == 0

        await client.post(CARDS, json={"card_id": "shock", "delta": 2})

        after = await client.get("/recommendations/suggestions", params=params)
        assert [s["card"]["name"] for s in after.json()["suggestions"]] == ["Shock"]

    async def test_unlock_notification(
        self, client: AsyncClient, seeded, two_card_engine
    ) -> None:
        app.state.engine = two_card_engine
        await client.post(CARDS, json={"card_id": "shock", "delta": 1})

        response = await client.post(CARDS, json={"card_id": "krenko-mob-boss", "delta": 1})

        notifications = response.json()["notifications"]
        assert len(notifications) == 1
        assert notifications[0]["kind"] == "archetype_unlocked"
        assert notifications[0]["template_name"] == "Krenko Burn"
        assert notifications[0]["format"] == "standard"
        assert notifications[0]["completeness"] == 100
        assert notifications[0]["key_cards_added"] == ["Krenko, Mob Boss"]
