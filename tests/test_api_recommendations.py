"""Tests for recommendation API endpoints."""

import pytest
from httpx import AsyncClient

from deckforge.db.operations import (
    create_deck,
    set_collection_cards,
    set_deck_card,
    upsert_cards,
)
from deckforge.main import app

SUGGESTIONS = "/recommendations/suggestions"


@pytest.fixture
async def seeded(session, make_card, make_basic):
    cards = [
        make_card(
            "Shock",
            types=("Instant",),
            cmc=1.0,
            colors="R",
            oracle_text="Shock deals 2 damage to any target.",
        ),
        make_card(
            "Divination", types=("Sorcery",), cmc=3.0, colors="U", oracle_text="Draw two cards."
        ),
        make_card("Grizzly Bears", colors="G", power="2", toughness="2"),
        make_card("Banned Card", legalities={"standard": "banned"}),
        make_card("Goblin Guide", colors="R", keywords=("Haste",), power="2"),
        make_basic(),
    ]
    await upsert_cards(session, cards)
    await set_collection_cards(session, "col-1", {card.id: 2 for card in cards})
    await create_deck(session, "Goblins", "standard", deck_id="deck-1", strategy="aggro")
    await set_deck_card(session, "deck-1", "goblin-guide", 4)
    await set_deck_card(session, "deck-1", "mountain", 10)
    await session.commit()


def _params(**overrides: str | int) -> dict[str, str | int]:
    params: dict[str, str | int] = {
        "deck_id": "deck-1",
        "collection_id": "col-1",
        "format": "standard",
    }
    params.update(overrides)
    return params


class TestSuggestions:
    async def test_owned_legal_cards_only(self, client: AsyncClient, seeded) -> None:
        """Banned cards and cards already in the deck are never suggested."""
        response = await client.get(SUGGESTIONS, params=_params())

        assert response.status_code == 200
        data = response.json()
        names = {suggestion["card"]["name"] for suggestion in data["suggestions"]}
        assert names == {"Shock", "Divination", "Grizzly Bears"}
        assert data["total"] == 3
        assert data["format"] == "standard"
        assert data["archetype"] == "aggro"
        assert data["degraded"] is False

    async def test_score_breakdown(self, client: AsyncClient, seeded) -> None:
        response = await client.get(SUGGESTIONS, params=_params())

        for suggestion in response.json()["suggestions"]:
            score = suggestion["score"]
            assert 0 <= score["total"] <= 100
            parts = score["mechanical"] + score["strategic"] + score["format_context"]
            assert score["total"] == pytest.approx(parts + score["theme"], abs=0.011)
            assert suggestion["in_collection"] is True
            assert suggestion["owned_quantity"] == 2

    async def test_pagination(self, client: AsyncClient, seeded) -> None:
        response = await client.get(SUGGESTIONS, params=_params(limit=2))

        data = response.json()
        assert len(data["suggestions"]) == 2
        assert data["has_more"] is True

    async def test_category_filter(self, client: AsyncClient, seeded) -> None:
        response = await client.get(SUGGESTIONS, params=_params(category="card_draw"))
        names = [suggestion["card"]["name"] for suggestion in response.json()["suggestions"]]
        assert names == ["Divination"]

    async def test_limit_out_of_range(self, client: AsyncClient, seeded) -> None:
        response = await client.get(SUGGESTIONS, params=_params(limit=0))
        assert response.status_code == 422

    async def test_unsupported_format(self, client: AsyncClient, seeded) -> None:
        response = await client.get(SUGGESTIONS, params=_params(format="pauper"))

        assert response.status_code == 400
        failure = response.json()["failure"]
        assert failure["kind"] == "unsupported_format"
        assert "standard" in failure["suggestion"]

    async def test_format_mismatch(self, client: AsyncClient, seeded) -> None:
        response = await client.get(SUGGESTIONS, params=_params(format="commander"))

        assert response.status_code == 400
        assert response.json()["failure"]["kind"] == "format_mismatch"

    async def test_unknown_deck(self, client: AsyncClient, seeded) -> None:
        response = await client.get(SUGGESTIONS, params=_params(deck_id="missing"))
        assert response.status_code == 404

    async def test_failed_computation_degrades(
        self, client: AsyncClient, seeded, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A broken recommender returns an empty page instead of an error."""

        async def broken(*args: object, **kwargs: object) -> list:
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(app.state.engine.collections, "owned_legal_candidates", broken)

        response = await client.get(SUGGESTIONS, params=_params())

        assert response.status_code == 200
        data = response.json()
        assert data["degraded"] is True
        assert data["suggestions"] == []


class TestCoverage:
    async def test_every_format(self, client: AsyncClient, seeded) -> None:
        response = await client.get("/recommendations/coverage/col-1")

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"standard", "modern", "commander", "brawl"}
        assert data["standard"]["total_legal_cards"] == 5

    async def test_one_format(self, client: AsyncClient, seeded) -> None:
        response = await client.get("/recommendations/coverage/col-1", params={"format": "modern"})

        data = response.json()
        assert data["format"] == "modern"
        assert data["total_legal_cards"] == 6
        assert data["legal_copies"] == 12


class TestBuildable:
    async def test_buildable_decks(self, client: AsyncClient, seeded) -> None:
        response = await client.get(
            "/recommendations/buildable/col-1", params={"format": "standard", "limit": 1}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["format"] == "standard"
        assert len(data["buildable_decks"]) == 1
        assert data["viable_archetypes"] == []

    async def test_limit_out_of_range(self, client: AsyncClient, seeded) -> None:
        response = await client.get(
            "/recommendations/buildable/col-1", params={"format": "standard", "limit": 100}
        )
        assert response.status_code == 422


class TestDeckAnalysis:
    async def test_archetype(self, client: AsyncClient, seeded) -> None:
        response = await client.get(
            "/recommendations/archetype/deck-1", params={"format": "standard"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["primary"] == "aggro"
        assert data["confidence"] == 100.0

    async def test_gaps(self, client: AsyncClient, seeded) -> None:
        response = await client.get("/recommendations/gaps/deck-1", params={"format": "standard"})

        assert response.status_code == 200
        data = response.json()
        categories = {item["category"]: item for item in data["categories"]}
        assert categories["lands"]["current"] == 10
        assert categories["lands"]["status"] == "under"
        assert data["recommendations"]
