"""Tests for the card catalog load job."""

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx

from deckforge.config import settings
from deckforge.db.database import init_db
from deckforge.db.operations import get_card
from deckforge.jobs import load_cards
from deckforge.jobs.load_cards import load_catalog, run_load
from deckforge.models.db import card_to_model
from deckforge.parsers.scryfall import SCRYFALL_BULK_API

BULK_URL = "https://data.scryfall.io/oracle-cards.json"


def scryfall_card(card_id: str, name: str, **fields: Any) -> dict[str, Any]:
    return {
        "id": card_id,
        "name": name,
        "layout": "normal",
        "cmc": 1.0,
        "type_line": "Instant",
        "oracle_text": f"{name} deals 2 damage to any target.",
        "colors": ["R"],
        "color_identity": ["R"],
        "legalities": {"standard": "legal", "modern": "legal"},
        **fields,
    }


BULK: list[dict[str, Any]] = [
    scryfall_card("shock-id", "Shock"),
    scryfall_card("bolt-id", "Lightning Bolt", legalities={"modern": "legal"}),
    scryfall_card("burst-id", "Burst Lightning"),
    {"id": "token-1", "name": "Goblin", "layout": "token", "type_line": "Token Creature"},
]


@pytest.fixture
def bulk_file(tmp_path: Path) -> Path:
    path = tmp_path / "oracle-cards.json"
    path.write_text(json.dumps(BULK), encoding="utf-8")
    return path


class TestLoadCatalog:
    async def test_loads_playable_cards(self, session_factory, bulk_file) -> None:
        """Tokens are skipped; every other card lands in the catalog."""
        loaded = await load_catalog(session_factory, bulk_file, batch_size=2)

        assert loaded == 3
        async with session_factory() as session:
            row = await get_card(session, "bolt-id")
            assert row is not None
            card = card_to_model(row)
            assert card.name == "Lightning Bolt"
            assert card.legalities["modern"].value == "legal"
            assert await get_card(session, "token-1") is None

    async def test_reload_updates_in_place(self, session_factory, tmp_path) -> None:
        path = tmp_path / "cards.json"
        path.write_text(json.dumps([scryfall_card("shock-id", "Shock")]), encoding="utf-8")
        await load_catalog(session_factory, path)

        renamed = scryfall_card("shock-id", "Shock", oracle_text="Shock deals 3 damage.")
        path.write_text(json.dumps([renamed]), encoding="utf-8")
        await load_catalog(session_factory, path)

        async with session_factory() as session:
            row = await get_card(session, "shock-id")
            assert card_to_model(row).oracle_text == "Shock deals 3 damage."


class TestRunLoad:
    @respx.mock
    async def test_downloads_then_loads(
        self, monkeypatch, async_engine, session_factory, tmp_path
    ) -> None:
        respx.get(SCRYFALL_BULK_API).mock(
            return_value=httpx.Response(
                200, json={"data": [{"type": "oracle_cards", "download_uri": BULK_URL}]}
            )
        )
        respx.get(BULK_URL).mock(return_value=httpx.Response(200, content=json.dumps(BULK)))

        async def init_test_db() -> None:
            await init_db(async_engine)

        monkeypatch.setattr(settings, "card_data_path", str(tmp_path / "data" / "cards.json"))
        monkeypatch.setattr(load_cards, "init_db", init_test_db)
        monkeypatch.setattr(load_cards, "async_session_factory", session_factory)

        assert await run_load() == 3
        assert (tmp_path / "data" / "cards.json").exists()
