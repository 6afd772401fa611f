"""Tests for database CRUD operations."""

import pytest

from deckforge.db.operations import (
    SqlCardCatalog,
    SqlCollectionStore,
    SqlDeckStore,
    apply_collection_delta,
    create_collection,
    create_deck,
    deck_to_model,
    delete_collection,
    delete_deck,
    get_card,
    get_collection,
    get_deck,
    get_or_create_collection,
    list_owned_cards,
    set_collection_cards,
    set_deck_card,
    upsert_card,
    upsert_cards,
)
from deckforge.models.card import LegalityStatus
from deckforge.models.db import card_to_model
from deckforge.models.failure import NotFoundError
from deckforge.models.format_config import CardRole


@pytest.fixture
def sample_cards(make_card, make_basic):
    return [
        make_card(
            "Shock",
            types=("Instant",),
            cmc=1.0,
            colors="R",
            oracle_text="Shock deals 2 damage to any target.",
            legalities={"modern": "banned"},
        ),
        make_card("Krenko, Mob Boss", colors="R", supertypes=("Legendary",), power="3"),
        make_basic(),
    ]


@pytest.fixture
async def seeded(session, sample_cards):
    await upsert_cards(session, sample_cards)
    await session.commit()
    return {card.name: card for card in sample_cards}


class TestCardOperations:
    async def test_upsert_round_trip(self, session, sample_cards) -> None:
        await upsert_card(session, sample_cards[0])

        row = await get_card(session, "shock")
        assert row is not None
        card = card_to_model(row)
        assert card.name == "Shock"
        assert card.types == frozenset({"Instant"})
        assert card.colors == frozenset({"R"})
        assert card.legality("standard") == LegalityStatus.LEGAL
        assert card.legality("modern") == LegalityStatus.BANNED

    async def test_upsert_replaces_existing(self, session, make_card) -> None:
        await upsert_card(session, make_card("Shock", cmc=1.0))
        await upsert_card(session, make_card("Shock", cmc=2.0, oracle_text="Updated"))

        row = await get_card(session, "shock")
        assert row is not None
        assert row.cmc == 2.0
        assert row.oracle_text == "Updated"

    async def test_upsert_many(self, session, sample_cards) -> None:
        assert await upsert_cards(session, sample_cards) == 3

    async def test_missing_card(self, session) -> None:
        assert await get_card(session, "nope") is None


class TestCollectionOperations:
    async def test_create_collection(self, session) -> None:
        """Can create a new collection with a chosen id."""
        collection = await create_collection(session, "col-1", name="Main")
        assert collection.id == "col-1"
        assert collection.name == "Main"

    async def test_generated_id(self, session) -> None:
        collection = await create_collection(session)
        assert collection.id

    async def test_get_or_create(self, session) -> None:
        first, created = await get_or_create_collection(session, "col-1")
        assert created
        second, created = await get_or_create_collection(session, "col-1")
        assert not created
        assert second.id == first.id

    async def test_delta_adds_and_clamps(self, session, seeded) -> None:
        assert await apply_collection_delta(session, "col-1", "shock", 3) == 3
        assert await apply_collection_delta(session, "col-1", "shock", -1) == 2
        assert await apply_collection_delta(session, "col-1", "shock", -5) == 0
        assert await list_owned_cards(session, "col-1") == []

    async def test_delta_creates_collection(self, session, seeded) -> None:
        await apply_collection_delta(session, "new", "mountain", 1)
        assert await get_collection(session, "new") is not None

    async def test_delta_unknown_card(self, session, seeded) -> None:
        with pytest.raises(NotFoundError):
            await apply_collection_delta(session, "col-1", "nope", 1)

    async def test_list_owned_sorted_by_name(self, session, seeded) -> None:
        await set_collection_cards(session, "col-1", {"shock": 2, "krenko-mob-boss": 1})

        owned = await list_owned_cards(session, "col-1")

        assert [(entry.card.name, entry.quantity) for entry in owned] == [
            ("Krenko, Mob Boss", 1),
            ("Shock", 2),
        ]

    async def test_unknown_collection_owns_nothing(self, session) -> None:
        assert await list_owned_cards(session, "nobody") == []

    async def test_set_cards_replaces_contents(self, session, seeded) -> None:
        await set_collection_cards(session, "col-1", {"shock": 4, "mountain": 10})
        collection = await set_collection_cards(session, "col-1", {"mountain": 5, "shock": 0})

        assert [(row.card_id, row.quantity) for row in collection.cards] == [("mountain", 5)]

    async def test_set_cards_unknown_card(self, session, seeded) -> None:
        with pytest.raises(NotFoundError):
            await set_collection_cards(session, "col-1", {"nope": 1})

    async def test_delete_collection(self, session, seeded) -> None:
        await set_collection_cards(session, "col-1", {"shock": 1})
        assert await delete_collection(session, "col-1")
        await session.flush()
        assert await get_collection(session, "col-1") is None
        assert not await delete_collection(session, "col-1")


class TestDeckOperations:
    async def test_create_and_convert(self, session) -> None:
        await create_deck(
            session, "Goblins", "Standard", deck_id="deck-1", colors="R", strategy="aggro"
        )

        row = await get_deck(session, "deck-1")
        assert row is not None
        deck = deck_to_model(row)
        assert deck.format == "standard"
        assert deck.colors == frozenset({"R"})
        assert deck.strategy == "aggro"
        assert deck.cards == ()

    async def test_set_card_quantity(self, session, seeded) -> None:
        await create_deck(session, "Burn", "standard", deck_id="deck-1")

        await set_deck_card(session, "deck-1", "shock", 4)
        row = await set_deck_card(session, "deck-1", "mountain", 20)
        deck = deck_to_model(row)
        assert deck.mainboard_count == 24

        row = await set_deck_card(session, "deck-1", "shock", 0)
        assert [entry.card.id for entry in deck_to_model(row).cards] == ["mountain"]

    async def test_sideboard_is_separate(self, session, seeded) -> None:
        await create_deck(session, "Burn", "standard", deck_id="deck-1")
        await set_deck_card(session, "deck-1", "shock", 4)
        row = await set_deck_card(session, "deck-1", "shock", 2, CardRole.SIDEBOARD)

        deck = deck_to_model(row)
        assert deck.mainboard_count == 4
        assert deck.sideboard_count == 2

    async def test_commander_recorded_and_cleared(self, session, seeded) -> None:
        await create_deck(session, "Krenko", "commander", deck_id="deck-1")

        row = await set_deck_card(session, "deck-1", "krenko-mob-boss", 1, CardRole.COMMANDER)
        deck = deck_to_model(row)
        assert deck.commander_id == "krenko-mob-boss"
        assert deck.commander is not None

        row = await set_deck_card(session, "deck-1", "krenko-mob-boss", 0, CardRole.COMMANDER)
        assert deck_to_model(row).commander_id is None

    async def test_unknown_deck_or_card(self, session, seeded) -> None:
        with pytest.raises(NotFoundError):
            await set_deck_card(session, "missing", "shock", 1)

        await create_deck(session, "Burn", "standard", deck_id="deck-1")
        with pytest.raises(NotFoundError):
            await set_deck_card(session, "deck-1", "nope", 1)

    async def test_delete_deck(self, session) -> None:
        await create_deck(session, "Burn", "standard", deck_id="deck-1")
        assert await delete_deck(session, "deck-1")
        await session.flush()
        assert await get_deck(session, "deck-1") is None


class TestSqlStores:
    async def test_catalog(self, session_factory, seeded) -> None:
        catalog = SqlCardCatalog(session_factory)

        card = await catalog.get_card("shock")
        assert card is not None
        assert card.name == "Shock"
        assert await catalog.get_card("nope") is None

        table = await catalog.legality_table(card)
        assert table["modern"] == LegalityStatus.BANNED

    async def test_collection_store(self, session, session_factory, seeded) -> None:
        await set_collection_cards(session, "col-1", {"shock": 3})
        await session.commit()

        owned = await SqlCollectionStore(session_factory).list_owned_cards("col-1")

        assert [(entry.card.id, entry.quantity) for entry in owned] == [("shock", 3)]

    async def test_deck_store(self, session, session_factory, seeded) -> None:
        await create_deck(session, "Burn", "standard", deck_id="deck-1")
        await session.commit()
        store = SqlDeckStore(session_factory)

        assert await store.get_deck("missing") is None

        deck = await store.apply_card_change("deck-1", "shock", 4, CardRole.MAINBOARD)
        assert deck.mainboard_count == 4

        reloaded = await store.get_deck("deck-1")
        assert reloaded is not None
        assert reloaded.mainboard_count == 4
