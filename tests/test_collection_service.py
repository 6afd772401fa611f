"""Tests for collection-first candidate selection."""

import pytest

from deckforge.formats.commander import CommanderAdapter
from deckforge.formats.standard import StandardAdapter
from deckforge.models.collection import CollectionCard
from deckforge.models.format_config import FormatType
from deckforge.services.collection_service import CollectionService, select_candidates


@pytest.fixture
def service(collection_store) -> CollectionService:
    return CollectionService(collection_store)


@pytest.fixture
def mixed_collection(collection_store, make_card):
    """One card of every legality status, all owned."""
    cards = {
        "legal": make_card("Legal Card"),
        "banned": make_card("Banned Card", legalities={"standard": "banned"}),
        "restricted": make_card("Restricted Card", legalities={"standard": "restricted"}),
        "rotated": make_card("Rotated Card", legal_in=("modern", "commander")),
    }
    collection_store.add_all("col-1", cards.values(), quantity=2)
    return cards


class TestSelectCandidates:
    def test_only_legal_cards(self, mixed_collection, collection_store) -> None:
        owned = list(collection_store.owned["col-1"].values())
        candidates = select_candidates(owned, StandardAdapter())
        assert [entry.card.name for entry in candidates] == ["Legal Card"]

    def test_excludes_cards_in_deck(self, make_card, make_deck) -> None:
        in_deck = make_card("In Deck")
        other = make_card("Other")
        owned = [CollectionCard(in_deck, 1), CollectionCard(other, 1)]
        deck = make_deck(mainboard=[(in_deck, 1)])
        candidates = select_candidates(owned, StandardAdapter(), deck)
        assert [entry.card.id for entry in candidates] == [other.id]

    def test_excludes_zero_quantity(self, make_card) -> None:
        owned = [CollectionCard(make_card("Gone"), 0)]
        assert select_candidates(owned, StandardAdapter()) == []

    def test_commander_color_identity(self, make_card, make_deck) -> None:
        general = make_card("Krenko", colors="R", supertypes=("Legendary",))
        red = make_card("Shock", colors="R", types=("Instant",))
        blue = make_card("Opt", colors="U", types=("Instant",))
        colorless = make_card("Sol Ring", types=("Artifact",))
        owned = [CollectionCard(card, 1) for card in (red, blue, colorless)]
        deck = make_deck("commander", commander=general)

        candidates = select_candidates(owned, CommanderAdapter(), deck)

        assert [entry.card.name for entry in candidates] == ["Shock", "Sol Ring"]

    def test_sorted_by_name_then_id(self, make_card) -> None:
        owned = [
            CollectionCard(make_card("Zap"), 1),
            CollectionCard(make_card("Arc", card_id="arc-2"), 1),
            CollectionCard(make_card("Arc", card_id="arc-1"), 1),
        ]
        candidates = select_candidates(owned, StandardAdapter())
        assert [entry.card.id for entry in candidates] == ["arc-1", "arc-2", "zap"]


class TestCollectionService:
    async def test_empty_collection_has_no_candidates(self, service) -> None:
        """A brand-new collection yields an empty list, not an error."""
        assert await service.owned_legal_candidates("new", FormatType.STANDARD) == []

    async def test_owned_legal_candidates(self, service, mixed_collection) -> None:
        candidates = await service.owned_legal_candidates("col-1", "standard")
        assert [entry.card.name for entry in candidates] == ["Legal Card"]

    async def test_cards_for_format_includes_restricted(self, service, mixed_collection) -> None:
        playable = await service.cards_for_format("col-1", FormatType.STANDARD)
        assert [entry.card.name for entry in playable] == ["Legal Card", "Restricted Card"]

    async def test_cards_for_color_identity(self, service, collection_store, make_card) -> None:
        collection_store.add_all(
            "col-2",
            [
                make_card("Boros Charm", colors="RW"),
                make_card("Shock", colors="R"),
                make_card("Opt", colors="U"),
                make_card("Sol Ring"),
            ],
        )
        cards = await service.cards_for_color_identity("col-2", frozenset({"R", "W"}))
        assert [entry.card.name for entry in cards] == ["Boros Charm", "Shock", "Sol Ring"]

    async def test_format_coverage(self, service, mixed_collection) -> None:
        coverage = await service.format_coverage("col-1", FormatType.STANDARD)
        assert coverage.format == "standard"
        assert coverage.total_legal_cards == 2
        assert coverage.legal_copies == 4
        assert coverage.viable_archetypes == ()
        assert len(coverage.buildable_decks) == 2

    async def test_format_coverage_other_format(self, service, mixed_collection) -> None:
        """A card rotated out of Standard still counts in Modern."""
        coverage = await service.format_coverage("col-1", "modern")
        assert coverage.total_legal_cards == 4
        assert coverage.legal_copies == 8
