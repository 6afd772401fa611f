"""Tests for progressive archetype notifications."""

import pytest

from deckforge.analysis.buildable import BuildableDecksAnalyzer
from deckforge.models.buildable import DeckTemplate, TemplateCard
from deckforge.models.collection import CollectionCard
from deckforge.models.format_config import CardCategory, FormatType
from deckforge.models.notifications import (
    ArchetypeUnlocked,
    CollectionChangeEvent,
    NotificationKind,
)
from deckforge.services.progressive_updates import ProgressiveUpdates, newly_viable

CORE_SIZE = 41


@pytest.fixture
def template() -> DeckTemplate:
    return DeckTemplate(
        name="Big Midrange",
        archetype="midrange",
        format="standard",
        core_cards=tuple(
            TemplateCard(f"Core {i:02d}", 1, CardCategory.CREATURES) for i in range(CORE_SIZE)
        ),
    )


@pytest.fixture
def core_cards(template, make_card):
    return [make_card(name) for name in template.core_names]


@pytest.fixture
def received() -> list:
    return []


@pytest.fixture
def updates(collection_store, template, received) -> ProgressiveUpdates:
    analyzer = BuildableDecksAnalyzer({FormatType.STANDARD: (template,)})
    return ProgressiveUpdates(collection_store, analyzer=analyzer, sink=received.append)


def _event(card, delta: int = 1) -> CollectionChangeEvent:
    return CollectionChangeEvent(collection_id="col-1", card_id=card.id, delta_quantity=delta)


class TestNewlyViable:
    def test_growth_reports_new_names(self) -> None:
        assert newly_viable(frozenset({"A"}), frozenset({"A", "C", "B"})) == ["B", "C"]

    def test_no_growth_reports_nothing(self) -> None:
        """A swap keeps the count the same and stays quiet."""
        assert newly_viable(frozenset({"A"}), frozenset({"B"})) == []
        assert newly_viable(frozenset({"A", "B"}), frozenset({"A"})) == []


class TestObserve:
    async def test_baseline_never_notifies(
        self, updates, collection_store, core_cards, received
    ) -> None:
        collection_store.add_all("col-1", core_cards[:30])

        viable = await updates.observe("col-1", "standard")

        assert viable == frozenset({"Big Midrange"})
        assert updates.is_tracked("col-1", FormatType.STANDARD)
        assert received == []


class TestHandleChange:
    async def test_first_change_is_a_baseline(self, updates, collection_store, core_cards) -> None:
        collection_store.add_all("col-1", core_cards[:30])

        assert await updates.handle_change(_event(core_cards[0])) == []
        assert sorted(updates.tracked_formats("col-1")) == sorted(FormatType)

    async def test_crossing_viable_threshold_notifies(
        self, updates, collection_store, core_cards, received
    ) -> None:
        collection_store.add_all("col-1", core_cards[:24])
        await updates.observe("col-1", FormatType.STANDARD)

        added = core_cards[24]
        collection_store.set("col-1", added, 1)
        notifications = await updates.handle_change(_event(added))

        assert len(notifications) == 1
        notification = notifications[0]
        assert notification.kind == NotificationKind.ARCHETYPE_UNLOCKED
        assert notification.format == "standard"
        assert isinstance(notification.payload, ArchetypeUnlocked)
        assert notification.payload.template_name == "Big Midrange"
        assert notification.payload.completeness == 61
        assert notification.payload.key_cards_added == (added.name,)
        assert received == notifications

    async def test_already_viable_does_not_repeat(
        self, updates, collection_store, core_cards, received
    ) -> None:
        collection_store.add_all("col-1", core_cards[:25])
        await updates.observe("col-1", FormatType.STANDARD)

        collection_store.set("col-1", core_cards[25], 1)
        assert await updates.handle_change(_event(core_cards[25])) == []
        assert received == []

    async def test_removal_never_notifies_and_lowers_baseline(
        self, updates, collection_store, core_cards
    ) -> None:
        collection_store.add_all("col-1", core_cards[:25])
        await updates.observe("col-1", FormatType.STANDARD)

        collection_store.set("col-1", core_cards[0], 0)
        assert await updates.handle_change(_event(core_cards[0], delta=-1)) == []
        assert updates.snapshot("col-1", FormatType.STANDARD) == frozenset()

        # Crossing back up is announced again
        collection_store.set("col-1", core_cards[0], 1)
        notifications = await updates.handle_change(_event(core_cards[0]))
        assert [n.payload.template_name for n in notifications] == ["Big Midrange"]

    async def test_forget_resets_tracking(self, updates, collection_store, core_cards) -> None:
        await updates.observe("col-1", FormatType.STANDARD)
        updates.forget("col-1")
        assert updates.tracked_formats("col-1") == []


class TestCheckNewlyBuildableDecks:
    def test_threshold(self, updates, core_cards) -> None:
        owned = [CollectionCard(card, 1) for card in core_cards[:36]]

        assert updates.check_newly_buildable_decks(owned, "standard") == []

        owned.append(CollectionCard(core_cards[36], 1))
        decks = updates.check_newly_buildable_decks(owned, "standard")
        assert [deck.template_name for deck in decks] == ["Big Midrange"]
        assert decks[0].completeness == 90
        assert len(decks[0].missing_cards) == 4

    def test_custom_threshold(self, updates, core_cards) -> None:
        owned = [CollectionCard(card, 1) for card in core_cards[:25]]
        decks = updates.check_newly_buildable_decks(owned, FormatType.STANDARD, threshold=60)
        assert len(decks) == 1

    def test_stateless(self, updates, core_cards) -> None:
        """Checking does not record a baseline."""
        owned = [CollectionCard(card, 1) for card in core_cards]
        updates.check_newly_buildable_decks(owned, "standard")
        assert not updates.is_tracked("col-1", FormatType.STANDARD)
