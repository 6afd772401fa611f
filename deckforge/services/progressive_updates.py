"""
Progressive updates.

Watches collection changes and reports when they unlock new archetypes.

For each (collection, format) pair the tracker holds the set of template
names that were viable at the last look. A change re-runs the buildable
analysis and compares against that snapshot.

INVARIANTS:
- The first look at a pair is a baseline and never notifies.
- Notifications are emitted only when the number of viable templates
  grows, and only for templates that were not viable before.
- Removals never notify; they only lower the baseline.
"""

import logging
from collections.abc import Callable

from deckforge.analysis.buildable import BuildableDecksAnalyzer
from deckforge.config import BUILDABLE_THRESHOLD
from deckforge.formats.factory import parse_format
from deckforge.models.buildable import BuildableDeck
from deckforge.models.collection import CollectionCard, owned_by_name
from deckforge.models.format_config import FormatType
from deckforge.models.notifications import (
    ArchetypeUnlocked,
    CollectionChangeEvent,
    DeckBuildable,
    NotificationKind,
    ProgressiveNotification,
)
from deckforge.services.stores import CollectionStore

logger = logging.getLogger(__name__)

NotificationSink = Callable[[ProgressiveNotification], None]


def log_notification(notification: ProgressiveNotification) -> None:
    """Default sink: notifications are logged, not delivered."""
    logger.info(
        "PROGRESSIVE_NOTIFICATION",
        extra={
            "kind": notification.kind.value,
            "collection_id": notification.collection_id,
            "format": notification.format,
            "template": notification.payload.template_name,
        },
    )


def newly_viable(previous: frozenset[str], current: frozenset[str]) -> list[str]:
    """Templates to announce: none unless the viable count grew."""
    if len(current) <= len(previous):
        return []
    return sorted(current - previous)


class ProgressiveUpdates:
    """
    Per-process tracker of viable templates per collection and format.

    Args:
        collection_store: Source of owned cards
        analyzer: Buildable-deck analyzer; the default uses the built-in templates
        sink: Receives each notification; defaults to logging
    """

    def __init__(
        self,
        collection_store: CollectionStore,
        analyzer: BuildableDecksAnalyzer | None = None,
        sink: NotificationSink | None = None,
    ) -> None:
        self._store = collection_store
        self._analyzer = analyzer or BuildableDecksAnalyzer()
        self._sink = sink or log_notification
        self._snapshots: dict[tuple[str, FormatType], frozenset[str]] = {}

    def is_tracked(self, collection_id: str, format_type: FormatType) -> bool:
        return (collection_id, format_type) in self._snapshots

    def tracked_formats(self, collection_id: str) -> list[FormatType]:
        return [fmt for cid, fmt in self._snapshots if cid == collection_id]

    def snapshot(self, collection_id: str, format_type: FormatType) -> frozenset[str] | None:
        return self._snapshots.get((collection_id, format_type))

    def forget(self, collection_id: str) -> None:
        for key in [key for key in self._snapshots if key[0] == collection_id]:
            del self._snapshots[key]

    def _viable(self, owned: list[CollectionCard], format_type: FormatType) -> list[BuildableDeck]:
        decks = self._analyzer.analyze_owned(owned_by_name(owned), format_type)
        return [deck for deck in decks if deck.viable]

    async def observe(
        self, collection_id: str, format_name: str | FormatType
    ) -> frozenset[str]:
        """Record the current viable templates as the baseline. Never notifies."""
        format_type = parse_format(format_name)
        owned = await self._store.list_owned_cards(collection_id)
        viable = frozenset(deck.template_name for deck in self._viable(owned, format_type))
        self._snapshots[(collection_id, format_type)] = viable
        return viable

    async def handle_change(self, event: CollectionChangeEvent) -> list[ProgressiveNotification]:
        """
        Re-analyze every tracked format of the changed collection.

        A collection seen for the first time is baselined in every format
        and produces no notifications.
        """
        formats = self.tracked_formats(event.collection_id)
        if not formats:
            for format_type in FormatType:
                await self.observe(event.collection_id, format_type)
            logger.debug(
                "PROGRESSIVE_BASELINE_RECORDED",
                extra={"collection_id": event.collection_id},
            )
            return []

        owned = await self._store.list_owned_cards(event.collection_id)
        changed_names = {entry.card.name for entry in owned if entry.card.id == event.card_id}

        notifications = []
        for format_type in formats:
            key = (event.collection_id, format_type)
            viable = {deck.template_name: deck for deck in self._viable(owned, format_type)}
            previous = self._snapshots[key]
            self._snapshots[key] = frozenset(viable)

            for name in newly_viable(previous, frozenset(viable)):
                deck = viable[name]
                notification = ProgressiveNotification(
                    kind=NotificationKind.ARCHETYPE_UNLOCKED,
                    collection_id=event.collection_id,
                    format=format_type.value,
                    payload=ArchetypeUnlocked(
                        template_name=deck.template_name,
                        archetype=deck.archetype,
                        completeness=deck.completeness,
                        key_cards_added=tuple(
                            card for card in deck.owned_core_cards if card in changed_names
                        ),
                    ),
                    created_at=event.occurred_at,
                )
                notifications.append(notification)
                self._sink(notification)

        return notifications

    def check_newly_buildable_decks(
        self,
        collection_cards: list[CollectionCard],
        format_name: str | FormatType,
        threshold: int = BUILDABLE_THRESHOLD,
    ) -> list[DeckBuildable]:
        """Templates the collection covers at or above the buildable threshold."""
        format_type = parse_format(format_name)
        decks = self._analyzer.analyze_owned(owned_by_name(collection_cards), format_type)
        return [
            DeckBuildable(
                template_name=deck.template_name,
                completeness=deck.completeness,
                owned_cards=deck.owned_core_cards,
                missing_cards=deck.missing_key_cards,
            )
            for deck in decks
            if deck.completeness >= threshold
        ]
