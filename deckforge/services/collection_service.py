"""
Collection-first candidate selection.

Recommendations are drawn from the owned collection and nothing else:
every candidate returned here is owned, legal in the requested format,
not already in the deck, and inside the deck's color constraint.

An empty result is a normal outcome, not an error. A new collection, or
one with nothing legal in the format, simply has nothing to suggest.
"""

import logging

from deckforge.analysis.buildable import BuildableDecksAnalyzer
from deckforge.formats.base import FormatAdapter, identity_within
from deckforge.formats.factory import get_format_adapter
from deckforge.models.buildable import FormatCoverage
from deckforge.models.collection import CollectionCard
from deckforge.models.deck import DeckWithCards
from deckforge.models.format_config import ColorConstraint, FormatType
from deckforge.services.stores import CollectionStore

logger = logging.getLogger(__name__)


def _sorted(cards: list[CollectionCard]) -> list[CollectionCard]:
    return sorted(cards, key=lambda entry: (entry.card.name, entry.card.id))


def select_candidates(
    owned: list[CollectionCard],
    adapter: FormatAdapter,
    deck: DeckWithCards | None = None,
) -> list[CollectionCard]:
    """
    Owned cards that may be suggested for a deck.

    Only cards whose status is exactly 'legal' qualify; restricted cards
    are playable but never suggested.
    """
    in_deck = deck.card_ids if deck is not None else frozenset()
    constraint = adapter.color_constraint_for(deck) if deck is not None else None

    candidates = []
    for entry in owned:
        if not entry.owned:
            continue
        card = entry.card
        if card.id in in_deck:
            continue
        if not adapter.is_suggestible(card):
            continue
        if constraint is not None and not adapter.is_color_compatible(card, constraint):
            continue
        candidates.append(entry)
    return _sorted(candidates)


class CollectionService:
    """Reads a collection store and filters it per format."""

    def __init__(
        self,
        collection_store: CollectionStore,
        analyzer: BuildableDecksAnalyzer | None = None,
    ) -> None:
        self._store = collection_store
        self._analyzer = analyzer or BuildableDecksAnalyzer()

    async def list_owned(self, collection_id: str) -> list[CollectionCard]:
        cards = await self._store.list_owned_cards(collection_id)
        return [entry for entry in cards if entry.owned]

    async def owned_legal_candidates(
        self,
        collection_id: str,
        format_name: str | FormatType,
        deck: DeckWithCards | None = None,
    ) -> list[CollectionCard]:
        adapter = get_format_adapter(format_name)
        owned = await self.list_owned(collection_id)
        candidates = select_candidates(owned, adapter, deck)
        if not candidates:
            logger.info(
                "NO_CANDIDATES",
                extra={
                    "collection_id": collection_id,
                    "format": adapter.format.value,
                    "owned": len(owned),
                },
            )
        return candidates

    async def cards_for_format(
        self, collection_id: str, format_name: str | FormatType
    ) -> list[CollectionCard]:
        """Owned cards playable in the format, restricted cards included."""
        adapter = get_format_adapter(format_name)
        owned = await self.list_owned(collection_id)
        return _sorted([entry for entry in owned if adapter.is_playable(entry.card)])

    async def cards_for_color_identity(
        self, collection_id: str, colors: frozenset[str]
    ) -> list[CollectionCard]:
        """Owned cards whose color identity fits inside the given colors."""
        constraint = ColorConstraint(allowed_colors=frozenset(colors), enforced=True)
        owned = await self.list_owned(collection_id)
        return _sorted([entry for entry in owned if identity_within(entry.card, constraint)])

    async def format_coverage(
        self, collection_id: str, format_name: str | FormatType
    ) -> FormatCoverage:
        adapter = get_format_adapter(format_name)
        owned = await self.list_owned(collection_id)
        playable = [entry for entry in owned if adapter.is_playable(entry.card)]
        report = self._analyzer.analyze(owned, adapter.format)
        return FormatCoverage(
            format=adapter.format.value,
            total_legal_cards=len({entry.card.id for entry in playable}),
            legal_copies=sum(entry.quantity for entry in playable),
            viable_archetypes=report.viable_archetypes,
            buildable_decks=report.buildable_decks,
        )
