"""
Collaborator interfaces the recommendation pipeline consumes.

The pipeline never reaches for a global store: every component receives
implementations of these protocols at construction. The SQL-backed
implementations live in deckforge.db.operations; tests use in-memory
fakes.
"""

from typing import Protocol

from deckforge.models.card import Card, LegalityStatus
from deckforge.models.collection import CollectionCard
from deckforge.models.deck import DeckWithCards
from deckforge.models.format_config import CardRole


class CardCatalog(Protocol):
    async def get_card(self, card_id: str) -> Card | None: ...

    async def legality_table(self, card: Card) -> dict[str, LegalityStatus]: ...


class CollectionStore(Protocol):
    async def list_owned_cards(self, collection_id: str) -> list[CollectionCard]:
        """Every card in the collection with quantity > 0."""
        ...


class DeckStore(Protocol):
    async def get_deck(self, deck_id: str) -> DeckWithCards | None: ...

    async def apply_card_change(
        self,
        deck_id: str,
        card_id: str,
        quantity: int,
        role: CardRole,
    ) -> DeckWithCards:
        """
        Set a card's quantity in one role of a deck.

        A quantity of 0 removes the entry.
        """
        ...
