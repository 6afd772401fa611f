"""
Deck model.

A DeckWithCards is a header plus a multiset of DeckCard entries. It does
no validation of its own: decks are edited in place and are routinely
illegal mid-edit. Format adapters decide what is legal.
"""

from dataclasses import dataclass

from deckforge.models.card import Card
from deckforge.models.format_config import CardRole


@dataclass(frozen=True, slots=True)
class DeckCard:
    card: Card
    quantity: int
    role: CardRole = CardRole.MAINBOARD

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"Quantity for {self.card.name} must be >= 0, got {self.quantity}")


@dataclass(frozen=True, slots=True)
class DeckWithCards:
    """
    A deck header and its cards.

    Attributes:
        id: Deck identifier
        name: Display name
        format: Format key (not validated here)
        cards: Deck entries across all roles
        collection_id: Collection the deck is built from, if linked
        commander_id: Card id of the commander, if any
        colors: Declared color preference for non-commander formats
        strategy: User-declared strategy tag ("aggro", "tribal", ...)
    """

    id: str
    name: str
    format: str
    cards: tuple[DeckCard, ...] = ()
    collection_id: str | None = None
    commander_id: str | None = None
    colors: frozenset[str] = frozenset()
    strategy: str | None = None

    def with_role(self, role: CardRole) -> list[DeckCard]:
        return [entry for entry in self.cards if entry.role == role and entry.quantity > 0]

    @property
    def mainboard(self) -> list[DeckCard]:
        return self.with_role(CardRole.MAINBOARD)

    @property
    def sideboard(self) -> list[DeckCard]:
        return self.with_role(CardRole.SIDEBOARD)

    @property
    def commander(self) -> DeckCard | None:
        """The commander entry; commander_id only breaks ties between several."""
        commanders = self.with_role(CardRole.COMMANDER)
        if not commanders:
            return None
        for entry in commanders:
            if entry.card.id == self.commander_id:
                return entry
        return commanders[0]

    @property
    def mainboard_count(self) -> int:
        return sum(entry.quantity for entry in self.mainboard)

    @property
    def sideboard_count(self) -> int:
        return sum(entry.quantity for entry in self.sideboard)

    @property
    def card_ids(self) -> frozenset[str]:
        return frozenset(entry.card.id for entry in self.cards if entry.quantity > 0)

    def playing_cards(self) -> list[DeckCard]:
        """Mainboard plus commander entries."""
        return self.mainboard + self.with_role(CardRole.COMMANDER)

    def copies_of(self, card_name: str, roles: tuple[CardRole, ...] | None = None) -> int:
        return sum(
            entry.quantity
            for entry in self.cards
            if entry.card.name == card_name and (roles is None or entry.role in roles)
        )


def empty_deck(format_name: str, deck_id: str = "new") -> DeckWithCards:
    """A deck with no cards, for evaluating a collection without a deck."""
    return DeckWithCards(id=deck_id, name="New Deck", format=format_name)
