from dataclasses import dataclass

from deckforge.models.card import Card


@dataclass(frozen=True, slots=True)
class CollectionCard:
    """
    An owned card and how many copies are owned.

    A read-only snapshot: a collection store returns a fresh list of
    these for every evaluation.
    """

    card: Card
    quantity: int

    @property
    def owned(self) -> bool:
        return self.quantity > 0


def owned_by_name(cards: list[CollectionCard]) -> dict[str, int]:
    """Total owned copies per exact card name."""
    totals: dict[str, int] = {}
    for entry in cards:
        if entry.quantity <= 0:
            continue
        totals[entry.card.name] = totals.get(entry.card.name, 0) + entry.quantity
    return totals
