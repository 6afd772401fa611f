"""
Archetype template and buildable-deck records.

Templates are static reference data. BuildableDeck and FormatCoverage are
derived from a collection snapshot and a template set.
"""

from dataclasses import dataclass

from deckforge.models.format_config import CardCategory


@dataclass(frozen=True, slots=True)
class TemplateCard:
    card_name: str
    quantity: int
    category: CardCategory


@dataclass(frozen=True, slots=True)
class DeckTemplate:
    """
    A named archetype template.

    Attributes:
        name: Template name, unique within a format
        archetype: Archetype tag the template represents
        format: Format key
        core_cards: Cards the deck cannot be built without
        support_cards: Flexible cards that improve the deck
        land_count: Suggested number of lands
        color_identity: Colors the template plays
    """

    name: str
    archetype: str
    format: str
    core_cards: tuple[TemplateCard, ...]
    support_cards: tuple[TemplateCard, ...] = ()
    land_count: int = 0
    color_identity: frozenset[str] = frozenset()

    @property
    def core_names(self) -> list[str]:
        return [entry.card_name for entry in self.core_cards]


@dataclass(frozen=True, slots=True)
class BuildableDeck:
    """
    How much of one template a collection already covers.

    INVARIANT: 0 <= completeness <= 100.
    """

    template_name: str
    archetype: str
    format: str
    completeness: int
    owned_core_cards: tuple[str, ...]
    missing_key_cards: tuple[str, ...]
    missing_count: int
    owned_support_cards: tuple[str, ...] = ()
    viable: bool = False


@dataclass(frozen=True, slots=True)
class ViableArchetype:
    name: str
    archetype: str
    completeness: int
    key_cards: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class BuildableReport:
    viable_archetypes: tuple[ViableArchetype, ...]
    buildable_decks: tuple[BuildableDeck, ...]


@dataclass(frozen=True, slots=True)
class FormatCoverage:
    """
    How well a collection covers one format.

    total_legal_cards counts distinct owned cards that are playable in the
    format; legal_copies counts owned copies of those cards.
    """

    format: str
    total_legal_cards: int
    legal_copies: int
    viable_archetypes: tuple[ViableArchetype, ...]
    buildable_decks: tuple[BuildableDeck, ...]
