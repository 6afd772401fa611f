"""
Card catalog model.

A Card is one immutable printing's worth of facts as supplied by the
external catalog. Nothing in this package mutates a Card; every analysis
reads these fields and nothing else.

INVARIANT: legality is looked up per format and defaults to NOT_LEGAL
when the catalog has no entry for that format.
"""

from dataclasses import dataclass, field
from enum import Enum


class LegalityStatus(str, Enum):
    """Per-format legality as published by the catalog."""

    LEGAL = "legal"
    NOT_LEGAL = "not_legal"
    BANNED = "banned"
    RESTRICTED = "restricted"

    @classmethod
    def parse(cls, value: str | None) -> "LegalityStatus":
        """Map a raw catalog string to a status, unknown values are not legal."""
        if value is None:
            return cls.NOT_LEGAL
        try:
            return cls(value.lower())
        except ValueError:
            return cls.NOT_LEGAL


class ManaColor(str, Enum):
    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"


ALL_COLORS: frozenset[str] = frozenset(color.value for color in ManaColor)

BASIC_LAND_NAMES: frozenset[str] = frozenset(
    {
        "Plains",
        "Island",
        "Swamp",
        "Mountain",
        "Forest",
        "Wastes",
        "Snow-Covered Plains",
        "Snow-Covered Island",
        "Snow-Covered Swamp",
        "Snow-Covered Mountain",
        "Snow-Covered Forest",
    }
)


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable card facts.

    Attributes:
        id: Catalog identifier (exact identity, never fuzzy-matched)
        name: Card name as printed
        cmc: Mana value
        colors: Colors from the mana cost
        color_identity: Colors including rules-text symbols
        supertypes: e.g. {"Legendary", "Basic"}
        types: e.g. {"Creature", "Land"}
        subtypes: e.g. {"Elf", "Warrior"}
        keywords: Keyword abilities as published ("Flying", "Haste")
        legalities: format name -> LegalityStatus
    """

    id: str
    name: str
    mana_cost: str = ""
    cmc: float = 0.0
    colors: frozenset[str] = frozenset()
    color_identity: frozenset[str] = frozenset()
    supertypes: frozenset[str] = frozenset()
    types: frozenset[str] = frozenset()
    subtypes: frozenset[str] = frozenset()
    keywords: frozenset[str] = frozenset()
    oracle_text: str = ""
    power: str | None = None
    toughness: str | None = None
    legalities: dict[str, LegalityStatus] = field(default_factory=dict, hash=False, compare=True)

    def legality(self, format_name: str) -> LegalityStatus:
        """Legality in a format, NOT_LEGAL when the catalog is silent."""
        return self.legalities.get(format_name, LegalityStatus.NOT_LEGAL)

    @property
    def is_basic_land(self) -> bool:
        return self.name in BASIC_LAND_NAMES or (
            "Basic" in self.supertypes and "Land" in self.types
        )

    @property
    def is_land(self) -> bool:
        return "Land" in self.types

    @property
    def is_creature(self) -> bool:
        return "Creature" in self.types

    @property
    def is_legendary(self) -> bool:
        return "Legendary" in self.supertypes

    @property
    def lowered_text(self) -> str:
        return self.oracle_text.lower()

    @property
    def lowered_keywords(self) -> frozenset[str]:
        return frozenset(keyword.lower() for keyword in self.keywords)

    @property
    def power_value(self) -> int:
        """Numeric power, non-numeric values like '*' count as 0."""
        return _parse_stat(self.power)

    @property
    def toughness_value(self) -> int:
        return _parse_stat(self.toughness)


def _parse_stat(value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0
