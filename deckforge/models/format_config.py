"""
Format configuration value objects.

Each format adapter is fully described by these immutable records. They
carry no behaviour beyond small lookups; the rules that consume them live
in deckforge.formats.

INVARIANT: ScoreWeights are non-negative and sum to at most 100, so a
synergy total built from them stays in [0, 100].
"""

from dataclasses import dataclass, field
from enum import Enum


class FormatType(str, Enum):
    STANDARD = "standard"
    MODERN = "modern"
    COMMANDER = "commander"
    BRAWL = "brawl"


class CardRole(str, Enum):
    MAINBOARD = "mainboard"
    SIDEBOARD = "sideboard"
    COMMANDER = "commander"


class CardCategory(str, Enum):
    """Functional role a card plays in a deck."""

    LANDS = "lands"
    CREATURES = "creatures"
    REMOVAL = "removal"
    CARD_DRAW = "card_draw"
    RAMP = "ramp"
    BOARD_WIPE = "board_wipe"
    PROTECTION = "protection"
    THREATS = "threats"
    TUTOR = "tutor"
    RECURSION = "recursion"


class DeckStage(str, Enum):
    EARLY = "early"
    MID = "mid"
    LATE = "late"
    COMPLETE = "complete"


class ScoreAxis(str, Enum):
    MECHANICAL = "mechanical"
    STRATEGIC = "strategic"
    FORMAT_CONTEXT = "format_context"
    THEME = "theme"


@dataclass(frozen=True, slots=True)
class DeckSizeConfig:
    """
    Mainboard and sideboard size rules.

    A mainboard_max of None means no upper bound. Commander formats count
    the commander separately from the mainboard.
    """

    mainboard_min: int
    mainboard_max: int | None
    mainboard_optimal: int
    sideboard_max: int
    has_commander: bool = False
    singleton: bool = False


@dataclass(frozen=True, slots=True)
class CopyLimitConfig:
    """
    Copy limits keyed by card name.

    An exception value of None means any number of copies may be played.
    """

    default: int
    exceptions: dict[str, int | None] = field(default_factory=dict)

    def limit_for(self, card_name: str) -> int | None:
        if card_name in self.exceptions:
            return self.exceptions[card_name]
        return self.default


@dataclass(frozen=True, slots=True)
class CategoryTarget:
    minimum: int
    optimal: int
    maximum: int


@dataclass(frozen=True, slots=True)
class CategoryTargets:
    targets: dict[CardCategory, CategoryTarget]

    def get(self, category: CardCategory) -> CategoryTarget | None:
        return self.targets.get(category)

    def categories(self) -> list[CardCategory]:
        return list(self.targets)


@dataclass(frozen=True, slots=True)
class ScoreWeights:
    """Per-axis ceilings for the synergy score."""

    mechanical: float
    strategic: float
    format_context: float
    theme: float

    def __post_init__(self) -> None:
        values = (self.mechanical, self.strategic, self.format_context, self.theme)
        if any(value < 0 for value in values):
            raise ValueError("Score weights must be non-negative")
        if sum(values) > 100 + 1e-9:
            raise ValueError(f"Score weights sum to {sum(values)}, must be <= 100")

    @property
    def total(self) -> float:
        return self.mechanical + self.strategic + self.format_context + self.theme

    def for_axis(self, axis: ScoreAxis) -> float:
        return {
            ScoreAxis.MECHANICAL: self.mechanical,
            ScoreAxis.STRATEGIC: self.strategic,
            ScoreAxis.FORMAT_CONTEXT: self.format_context,
            ScoreAxis.THEME: self.theme,
        }[axis]


@dataclass(frozen=True, slots=True)
class StageThresholds:
    """Mainboard card counts at which a deck leaves each stage."""

    early: int
    mid: int
    late: int


@dataclass(frozen=True, slots=True)
class ColorConstraint:
    """
    Colors a card's identity must fall within.

    When enforced is False every card is compatible. An enforced constraint
    with no allowed colors admits colorless cards only.
    """

    allowed_colors: frozenset[str]
    enforced: bool


@dataclass(frozen=True, slots=True)
class ArchetypeModifiers:
    """
    Per-archetype adjustments applied by a format adapter.

    Attributes:
        category_weights: Multipliers applied to category targets
        preferred_keywords: Keywords that earn a strategic bonus
        avoid_keywords: Keywords that earn a strategic penalty
        weight_shift: Points moved between score axes for this archetype
    """

    category_weights: dict[CardCategory, float] = field(default_factory=dict)
    preferred_keywords: tuple[str, ...] = ()
    avoid_keywords: tuple[str, ...] = ()
    weight_shift: dict[ScoreAxis, float] = field(default_factory=dict)


DEFAULT_MODIFIERS = ArchetypeModifiers()


@dataclass(frozen=True, slots=True)
class ArchetypeProfile:
    """
    Reference composition for one archetype in one format.

    category_frequencies holds the expected share of non-land mainboard
    cards in each category. importance weights the distance per category.
    """

    name: str
    category_frequencies: dict[CardCategory, float]
    importance: dict[CardCategory, float] = field(default_factory=dict)
    keywords: tuple[str, ...] = ()
    min_cards: int = 0
    tribal: bool = False
