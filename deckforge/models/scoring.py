"""
Scoring, archetype and gap-analysis records.

All of these are produced fresh per evaluation and never persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from deckforge.models.card import Card
from deckforge.models.deck import DeckWithCards
from deckforge.models.format_config import (
    ArchetypeModifiers,
    CardCategory,
    ColorConstraint,
    DeckStage,
    ScoreAxis,
    ScoreWeights,
)

if TYPE_CHECKING:
    from deckforge.formats.base import FormatAdapter


UNKNOWN_ARCHETYPE = "unknown"


# =============================================================================
# ARCHETYPE DETECTION
# =============================================================================


@dataclass(frozen=True, slots=True)
class ArchetypeSignal:
    archetype: str
    strength: float
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ArchetypeDetection:
    """
    Result of archetype detection.

    confidence is the primary archetype's strength, 0-100.
    """

    primary: str
    secondary: str | None
    confidence: float
    signals: tuple[ArchetypeSignal, ...] = ()

    @classmethod
    def unknown(cls) -> "ArchetypeDetection":
        return cls(primary=UNKNOWN_ARCHETYPE, secondary=None, confidence=0.0)


# =============================================================================
# GAP ANALYSIS
# =============================================================================


class CategoryStatus(str, Enum):
    UNDER = "under"
    MET = "met"
    OVER = "over"


@dataclass(frozen=True, slots=True)
class CategoryAnalysis:
    category: CardCategory
    current: int
    minimum: int
    optimal: int
    maximum: int
    status: CategoryStatus
    priority: float

    @property
    def shortfall(self) -> int:
        return max(0, self.optimal - self.current)


@dataclass(frozen=True, slots=True)
class GapRecommendation:
    category: CardCategory
    needed: int
    priority: float
    reason: str


@dataclass(frozen=True, slots=True)
class DeckGapAnalysis:
    categories: dict[CardCategory, CategoryAnalysis]
    overall_score: float
    recommendations: tuple[GapRecommendation, ...] = ()

    def for_category(self, category: CardCategory) -> CategoryAnalysis | None:
        return self.categories.get(category)


# =============================================================================
# SYNERGY SCORING
# =============================================================================


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    axis: ScoreAxis
    reason: str
    points: float


@dataclass(frozen=True, slots=True)
class SynergyScore:
    """
    Score for one candidate card.

    INVARIANT: 0 <= total <= 100 and total equals the sum of the four
    sub-scores (each already scaled to its axis ceiling).
    """

    mechanical: float
    strategic: float
    format_context: float
    theme: float
    total: float
    categories: tuple[CardCategory, ...] = ()
    breakdown: tuple[ScoreBreakdown, ...] = ()


@dataclass(frozen=True, slots=True)
class ScoringContext:
    """
    Everything the scorer needs about the deck being evaluated.

    Built once per request by build_scoring_context and shared read-only
    across every candidate.
    """

    deck: DeckWithCards
    adapter: "FormatAdapter"
    stage: DeckStage
    archetype: str
    confidence: float
    gaps: DeckGapAnalysis
    weights: ScoreWeights
    modifiers: ArchetypeModifiers
    color_constraint: ColorConstraint
    optimal_mana_value: float
    strategy: str | None = None
    declared_colors: frozenset[str] = frozenset()
    deck_traits: frozenset[str] = frozenset()
    dominant_tribe: str | None = None
    dominant_tribe_count: int = 0


# =============================================================================
# SUGGESTIONS
# =============================================================================


@dataclass(frozen=True, slots=True)
class Suggestion:
    """The single suggestion record shared by every producer and consumer."""

    card: Card
    score: SynergyScore
    categories: tuple[CardCategory, ...]
    in_collection: bool = True
    owned_quantity: int = 0


@dataclass(frozen=True, slots=True)
class SuggestionPage:
    suggestions: tuple[Suggestion, ...]
    total: int
    has_more: bool
    format: str
    deck_stage: DeckStage | None = None
    archetype: str | None = None
    degraded: bool = False

    @classmethod
    def empty(cls, format_name: str, degraded: bool = False) -> "SuggestionPage":
        return cls(suggestions=(), total=0, has_more=False, format=format_name, degraded=degraded)
