from deckforge.models.buildable import (
    BuildableDeck,
    BuildableReport,
    DeckTemplate,
    FormatCoverage,
    TemplateCard,
    ViableArchetype,
)
from deckforge.models.card import ALL_COLORS, BASIC_LAND_NAMES, Card, LegalityStatus, ManaColor
from deckforge.models.collection import CollectionCard, owned_by_name
from deckforge.models.deck import DeckCard, DeckWithCards, empty_deck
from deckforge.models.failure import (
    ApiResponse,
    CacheComputationError,
    EvaluationCancelledError,
    FailureDetail,
    FailureKind,
    FormatMismatchError,
    KnownError,
    NotFoundError,
    OutcomeType,
    UnsupportedFormatError,
)
from deckforge.models.format_config import (
    ArchetypeModifiers,
    ArchetypeProfile,
    CardCategory,
    CardRole,
    CategoryTarget,
    CategoryTargets,
    ColorConstraint,
    CopyLimitConfig,
    DeckSizeConfig,
    DeckStage,
    FormatType,
    ScoreAxis,
    ScoreWeights,
    StageThresholds,
)
from deckforge.models.notifications import (
    ArchetypeUnlocked,
    CollectionChangeEvent,
    DeckBuildable,
    NotificationKind,
    ProgressiveNotification,
)
from deckforge.models.scoring import (
    ArchetypeDetection,
    ArchetypeSignal,
    CategoryAnalysis,
    CategoryStatus,
    DeckGapAnalysis,
    GapRecommendation,
    ScoreBreakdown,
    ScoringContext,
    Suggestion,
    SuggestionPage,
    SynergyScore,
)
from deckforge.models.validation import (
    ValidationCollector,
    ValidationError,
    ValidationKind,
    ValidationResult,
)

__all__ = [
    "ALL_COLORS",
    "BASIC_LAND_NAMES",
    "ApiResponse",
    "ArchetypeDetection",
    "ArchetypeModifiers",
    "ArchetypeProfile",
    "ArchetypeSignal",
    "ArchetypeUnlocked",
    "BuildableDeck",
    "BuildableReport",
    "CacheComputationError",
    "Card",
    "CardCategory",
    "CardRole",
    "CategoryAnalysis",
    "CategoryStatus",
    "CategoryTarget",
    "CategoryTargets",
    "CollectionCard",
    "CollectionChangeEvent",
    "ColorConstraint",
    "CopyLimitConfig",
    "DeckBuildable",
    "DeckCard",
    "DeckGapAnalysis",
    "DeckSizeConfig",
    "DeckStage",
    "DeckTemplate",
    "DeckWithCards",
    "EvaluationCancelledError",
    "FailureDetail",
    "FailureKind",
    "FormatCoverage",
    "FormatMismatchError",
    "FormatType",
    "GapRecommendation",
    "KnownError",
    "LegalityStatus",
    "ManaColor",
    "NotFoundError",
    "NotificationKind",
    "OutcomeType",
    "ProgressiveNotification",
    "ScoreAxis",
    "ScoreBreakdown",
    "ScoreWeights",
    "ScoringContext",
    "StageThresholds",
    "Suggestion",
    "SuggestionPage",
    "SynergyScore",
    "TemplateCard",
    "UnsupportedFormatError",
    "ValidationCollector",
    "ValidationError",
    "ValidationKind",
    "ValidationResult",
    "ViableArchetype",
    "empty_deck",
    "owned_by_name",
]
