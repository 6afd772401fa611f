"""
Modern format adapter.

Deck construction matches Standard (60+ mainboard, 15 sideboard, four
copies) but legality comes from the non-rotating Modern pool and the
format's lower curve shapes the heuristics.
"""

from deckforge.formats.base import (
    check_can_add,
    check_card_legality,
    check_copy_limits,
    check_mainboard_size,
    check_sideboard_size,
    curve_target,
    identity_within,
    is_playable_status,
    is_stackable,
    is_suggestible_status,
    lookup_modifiers,
    max_copies_for,
    scale_targets,
    stage_for_count,
    weights_for,
)
from deckforge.formats.legality import legality_status
from deckforge.models.card import ALL_COLORS, Card, LegalityStatus
from deckforge.models.deck import DeckWithCards
from deckforge.models.format_config import (
    ArchetypeModifiers,
    ArchetypeProfile,
    CardCategory,
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
from deckforge.models.validation import ValidationCollector, ValidationResult

DECK_SIZE = DeckSizeConfig(
    mainboard_min=60,
    mainboard_max=None,
    mainboard_optimal=60,
    sideboard_max=15,
)

COPY_LIMIT = CopyLimitConfig(default=4)

CATEGORY_TARGETS = CategoryTargets(
    {
        CardCategory.LANDS: CategoryTarget(18, 22, 24),
        CardCategory.CREATURES: CategoryTarget(10, 16, 26),
        CardCategory.REMOVAL: CategoryTarget(6, 10, 14),
        CardCategory.CARD_DRAW: CategoryTarget(2, 5, 8),
        CardCategory.THREATS: CategoryTarget(8, 14, 22),
    }
)

SCORE_WEIGHTS = ScoreWeights(mechanical=40, strategic=30, format_context=20, theme=10)

STAGE_THRESHOLDS = StageThresholds(early=20, mid=40, late=55)

ARCHETYPE_MODIFIERS: dict[str, ArchetypeModifiers] = {
    "aggro": ArchetypeModifiers(
        category_weights={
            CardCategory.CREATURES: 1.3,
            CardCategory.REMOVAL: 1.3,
            CardCategory.THREATS: 1.2,
        },
        preferred_keywords=("haste", "prowess", "first strike", "menace"),
        weight_shift={ScoreAxis.STRATEGIC: 5, ScoreAxis.THEME: -5},
    ),
    "control": ArchetypeModifiers(
        category_weights={
            CardCategory.REMOVAL: 1.5,
            CardCategory.BOARD_WIPE: 1.4,
            CardCategory.CARD_DRAW: 1.4,
            CardCategory.CREATURES: 0.5,
        },
        preferred_keywords=("flash", "ward"),
        avoid_keywords=("haste",),
        weight_shift={ScoreAxis.FORMAT_CONTEXT: 5, ScoreAxis.THEME: -5},
    ),
    "midrange": ArchetypeModifiers(
        category_weights={
            CardCategory.CREATURES: 1.2,
            CardCategory.REMOVAL: 1.3,
            CardCategory.THREATS: 1.2,
        },
        preferred_keywords=("vigilance", "lifelink", "deathtouch"),
    ),
    "combo": ArchetypeModifiers(
        category_weights={
            CardCategory.CARD_DRAW: 1.5,
            CardCategory.PROTECTION: 1.3,
            CardCategory.TUTOR: 1.6,
        },
        preferred_keywords=("cascade", "storm"),
        weight_shift={ScoreAxis.MECHANICAL: 5, ScoreAxis.THEME: -5},
    ),
    "tribal": ArchetypeModifiers(
        category_weights={CardCategory.CREATURES: 1.5, CardCategory.THREATS: 1.2},
        weight_shift={ScoreAxis.THEME: 10, ScoreAxis.MECHANICAL: -10},
    ),
}

ARCHETYPE_PROFILES: tuple[ArchetypeProfile, ...] = (
    ArchetypeProfile(
        name="aggro",
        category_frequencies={
            CardCategory.CREATURES: 0.5,
            CardCategory.THREATS: 0.3,
            CardCategory.REMOVAL: 0.4,
        },
        importance={
            CardCategory.CREATURES: 1.4,
            CardCategory.REMOVAL: 1.2,
            CardCategory.THREATS: 1.2,
        },
        keywords=("haste", "prowess", "first strike", "menace", "deals 3 damage"),
        min_cards=20,
    ),
    ArchetypeProfile(
        name="control",
        category_frequencies={
            CardCategory.CREATURES: 0.1,
            CardCategory.REMOVAL: 0.45,
            CardCategory.BOARD_WIPE: 0.1,
            CardCategory.CARD_DRAW: 0.35,
            CardCategory.PROTECTION: 0.2,
        },
        importance={
            CardCategory.REMOVAL: 1.5,
            CardCategory.BOARD_WIPE: 1.4,
            CardCategory.CARD_DRAW: 1.4,
            CardCategory.CREATURES: 0.5,
        },
        keywords=("counter", "flash", "ward"),
        min_cards=15,
    ),
    ArchetypeProfile(
        name="midrange",
        category_frequencies={
            CardCategory.CREATURES: 0.4,
            CardCategory.REMOVAL: 0.35,
            CardCategory.THREATS: 0.3,
            CardCategory.CARD_DRAW: 0.1,
        },
        importance={
            CardCategory.CREATURES: 1.2,
            CardCategory.REMOVAL: 1.3,
            CardCategory.THREATS: 1.2,
        },
        keywords=("vigilance", "lifelink", "deathtouch", "discard"),
        min_cards=18,
    ),
    ArchetypeProfile(
        name="combo",
        category_frequencies={
            CardCategory.CREATURES: 0.2,
            CardCategory.CARD_DRAW: 0.4,
            CardCategory.TUTOR: 0.2,
            CardCategory.RAMP: 0.15,
        },
        importance={
            CardCategory.CARD_DRAW: 1.5,
            CardCategory.TUTOR: 1.6,
            CardCategory.RAMP: 1.2,
        },
        keywords=("storm", "cascade", "untap"),
        min_cards=10,
    ),
    ArchetypeProfile(
        name="tribal",
        category_frequencies={
            CardCategory.CREATURES: 0.75,
            CardCategory.THREATS: 0.25,
            CardCategory.RAMP: 0.15,
        },
        importance={CardCategory.CREATURES: 1.5, CardCategory.THREATS: 1.2},
        min_cards=15,
        tribal=True,
    ),
)


class ModernAdapter:
    """Modern constructed."""

    format = FormatType.MODERN
    display_name = "Modern"
    deck_size = DECK_SIZE
    copy_limit = COPY_LIMIT
    stage_thresholds = STAGE_THRESHOLDS
    supported_archetypes = tuple(ARCHETYPE_MODIFIERS)
    archetype_profiles = ARCHETYPE_PROFILES

    def legality_of(self, card: Card) -> LegalityStatus:
        return legality_status(card, self.format)

    def is_playable(self, card: Card) -> bool:
        return is_playable_status(self.legality_of(card))

    def is_suggestible(self, card: Card) -> bool:
        return is_suggestible_status(self.legality_of(card))

    def max_copies(self, card: Card) -> int | None:
        return max_copies_for(card, self.copy_limit, self.legality_of(card))

    def validate_deck(self, deck: DeckWithCards) -> ValidationResult:
        collector = ValidationCollector()
        check_mainboard_size(deck, self.deck_size, collector)
        check_sideboard_size(deck, self.deck_size, collector)
        check_copy_limits(deck.cards, self, collector)
        check_card_legality(deck, self, collector)
        return collector.result()

    def can_add_card(self, card: Card, deck: DeckWithCards) -> ValidationResult:
        return check_can_add(card, deck, self, counted_roles=None)

    def score_weights_for(self, stage: DeckStage, archetype: str) -> ScoreWeights:
        return weights_for(SCORE_WEIGHTS, stage, self.archetype_modifiers(archetype))

    def category_targets_for(self, archetype: str) -> CategoryTargets:
        return scale_targets(CATEGORY_TARGETS, self.archetype_modifiers(archetype))

    def stage_of(self, deck: DeckWithCards) -> DeckStage:
        return stage_for_count(deck.mainboard_count, self.stage_thresholds)

    def color_constraint_for(self, deck: DeckWithCards) -> ColorConstraint:
        return ColorConstraint(allowed_colors=deck.colors or ALL_COLORS, enforced=False)

    def is_color_compatible(self, card: Card, constraint: ColorConstraint) -> bool:
        return identity_within(card, constraint)

    def archetype_modifiers(self, archetype: str) -> ArchetypeModifiers:
        return lookup_modifiers(ARCHETYPE_MODIFIERS, archetype)

    def optimal_mana_value(self, deck: DeckWithCards) -> float:
        return curve_target(
            deck,
            empty_value=2.0,
            target=2.6,
            tolerance=0.2,
            raise_by=1.0,
            raise_cap=3.5,
            lower_by=0.5,
            lower_floor=1.0,
        )

    def format_value(self, card: Card, deck: DeckWithCards) -> list[tuple[str, float]]:
        if is_stackable(card):
            return [("Works well as a 4-of", 6.0)]
        return []
