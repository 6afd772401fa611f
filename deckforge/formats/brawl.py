"""
Brawl format adapter.

Rules:
- Exactly 59 mainboard cards plus one commander, no sideboard
- Singleton except basic lands
- Color identity enforced from the commander
- Brawl legality, falling back to Standard when Brawl is unpublished
- Legendary creatures and legendary planeswalkers can be commanders
"""

from deckforge.formats.base import (
    check_can_add,
    check_card_legality,
    check_color_identity,
    check_copy_limits,
    check_mainboard_size,
    check_sideboard_size,
    curve_target,
    has_unique_effect,
    identity_within,
    is_playable_status,
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
from deckforge.models.validation import ValidationCollector, ValidationKind, ValidationResult

DECK_SIZE = DeckSizeConfig(
    mainboard_min=59,
    mainboard_max=59,
    mainboard_optimal=59,
    sideboard_max=0,
    has_commander=True,
    singleton=True,
)

COPY_LIMIT = CopyLimitConfig(default=1)

CATEGORY_TARGETS = CategoryTargets(
    {
        CardCategory.LANDS: CategoryTarget(22, 24, 26),
        CardCategory.RAMP: CategoryTarget(4, 6, 10),
        CardCategory.CARD_DRAW: CategoryTarget(3, 6, 8),
        CardCategory.REMOVAL: CategoryTarget(4, 6, 10),
        CardCategory.THREATS: CategoryTarget(8, 12, 20),
    }
)

SCORE_WEIGHTS = ScoreWeights(mechanical=35, strategic=30, format_context=25, theme=10)

STAGE_THRESHOLDS = StageThresholds(early=20, mid=40, late=52)

ARCHETYPE_MODIFIERS: dict[str, ArchetypeModifiers] = {
    "aggro": ArchetypeModifiers(
        category_weights={
            CardCategory.CREATURES: 1.5,
            CardCategory.THREATS: 1.3,
            CardCategory.REMOVAL: 0.8,
        },
        preferred_keywords=("haste", "first strike", "menace", "trample"),
        weight_shift={ScoreAxis.STRATEGIC: 5, ScoreAxis.THEME: -5},
    ),
    "control": ArchetypeModifiers(
        category_weights={
            CardCategory.REMOVAL: 1.4,
            CardCategory.BOARD_WIPE: 1.3,
            CardCategory.CARD_DRAW: 1.3,
            CardCategory.PROTECTION: 1.2,
        },
        preferred_keywords=("counter", "flash", "hexproof"),
        weight_shift={ScoreAxis.FORMAT_CONTEXT: 5, ScoreAxis.THEME: -5},
    ),
    "midrange": ArchetypeModifiers(
        category_weights={
            CardCategory.CREATURES: 1.2,
            CardCategory.REMOVAL: 1.2,
            CardCategory.THREATS: 1.2,
        },
        preferred_keywords=("vigilance", "lifelink", "deathtouch"),
    ),
    "tribal": ArchetypeModifiers(
        category_weights={CardCategory.CREATURES: 1.4, CardCategory.THREATS: 1.2},
        weight_shift={ScoreAxis.THEME: 10, ScoreAxis.MECHANICAL: -10},
    ),
}

ARCHETYPE_PROFILES: tuple[ArchetypeProfile, ...] = (
    ArchetypeProfile(
        name="aggro",
        category_frequencies={
            CardCategory.CREATURES: 0.6,
            CardCategory.THREATS: 0.35,
            CardCategory.REMOVAL: 0.15,
        },
        importance={
            CardCategory.CREATURES: 1.5,
            CardCategory.THREATS: 1.3,
            CardCategory.REMOVAL: 0.7,
        },
        keywords=("haste", "first strike", "menace", "trample", "double strike"),
        min_cards=20,
    ),
    ArchetypeProfile(
        name="control",
        category_frequencies={
            CardCategory.CREATURES: 0.15,
            CardCategory.REMOVAL: 0.35,
            CardCategory.BOARD_WIPE: 0.08,
            CardCategory.CARD_DRAW: 0.3,
        },
        importance={
            CardCategory.REMOVAL: 1.5,
            CardCategory.BOARD_WIPE: 1.4,
            CardCategory.CARD_DRAW: 1.3,
            CardCategory.CREATURES: 0.5,
        },
        keywords=("counter", "flash", "hexproof", "ward", "indestructible"),
        min_cards=15,
    ),
    ArchetypeProfile(
        name="midrange",
        category_frequencies={
            CardCategory.CREATURES: 0.45,
            CardCategory.REMOVAL: 0.25,
            CardCategory.THREATS: 0.3,
            CardCategory.RAMP: 0.1,
        },
        importance={
            CardCategory.CREATURES: 1.2,
            CardCategory.REMOVAL: 1.2,
            CardCategory.THREATS: 1.2,
        },
        keywords=("vigilance", "lifelink", "deathtouch", "reach"),
        min_cards=18,
    ),
    ArchetypeProfile(
        name="tribal",
        category_frequencies={CardCategory.CREATURES: 0.7, CardCategory.THREATS: 0.3},
        importance={CardCategory.CREATURES: 1.4, CardCategory.THREATS: 1.2},
        min_cards=15,
        tribal=True,
    ),
)


def can_be_commander(card: Card) -> bool:
    if "can be your commander" in card.lowered_text:
        return True
    return card.is_legendary and (card.is_creature or "Planeswalker" in card.types)


class BrawlAdapter:
    """Brawl (Standard-pool singleton with a commander)."""

    format = FormatType.BRAWL
    display_name = "Brawl"
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

        commander = deck.commander
        if commander is None:
            collector.error(ValidationKind.NO_COMMANDER, "Deck must have a commander")
        elif not can_be_commander(commander.card):
            collector.error(
                ValidationKind.INVALID_COMMANDER,
                f"{commander.card.name} cannot be used as a commander",
                card_id=commander.card.id,
                card_name=commander.card.name,
            )

        check_mainboard_size(deck, self.deck_size, collector)
        check_sideboard_size(deck, self.deck_size, collector)
        check_copy_limits(deck.playing_cards(), self, collector)
        check_card_legality(deck, self, collector)
        check_color_identity(deck, self, collector)
        return collector.result()

    def can_add_card(self, card: Card, deck: DeckWithCards) -> ValidationResult:
        return check_can_add(
            card, deck, self, counted_roles=(CardRole.MAINBOARD, CardRole.COMMANDER)
        )

    def score_weights_for(self, stage: DeckStage, archetype: str) -> ScoreWeights:
        return weights_for(SCORE_WEIGHTS, stage, self.archetype_modifiers(archetype))

    def category_targets_for(self, archetype: str) -> CategoryTargets:
        return scale_targets(CATEGORY_TARGETS, self.archetype_modifiers(archetype))

    def stage_of(self, deck: DeckWithCards) -> DeckStage:
        return stage_for_count(deck.mainboard_count, self.stage_thresholds)

    def color_constraint_for(self, deck: DeckWithCards) -> ColorConstraint:
        commander = deck.commander
        if commander is None:
            return ColorConstraint(allowed_colors=ALL_COLORS, enforced=False)
        return ColorConstraint(allowed_colors=commander.card.color_identity, enforced=True)

    def is_color_compatible(self, card: Card, constraint: ColorConstraint) -> bool:
        return identity_within(card, constraint)

    def archetype_modifiers(self, archetype: str) -> ArchetypeModifiers:
        return lookup_modifiers(ARCHETYPE_MODIFIERS, archetype)

    def optimal_mana_value(self, deck: DeckWithCards) -> float:
        return curve_target(
            deck,
            empty_value=2.5,
            target=3.2,
            tolerance=0.3,
            raise_by=1.5,
            raise_cap=5.0,
            lower_by=1.0,
            lower_floor=2.0,
        )

    def format_value(self, card: Card, deck: DeckWithCards) -> list[tuple[str, float]]:
        if has_unique_effect(card, deck):
            return [("Unique effect for singleton", 6.0)]
        return []
