"""
Commander format adapter.

Rules:
- Exactly 99 mainboard cards plus one commander, no sideboard
- Singleton: one copy of each card except basic lands and the cards
  whose own text allows any number (Seven Dwarves allows seven)
- Every card's color identity must be within the commander's
- Commander legality from the catalog

Until a commander is chosen, color identity is not enforced.
"""

from deckforge.formats.base import (
    check_can_add,
    check_card_legality,
    check_color_identity,
    check_copy_limits,
    check_mainboard_size,
    check_sideboard_size,
    curve_target,
    has_political_value,
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

# =============================================================================
# CONFIGURATION
# =============================================================================

ANY_NUMBER_CARDS: dict[str, int | None] = {
    "Relentless Rats": None,
    "Shadowborn Apostle": None,
    "Persistent Petitioners": None,
    "Rat Colony": None,
    "Dragon's Approach": None,
    "Slime Against Humanity": None,
    "Seven Dwarves": 7,
}

DECK_SIZE = DeckSizeConfig(
    mainboard_min=99,
    mainboard_max=99,
    mainboard_optimal=99,
    sideboard_max=0,
    has_commander=True,
    singleton=True,
)

COPY_LIMIT = CopyLimitConfig(default=1, exceptions=ANY_NUMBER_CARDS)

CATEGORY_TARGETS = CategoryTargets(
    {
        CardCategory.LANDS: CategoryTarget(34, 37, 40),
        CardCategory.RAMP: CategoryTarget(8, 10, 15),
        CardCategory.CARD_DRAW: CategoryTarget(5, 10, 12),
        CardCategory.REMOVAL: CategoryTarget(8, 10, 12),
        CardCategory.BOARD_WIPE: CategoryTarget(2, 4, 5),
        CardCategory.PROTECTION: CategoryTarget(2, 4, 6),
        CardCategory.THREATS: CategoryTarget(10, 15, 25),
        CardCategory.TUTOR: CategoryTarget(0, 3, 8),
        CardCategory.RECURSION: CategoryTarget(2, 5, 8),
    }
)

SCORE_WEIGHTS = ScoreWeights(mechanical=35, strategic=30, format_context=25, theme=10)

STAGE_THRESHOLDS = StageThresholds(early=30, mid=60, late=85)

ARCHETYPE_MODIFIERS: dict[str, ArchetypeModifiers] = {
    "tribal": ArchetypeModifiers(
        category_weights={CardCategory.CREATURES: 1.5, CardCategory.THREATS: 1.2},
        weight_shift={ScoreAxis.THEME: 10, ScoreAxis.MECHANICAL: -10},
    ),
    "aristocrats": ArchetypeModifiers(
        category_weights={
            CardCategory.CREATURES: 1.3,
            CardCategory.RECURSION: 1.5,
            CardCategory.CARD_DRAW: 1.2,
        },
        preferred_keywords=("sacrifice", "death trigger"),
    ),
    "spellslinger": ArchetypeModifiers(
        category_weights={
            CardCategory.CARD_DRAW: 1.4,
            CardCategory.REMOVAL: 1.2,
            CardCategory.CREATURES: 0.7,
        },
        preferred_keywords=("magecraft", "prowess", "storm"),
    ),
    "voltron": ArchetypeModifiers(
        category_weights={
            CardCategory.PROTECTION: 1.5,
            CardCategory.RAMP: 1.3,
            CardCategory.CREATURES: 0.6,
        },
        preferred_keywords=("equip", "aura", "hexproof", "indestructible"),
        weight_shift={ScoreAxis.STRATEGIC: 5, ScoreAxis.THEME: -5},
    ),
    "reanimator": ArchetypeModifiers(
        category_weights={
            CardCategory.RECURSION: 1.6,
            CardCategory.CARD_DRAW: 1.3,
            CardCategory.CREATURES: 1.2,
        },
        preferred_keywords=("reanimate", "graveyard"),
    ),
    "control": ArchetypeModifiers(
        category_weights={
            CardCategory.REMOVAL: 1.4,
            CardCategory.BOARD_WIPE: 1.5,
            CardCategory.CARD_DRAW: 1.3,
            CardCategory.PROTECTION: 1.2,
        },
        preferred_keywords=("counter", "flash", "hexproof"),
        weight_shift={ScoreAxis.FORMAT_CONTEXT: 5, ScoreAxis.THEME: -5},
    ),
    "combo": ArchetypeModifiers(
        category_weights={
            CardCategory.TUTOR: 1.6,
            CardCategory.CARD_DRAW: 1.4,
            CardCategory.PROTECTION: 1.3,
        },
        weight_shift={ScoreAxis.MECHANICAL: 5, ScoreAxis.THEME: -5},
    ),
    "tokens": ArchetypeModifiers(
        category_weights={CardCategory.CREATURES: 1.3, CardCategory.THREATS: 1.4},
        preferred_keywords=("create", "token", "populate"),
        weight_shift={ScoreAxis.THEME: 5, ScoreAxis.MECHANICAL: -5},
    ),
}

ARCHETYPE_PROFILES: tuple[ArchetypeProfile, ...] = (
    ArchetypeProfile(
        name="tribal",
        category_frequencies={
            CardCategory.CREATURES: 0.6,
            CardCategory.THREATS: 0.3,
            CardCategory.RAMP: 0.1,
        },
        importance={CardCategory.CREATURES: 1.4, CardCategory.THREATS: 1.2},
        min_cards=15,
        tribal=True,
    ),
    ArchetypeProfile(
        name="aristocrats",
        category_frequencies={
            CardCategory.CREATURES: 0.45,
            CardCategory.RECURSION: 0.15,
            CardCategory.CARD_DRAW: 0.2,
            CardCategory.REMOVAL: 0.2,
        },
        importance={
            CardCategory.CREATURES: 1.3,
            CardCategory.RECURSION: 1.5,
            CardCategory.CARD_DRAW: 1.2,
        },
        keywords=("sacrifice", "death trigger", "dies", "when.*dies", "when.*is put into"),
        min_cards=12,
    ),
    ArchetypeProfile(
        name="spellslinger",
        category_frequencies={
            CardCategory.CREATURES: 0.15,
            CardCategory.CARD_DRAW: 0.35,
            CardCategory.REMOVAL: 0.3,
        },
        importance={
            CardCategory.CARD_DRAW: 1.4,
            CardCategory.REMOVAL: 1.2,
            CardCategory.CREATURES: 0.6,
        },
        keywords=("magecraft", "prowess", "storm", "whenever you cast", "instant or sorcery"),
        min_cards=15,
    ),
    ArchetypeProfile(
        name="voltron",
        category_frequencies={
            CardCategory.CREATURES: 0.2,
            CardCategory.PROTECTION: 0.3,
            CardCategory.RAMP: 0.15,
        },
        importance={
            CardCategory.PROTECTION: 1.5,
            CardCategory.RAMP: 1.3,
            CardCategory.CREATURES: 0.6,
        },
        keywords=("equip", "aura", "hexproof", "indestructible", "attach", "equipped"),
        min_cards=10,
    ),
    ArchetypeProfile(
        name="reanimator",
        category_frequencies={
            CardCategory.CREATURES: 0.4,
            CardCategory.RECURSION: 0.25,
            CardCategory.CARD_DRAW: 0.2,
        },
        importance={
            CardCategory.RECURSION: 1.6,
            CardCategory.CARD_DRAW: 1.3,
            CardCategory.CREATURES: 1.2,
        },
        keywords=("reanimate", "return.*from.*graveyard", "graveyard", "exile.*from.*graveyard"),
        min_cards=12,
    ),
    ArchetypeProfile(
        name="control",
        category_frequencies={
            CardCategory.CREATURES: 0.15,
            CardCategory.REMOVAL: 0.35,
            CardCategory.BOARD_WIPE: 0.1,
            CardCategory.CARD_DRAW: 0.3,
            CardCategory.PROTECTION: 0.15,
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
        name="combo",
        category_frequencies={
            CardCategory.CREATURES: 0.2,
            CardCategory.CARD_DRAW: 0.3,
            CardCategory.TUTOR: 0.15,
            CardCategory.PROTECTION: 0.15,
        },
        importance={
            CardCategory.CARD_DRAW: 1.5,
            CardCategory.TUTOR: 1.6,
            CardCategory.PROTECTION: 1.3,
        },
        keywords=("storm", "cascade", "untap"),
        min_cards=10,
    ),
    ArchetypeProfile(
        name="tokens",
        category_frequencies={
            CardCategory.CREATURES: 0.4,
            CardCategory.THREATS: 0.35,
        },
        importance={CardCategory.CREATURES: 1.3, CardCategory.THREATS: 1.4},
        keywords=("create", "token", "populate", "copy"),
        min_cards=12,
    ),
)


def can_be_commander(card: Card) -> bool:
    """Legendary creatures, or cards whose text says they can be your commander."""
    if "can be your commander" in card.lowered_text:
        return True
    return card.is_legendary and card.is_creature


class CommanderAdapter:
    """Commander (EDH)."""

    format = FormatType.COMMANDER
    display_name = "Commander"
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
        # Commander curves run higher than sixty-card formats
        return curve_target(
            deck,
            empty_value=3.0,
            target=3.4,
            tolerance=0.3,
            raise_by=1.5,
            raise_cap=5.0,
            lower_by=1.0,
            lower_floor=2.0,
        )

    def format_value(self, card: Card, deck: DeckWithCards) -> list[tuple[str, float]]:
        value: list[tuple[str, float]] = []
        if has_unique_effect(card, deck):
            value.append(("Unique effect for singleton", 6.0))
        if has_political_value(card):
            value.append(("Political value for multiplayer", 4.0))
        return value
