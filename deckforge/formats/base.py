"""
FormatAdapter contract and shared rule helpers.

Every format-specific branch lives behind FormatAdapter. The scorer,
detector and analyzers are written once against this Protocol and never
look at a format name.

Adapters share no behaviour by inheritance. Checks that several formats
apply the same way (size bounds, copy limits, legality, stage lookup) are
plain functions in this module that each adapter calls with its own
configuration.

INVARIANT: adapters are immutable and safe to share across concurrent
evaluations.
"""

import re
from collections.abc import Iterable
from typing import Protocol

from deckforge.models.card import Card, LegalityStatus
from deckforge.models.deck import DeckCard, DeckWithCards
from deckforge.models.format_config import (
    DEFAULT_MODIFIERS,
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


class FormatAdapter(Protocol):
    """Per-format construction rules and score weighting."""

    format: FormatType
    display_name: str
    deck_size: DeckSizeConfig
    copy_limit: CopyLimitConfig
    stage_thresholds: StageThresholds
    supported_archetypes: tuple[str, ...]
    archetype_profiles: tuple[ArchetypeProfile, ...]

    def legality_of(self, card: Card) -> LegalityStatus: ...

    def is_playable(self, card: Card) -> bool: ...

    def is_suggestible(self, card: Card) -> bool: ...

    def max_copies(self, card: Card) -> int | None: ...

    def validate_deck(self, deck: DeckWithCards) -> ValidationResult: ...

    def can_add_card(self, card: Card, deck: DeckWithCards) -> ValidationResult: ...

    def score_weights_for(self, stage: DeckStage, archetype: str) -> ScoreWeights: ...

    def category_targets_for(self, archetype: str) -> CategoryTargets: ...

    def stage_of(self, deck: DeckWithCards) -> DeckStage: ...

    def color_constraint_for(self, deck: DeckWithCards) -> ColorConstraint: ...

    def is_color_compatible(self, card: Card, constraint: ColorConstraint) -> bool: ...

    def archetype_modifiers(self, archetype: str) -> ArchetypeModifiers: ...

    def optimal_mana_value(self, deck: DeckWithCards) -> float: ...

    def format_value(self, card: Card, deck: DeckWithCards) -> list[tuple[str, float]]: ...


# =============================================================================
# LEGALITY
# =============================================================================


def is_playable_status(status: LegalityStatus) -> bool:
    """Cards that may sit in a deck. Restricted cards are capped at one copy."""
    return status in (LegalityStatus.LEGAL, LegalityStatus.RESTRICTED)


def is_suggestible_status(status: LegalityStatus) -> bool:
    """Only fully legal cards are ever suggested."""
    return status == LegalityStatus.LEGAL


# =============================================================================
# DECK SIZE AND COPY LIMITS
# =============================================================================


def count_by_name(entries: Iterable[DeckCard]) -> dict[str, tuple[int, Card]]:
    """Total quantity per card name, with a representative card."""
    counts: dict[str, tuple[int, Card]] = {}
    for entry in entries:
        if entry.quantity <= 0:
            continue
        current, _ = counts.get(entry.card.name, (0, entry.card))
        counts[entry.card.name] = (current + entry.quantity, entry.card)
    return counts


def check_mainboard_size(
    deck: DeckWithCards,
    size: DeckSizeConfig,
    collector: ValidationCollector,
) -> None:
    count = deck.mainboard_count
    if count < size.mainboard_min:
        collector.error(
            ValidationKind.DECK_SIZE_BELOW_MINIMUM,
            f"Deck has {count} mainboard cards, minimum is {size.mainboard_min}",
        )
    if size.mainboard_max is not None and count > size.mainboard_max:
        collector.error(
            ValidationKind.DECK_SIZE_ABOVE_MAXIMUM,
            f"Deck has {count} mainboard cards, maximum is {size.mainboard_max}",
        )
    elif count > size.mainboard_optimal:
        collector.warn(
            ValidationKind.DECK_ABOVE_OPTIMAL,
            f"Deck has {count} mainboard cards, optimal is {size.mainboard_optimal}",
        )


def check_sideboard_size(
    deck: DeckWithCards,
    size: DeckSizeConfig,
    collector: ValidationCollector,
) -> None:
    count = deck.sideboard_count
    if count > size.sideboard_max:
        collector.error(
            ValidationKind.SIDEBOARD_EXCEEDS_MAXIMUM,
            f"Sideboard has {count} cards, maximum is {size.sideboard_max}",
        )


def check_copy_limits(
    entries: Iterable[DeckCard],
    adapter: FormatAdapter,
    collector: ValidationCollector,
) -> None:
    """
    Flag every card name whose total quantity exceeds its limit.

    A limit of one is reported as a singleton violation, anything higher
    as a copy-limit violation.
    """
    for name, (count, card) in sorted(count_by_name(entries).items()):
        limit = adapter.max_copies(card)
        if limit is None or count <= limit:
            continue
        if limit == 1 and adapter.deck_size.singleton:
            collector.error(
                ValidationKind.SINGLETON_VIOLATION,
                f"{name} is not singleton (has {count} copies)",
                card_id=card.id,
                card_name=name,
            )
        else:
            collector.error(
                ValidationKind.COPY_LIMIT_EXCEEDED,
                f"{name} exceeds {limit}-copy limit (has {count})",
                card_id=card.id,
                card_name=name,
            )


def check_card_legality(
    deck: DeckWithCards,
    adapter: FormatAdapter,
    collector: ValidationCollector,
) -> None:
    seen: set[str] = set()
    for entry in deck.cards:
        if entry.quantity <= 0 or entry.card.id in seen:
            continue
        seen.add(entry.card.id)
        status = adapter.legality_of(entry.card)
        if not is_playable_status(status):
            collector.error(
                ValidationKind.CARD_NOT_LEGAL,
                f"{entry.card.name} is {status.value} in {adapter.display_name}",
                card_id=entry.card.id,
                card_name=entry.card.name,
            )


def check_can_add(
    card: Card,
    deck: DeckWithCards,
    adapter: FormatAdapter,
    counted_roles: tuple[CardRole, ...] | None,
) -> ValidationResult:
    """Rules for adding one more copy of card to deck."""
    collector = ValidationCollector()
    status = adapter.legality_of(card)
    if not is_playable_status(status):
        collector.error(
            ValidationKind.CARD_NOT_LEGAL,
            f"{card.name} is {status.value} in {adapter.display_name}",
            card_id=card.id,
            card_name=card.name,
        )

    existing = deck.copies_of(card.name, counted_roles)
    limit = adapter.max_copies(card)
    if limit is not None and existing >= limit:
        if limit == 1 and adapter.deck_size.singleton:
            collector.error(
                ValidationKind.SINGLETON_VIOLATION,
                f"{card.name} is already in the deck",
                card_id=card.id,
                card_name=card.name,
            )
        else:
            collector.error(
                ValidationKind.COPY_LIMIT_REACHED,
                f"{card.name} has reached the {limit}-copy limit",
                card_id=card.id,
                card_name=card.name,
            )

    constraint = adapter.color_constraint_for(deck)
    if constraint.enforced and not adapter.is_color_compatible(card, constraint):
        allowed = "".join(sorted(constraint.allowed_colors)) or "colorless"
        collector.error(
            ValidationKind.COLOR_IDENTITY_VIOLATION,
            f"{card.name} is outside the deck's color identity ({allowed})",
            card_id=card.id,
            card_name=card.name,
        )
    return collector.result()


def max_copies_for(card: Card, limits: CopyLimitConfig, status: LegalityStatus) -> int | None:
    """Copy limit for a card, basic lands unlimited, restricted cards capped at one."""
    if card.is_basic_land:
        return None
    limit = limits.limit_for(card.name)
    if status == LegalityStatus.RESTRICTED and (limit is None or limit > 1):
        return 1
    return limit


# =============================================================================
# COLOR IDENTITY
# =============================================================================


def identity_within(card: Card, constraint: ColorConstraint) -> bool:
    """
    Whether a card's color identity fits the constraint.

    Colorless cards always fit. An enforced constraint with no colors
    (a colorless commander) admits only colorless cards.
    """
    if not constraint.enforced:
        return True
    if not card.color_identity:
        return True
    return card.color_identity <= constraint.allowed_colors


def check_color_identity(
    deck: DeckWithCards,
    adapter: FormatAdapter,
    collector: ValidationCollector,
) -> None:
    constraint = adapter.color_constraint_for(deck)
    if not constraint.enforced:
        return
    seen: set[str] = set()
    for entry in deck.cards:
        if entry.role == CardRole.COMMANDER or entry.quantity <= 0 or entry.card.id in seen:
            continue
        seen.add(entry.card.id)
        if not adapter.is_color_compatible(entry.card, constraint):
            collector.error(
                ValidationKind.COLOR_IDENTITY_VIOLATION,
                f"{entry.card.name} is outside the commander's color identity",
                card_id=entry.card.id,
                card_name=entry.card.name,
            )


# =============================================================================
# STAGE, WEIGHTS AND TARGETS
# =============================================================================


def stage_for_count(count: int, thresholds: StageThresholds) -> DeckStage:
    if count < thresholds.early:
        return DeckStage.EARLY
    if count < thresholds.mid:
        return DeckStage.MID
    if count < thresholds.late:
        return DeckStage.LATE
    return DeckStage.COMPLETE


# Early decks lean on gap filling more than on theme
EARLY_STAGE_SHIFT: dict[ScoreAxis, float] = {ScoreAxis.STRATEGIC: 5, ScoreAxis.THEME: -5}


def adjust_weights(
    base: ScoreWeights,
    *shifts: dict[ScoreAxis, float],
) -> ScoreWeights:
    """
    Apply point shifts between axes.

    Axes are floored at zero and the result is scaled down if it would
    exceed the base total, so the combined ceiling never grows.
    """
    values = {axis: base.for_axis(axis) for axis in ScoreAxis}
    for shift in shifts:
        for axis, delta in shift.items():
            values[axis] = max(0.0, values[axis] + delta)

    total = sum(values.values())
    ceiling = base.total
    if total > ceiling and total > 0:
        factor = ceiling / total
        values = {axis: value * factor for axis, value in values.items()}

    return ScoreWeights(
        mechanical=round(values[ScoreAxis.MECHANICAL], 2),
        strategic=round(values[ScoreAxis.STRATEGIC], 2),
        format_context=round(values[ScoreAxis.FORMAT_CONTEXT], 2),
        theme=round(values[ScoreAxis.THEME], 2),
    )


def weights_for(
    base: ScoreWeights,
    stage: DeckStage,
    modifiers: ArchetypeModifiers,
) -> ScoreWeights:
    shifts = [modifiers.weight_shift]
    if stage == DeckStage.EARLY:
        shifts.append(EARLY_STAGE_SHIFT)
    return adjust_weights(base, *shifts)


def scale_targets(
    base: CategoryTargets,
    modifiers: ArchetypeModifiers,
) -> CategoryTargets:
    """Multiply non-land targets by the archetype's category weights."""
    scaled: dict[CardCategory, CategoryTarget] = {}
    for category, target in base.targets.items():
        weight = modifiers.category_weights.get(category, 1.0)
        if category == CardCategory.LANDS or weight == 1.0:
            scaled[category] = target
            continue
        minimum = round(target.minimum * weight)
        optimal = max(minimum, round(target.optimal * weight))
        maximum = max(optimal, round(target.maximum * weight))
        scaled[category] = CategoryTarget(minimum, optimal, maximum)
    return CategoryTargets(scaled)


def lookup_modifiers(
    table: dict[str, ArchetypeModifiers],
    archetype: str | None,
) -> ArchetypeModifiers:
    if not archetype:
        return DEFAULT_MODIFIERS
    return table.get(archetype.lower(), DEFAULT_MODIFIERS)


# =============================================================================
# CURVE
# =============================================================================


def average_mana_value(deck: DeckWithCards) -> tuple[float, int]:
    """Average mana value over non-land mainboard cards, and their count."""
    total = 0.0
    count = 0
    for entry in deck.mainboard:
        if entry.card.is_land:
            continue
        total += entry.card.cmc * entry.quantity
        count += entry.quantity
    if count == 0:
        return 0.0, 0
    return total / count, count


def curve_target(
    deck: DeckWithCards,
    *,
    empty_value: float,
    target: float,
    tolerance: float,
    raise_by: float,
    raise_cap: float,
    lower_by: float,
    lower_floor: float,
) -> float:
    """
    Mana value new cards should aim for.

    Below the target average the deck wants pricier cards, above it
    cheaper ones, and near it more of the same.
    """
    average, count = average_mana_value(deck)
    if count == 0:
        return empty_value
    if average < target - tolerance:
        return min(average + raise_by, raise_cap)
    if average > target + tolerance:
        return max(average - lower_by, lower_floor)
    return average


# =============================================================================
# FORMAT VALUE SIGNALS
# =============================================================================

UNIQUE_EFFECT_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"you can't lose the game",
        r"opponents can't",
        r"each opponent loses",
        r"double.*damage",
        r"extra combat",
        r"extra turn",
    )
)

POLITICAL_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"each player",
        r"each opponent",
        r"\bvote",
        r"council",
        r"choose.*player",
        r"target opponent",
        r"all players",
    )
)


def is_stackable(card: Card) -> bool:
    """Whether a card plays well as a four-of."""
    if card.is_legendary:
        return False
    if "Instant" in card.types or "Sorcery" in card.types:
        return True
    return card.is_creature and card.cmc <= 3


def has_unique_effect(card: Card, deck: DeckWithCards) -> bool:
    """Whether a card adds an effect the singleton deck does not already have."""
    text = card.oracle_text
    if any(pattern.search(text) for pattern in UNIQUE_EFFECT_PATTERNS):
        return True
    keywords = card.keywords
    for entry in deck.cards:
        if len(keywords & entry.card.keywords) > 2:
            return False
    return True


def has_political_value(card: Card) -> bool:
    text = card.oracle_text
    return any(pattern.search(text) for pattern in POLITICAL_PATTERNS)
