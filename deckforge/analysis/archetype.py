"""
Archetype detection.

A deck's archetype is inferred from its composition: the share of
non-land mainboard cards in each CardCategory is compared against every
reference profile the format adapter publishes, and the nearest profile
by weighted L1 distance wins. Keyword and tribal signals refine the
ranking.

Strength per archetype (0-100):
- composition similarity, up to 40 points
- keyword presence, 8 points per matched keyword, up to 30
- tribal density for tribal profiles, up to 30
- halved when the deck is below the profile's minimum card count

INVARIANT: a user-declared strategy always beats inference. Exact ties
in strength are broken by the declared strategy, then by name.
"""

import re
from collections import Counter
from collections.abc import Iterable
from functools import lru_cache

from deckforge.analysis.categories import count_categories
from deckforge.formats.base import FormatAdapter
from deckforge.models.deck import DeckCard, DeckWithCards
from deckforge.models.format_config import ArchetypeProfile, CardCategory
from deckforge.models.scoring import ArchetypeDetection, ArchetypeSignal

# =============================================================================
# SIGNAL TUNING
# =============================================================================

COMPOSITION_POINTS = 40.0
KEYWORD_POINTS_EACH = 8.0
KEYWORD_POINTS_MAX = 30.0
TRIBAL_POINTS_MAX = 30.0
TRIBAL_MIN_CREATURES = 8
BELOW_MINIMUM_PENALTY = 0.5


@lru_cache(maxsize=256)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(keyword, re.IGNORECASE)


def category_frequencies(entries: list[DeckCard]) -> dict[CardCategory, float]:
    """Share of non-land cards in each category."""
    nonland = [entry for entry in entries if not entry.card.is_land]
    total = sum(entry.quantity for entry in nonland)
    if total == 0:
        return {}
    counts = count_categories(nonland)
    return {category: count / total for category, count in counts.items()}


def profile_similarity(
    frequencies: dict[CardCategory, float],
    profile: ArchetypeProfile,
) -> float:
    """1.0 for an exact match of the profile vector, 0.0 for the farthest possible deck."""
    distance = 0.0
    worst = 0.0
    for category, expected in profile.category_frequencies.items():
        weight = profile.importance.get(category, 1.0)
        observed = frequencies.get(category, 0.0)
        distance += weight * abs(observed - expected)
        worst += weight * max(expected, 1.0 - expected)
    if worst == 0:
        return 0.0
    return max(0.0, 1.0 - distance / worst)


def subtype_counts(entries: Iterable[DeckCard], creatures_only: bool = True) -> Counter[str]:
    counts: Counter[str] = Counter()
    for entry in entries:
        if entry.quantity <= 0:
            continue
        if creatures_only and not entry.card.is_creature:
            continue
        for subtype in entry.card.subtypes:
            counts[subtype] += entry.quantity
    return counts


def dominant_subtype(counts: Counter[str]) -> tuple[str | None, int]:
    """Most common subtype, ties broken alphabetically."""
    if not counts:
        return None, 0
    name, count = min(counts.items(), key=lambda item: (-item[1], item[0]))
    return name, count


def _keyword_signal(entries: list[DeckCard], keywords: tuple[str, ...]) -> tuple[float, list[str]]:
    if not keywords:
        return 0.0, []

    matched: Counter[str] = Counter()
    for entry in entries:
        text = entry.card.oracle_text
        card_keywords = entry.card.lowered_keywords
        for keyword in keywords:
            lowered = keyword.lower()
            if any(lowered in card_keyword for card_keyword in card_keywords):
                matched[keyword] += entry.quantity
            elif _keyword_pattern(lowered).search(text):
                matched[keyword] += entry.quantity

    if not matched:
        return 0.0, []
    top = sorted(matched.items(), key=lambda item: (-item[1], item[0]))[:3]
    reason = "Key mechanics: " + ", ".join(f"{name} ({count} cards)" for name, count in top)
    return min(KEYWORD_POINTS_MAX, len(matched) * KEYWORD_POINTS_EACH), [reason]


def _tribal_signal(entries: list[DeckCard]) -> tuple[float, list[str]]:
    tribe, count = dominant_subtype(subtype_counts(entries))
    if tribe is None or count < TRIBAL_MIN_CREATURES:
        return 0.0, []
    points = min(TRIBAL_POINTS_MAX, count / TRIBAL_MIN_CREATURES * 20)
    return points, [f"{tribe} tribal ({count} creatures)"]


def _signal_for(
    entries: list[DeckCard],
    frequencies: dict[CardCategory, float],
    card_count: int,
    profile: ArchetypeProfile,
) -> ArchetypeSignal:
    similarity = profile_similarity(frequencies, profile)
    strength = COMPOSITION_POINTS * similarity
    reasons = [f"Composition match {similarity:.0%}"]

    points, keyword_reasons = _keyword_signal(entries, profile.keywords)
    strength += points
    reasons.extend(keyword_reasons)

    if profile.tribal:
        points, tribal_reasons = _tribal_signal(entries)
        strength += points
        reasons.extend(tribal_reasons)

    if card_count < profile.min_cards:
        strength *= BELOW_MINIMUM_PENALTY
        reasons.append(f"Below {profile.min_cards} cards")

    return ArchetypeSignal(
        archetype=profile.name,
        strength=round(min(100.0, strength), 1),
        reasons=tuple(reasons),
    )


def detect(deck: DeckWithCards, adapter: FormatAdapter) -> ArchetypeDetection:
    """
    Infer a deck's archetype among the adapter's profiles.

    An empty mainboard is 'unknown' with zero confidence.
    """
    entries = deck.mainboard
    if not entries:
        return ArchetypeDetection.unknown()

    frequencies = category_frequencies(entries)
    card_count = sum(entry.quantity for entry in entries)
    declared = deck.strategy.lower() if deck.strategy else None

    signals = [
        _signal_for(entries, frequencies, card_count, profile)
        for profile in adapter.archetype_profiles
    ]
    signals = [signal for signal in signals if signal.strength > 0]
    if not signals:
        return ArchetypeDetection.unknown()

    signals.sort(key=lambda s: (-s.strength, s.archetype != declared, s.archetype))

    return ArchetypeDetection(
        primary=signals[0].archetype,
        secondary=signals[1].archetype if len(signals) > 1 else None,
        confidence=signals[0].strength,
        signals=tuple(signals),
    )


def get_effective_archetype(deck: DeckWithCards, adapter: FormatAdapter) -> str:
    """Declared strategy when present, inferred archetype otherwise."""
    if deck.strategy:
        return deck.strategy.lower()
    return detect(deck, adapter).primary


def effective_detection(deck: DeckWithCards, adapter: FormatAdapter) -> ArchetypeDetection:
    """
    Detection with the declared strategy promoted to primary.

    A declared strategy is trusted fully: confidence becomes 100.
    """
    detection = detect(deck, adapter)
    if not deck.strategy:
        return detection
    declared = deck.strategy.lower()
    secondary = detection.primary if detection.primary != declared else detection.secondary
    return ArchetypeDetection(
        primary=declared,
        secondary=secondary,
        confidence=100.0,
        signals=detection.signals,
    )


def matches(deck: DeckWithCards, archetype: str, adapter: FormatAdapter) -> bool:
    """Whether the deck reads as the archetype: confident primary, or secondary."""
    result = detect(deck, adapter)
    wanted = archetype.lower()
    return (result.primary == wanted and result.confidence > 50) or result.secondary == wanted
