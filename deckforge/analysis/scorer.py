"""
Synergy scoring.

Scores one candidate card against one deck on four axes. Raw points per
axis are computed against fixed reference ceilings and then scaled onto
the adapter's ScoreWeights, so every format shares one algorithm while
weighting the axes its own way.

Reference ceilings (raw points):
- mechanical: 40 (keyword and type synergy, rules-text hooks, curve fit)
- strategic: 30 (gap filling, preferred keywords, stage, declared strategy)
- format context: 20 (archetype fit scaled by confidence, color
  preference, format-specific value)
- theme: 10 (tribal fit)

INVARIANT: score() is a pure function of (card, context). The total is
the sum of the scaled sub-scores, clamped to [0, 100]. Rankings order by
total, then mechanical, then card name.
"""

import re
from collections import Counter
from collections.abc import Iterable

from deckforge.analysis.archetype import (
    dominant_subtype,
    effective_detection,
    subtype_counts,
)
from deckforge.analysis.categories import classify_card
from deckforge.analysis.gaps import analyze_gaps
from deckforge.formats.base import FormatAdapter
from deckforge.models.card import Card
from deckforge.models.deck import DeckWithCards
from deckforge.models.format_config import CardCategory, DeckStage, ScoreAxis
from deckforge.models.scoring import (
    ArchetypeDetection,
    CategoryStatus,
    ScoreBreakdown,
    ScoringContext,
    SynergyScore,
)

# =============================================================================
# REFERENCE CEILINGS
# =============================================================================

RAW_CEILINGS: dict[ScoreAxis, float] = {
    ScoreAxis.MECHANICAL: 40.0,
    ScoreAxis.STRATEGIC: 30.0,
    ScoreAxis.FORMAT_CONTEXT: 20.0,
    ScoreAxis.THEME: 10.0,
}

# =============================================================================
# MECHANICAL TABLES
# =============================================================================

# keyword on the candidate -> (deck traits it pairs with, points)
KEYWORD_SYNERGIES: dict[str, tuple[tuple[str, ...], float]] = {
    "flying": (("reach", "flying"), 3),
    "first strike": (("deathtouch", "double strike"), 4),
    "deathtouch": (("first strike", "trample"), 4),
    "trample": (("deathtouch", "double strike"), 3),
    "lifelink": (("double strike", "vigilance"), 3),
    "hexproof": (("aura", "equipment"), 5),
    "indestructible": (("wrath", "board wipe"), 5),
    "prowess": (("instant", "sorcery"), 4),
    "cascade": (("cascade",), 3),
    "flashback": (("mill", "discard"), 4),
    "populate": (("token", "create"), 5),
    "convoke": (("token", "creature"), 4),
}

# candidate type or subtype -> deck traits that make it better
TYPE_SYNERGIES: dict[str, tuple[str, ...]] = {
    "Aura": ("creature", "hexproof", "bogles"),
    "Equipment": ("creature", "equip"),
    "Vehicle": ("creature", "crew"),
    "Saga": ("enchantment", "proliferate"),
}
TYPE_SYNERGY_POINTS = 2.0

TEXT_SYNERGIES: tuple[tuple[re.Pattern[str], float, str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), points, reason)
    for pattern, points, reason in (
        (r"whenever.*creature.*enters", 4, "ETB creature synergy"),
        (r"whenever.*you.*cast.*instant", 4, "Spell synergy"),
        (r"sacrifice.*creature", 4, "Sacrifice synergy"),
        (r"draw.*card", 3, "Card draw synergy"),
        (r"\+1/\+1 counter", 3, "Counter synergy"),
        (r"graveyard", 3, "Graveyard synergy"),
    )
)

CURVE_FIT_MAX = 8.0
CURVE_FIT_STEP = 2.0

# =============================================================================
# STRATEGIC TABLES
# =============================================================================

PREFERRED_KEYWORD_POINTS = 5.0
AVOIDED_KEYWORD_POINTS = -3.0
GAP_FILL_MAX = 10.0

STRATEGY_PATTERNS: dict[str, tuple[re.Pattern[str], float]] = {
    name: (re.compile(pattern, re.IGNORECASE), points)
    for name, (pattern, points) in {
        "tribal": (r"creature type|all .+ get|other .+ you control", 4),
        "aristocrats": (r"when.*dies|sacrifice|blood artist", 4),
        "spellslinger": (r"whenever you cast.*instant|sorcery|magecraft", 4),
        "voltron": (r"equipped creature|attach|aura.*attach", 4),
        "reanimator": (r"from.*graveyard|return.*creature.*graveyard", 4),
        "tokens": (r"create.*token|populate|token.*creature", 4),
        "aggro": (r"haste|first strike|can't block", 3),
        "control": (r"counter target|return.*to.*hand|tap.*doesn't untap", 3),
        "ramp": (r"add.*mana|search.*library.*land", 3),
        "combo": (r"untap|infinite|copy.*spell", 4),
    }.items()
}

# =============================================================================
# FORMAT CONTEXT AND THEME TABLES
# =============================================================================

ARCHETYPE_FIT_MAX = 8.0
COLOR_MATCH_POINTS = 3.0
COLOR_MISS_POINTS = -3.0

TRIBAL_TYPES = frozenset(
    {
        "Elf",
        "Goblin",
        "Zombie",
        "Vampire",
        "Human",
        "Merfolk",
        "Dragon",
        "Angel",
        "Demon",
        "Elemental",
        "Spirit",
        "Wizard",
        "Soldier",
        "Knight",
        "Beast",
        "Dinosaur",
        "Pirate",
        "Cat",
        "Dog",
        "Warrior",
        "Cleric",
        "Rogue",
        "Shaman",
    }
)
TRIBE_MIN_COUNT = 5
TRIBE_MEMBER_POINTS = 8.0
TRIBE_REFERENCE_POINTS = 5.0


# =============================================================================
# CONTEXT
# =============================================================================


def build_scoring_context(
    deck: DeckWithCards,
    adapter: FormatAdapter,
    detection: ArchetypeDetection | None = None,
) -> ScoringContext:
    """
    Precompute everything the scorer needs about a deck.

    The declared strategy, when present, is the archetype used for
    weights, targets and modifiers.
    """
    if detection is None:
        detection = effective_detection(deck, adapter)
    archetype = detection.primary
    stage = adapter.stage_of(deck)

    playing = deck.playing_cards()
    traits: set[str] = set()
    for entry in playing:
        traits.update(entry.card.lowered_keywords)
        traits.update(card_type.lower() for card_type in entry.card.types)
        traits.update(subtype.lower() for subtype in entry.card.subtypes)

    tribes = subtype_counts(playing, creatures_only=False)
    tribe, tribe_count = dominant_subtype(
        Counter({name: count for name, count in tribes.items() if name in TRIBAL_TYPES})
    )

    return ScoringContext(
        deck=deck,
        adapter=adapter,
        stage=stage,
        archetype=archetype,
        confidence=detection.confidence,
        gaps=analyze_gaps(deck, adapter, archetype),
        weights=adapter.score_weights_for(stage, archetype),
        modifiers=adapter.archetype_modifiers(archetype),
        color_constraint=adapter.color_constraint_for(deck),
        optimal_mana_value=adapter.optimal_mana_value(deck),
        strategy=deck.strategy.lower() if deck.strategy else None,
        declared_colors=deck.colors,
        deck_traits=frozenset(traits),
        dominant_tribe=tribe,
        dominant_tribe_count=tribe_count,
    )


# =============================================================================
# AXES
# =============================================================================


def _has_keyword(card: Card, keyword: str) -> bool:
    return any(keyword in card_keyword for card_keyword in card.lowered_keywords)


def _mechanical(card: Card, context: ScoringContext, out: list[ScoreBreakdown]) -> float:
    points = 0.0
    traits = context.deck_traits

    for keyword, (partners, value) in KEYWORD_SYNERGIES.items():
        if _has_keyword(card, keyword) and any(partner in traits for partner in partners):
            points += value
            out.append(
                ScoreBreakdown(ScoreAxis.MECHANICAL, f"{keyword} synergizes with deck", value)
            )

    for card_type in sorted(card.types | card.subtypes):
        partners = TYPE_SYNERGIES.get(card_type)
        if not partners:
            continue
        hits = sum(1 for partner in partners if partner in traits)
        if hits:
            value = hits * TYPE_SYNERGY_POINTS
            points += value
            out.append(ScoreBreakdown(ScoreAxis.MECHANICAL, f"{card_type} type synergy", value))

    for pattern, value, reason in TEXT_SYNERGIES:
        if pattern.search(card.oracle_text):
            points += value
            out.append(ScoreBreakdown(ScoreAxis.MECHANICAL, reason, value))

    if not card.is_land:
        distance = abs(card.cmc - context.optimal_mana_value)
        value = max(0.0, CURVE_FIT_MAX - distance * CURVE_FIT_STEP)
        if value > 0:
            points += value
            out.append(
                ScoreBreakdown(ScoreAxis.MECHANICAL, f"Curve fit (mana value {card.cmc:g})", value)
            )

    return min(RAW_CEILINGS[ScoreAxis.MECHANICAL], points)


def _stage_bonus(card: Card, stage: DeckStage) -> float:
    cmc = card.cmc
    if stage == DeckStage.EARLY:
        if cmc <= 2:
            return 5.0
        if cmc <= 3 and card.is_land:
            return 4.0
        return 0.0
    if stage == DeckStage.MID:
        return 4.0 if 2 <= cmc <= 4 else 0.0
    if stage == DeckStage.LATE:
        return 3.0 if cmc >= 4 else 0.0
    return 2.0


def _strategic(
    card: Card,
    categories: list[CardCategory],
    context: ScoringContext,
    out: list[ScoreBreakdown],
) -> float:
    points = 0.0

    for keyword in context.modifiers.preferred_keywords:
        if _has_keyword(card, keyword.lower()):
            points += PREFERRED_KEYWORD_POINTS
            out.append(
                ScoreBreakdown(
                    ScoreAxis.STRATEGIC, f"Preferred keyword: {keyword}", PREFERRED_KEYWORD_POINTS
                )
            )

    for keyword in context.modifiers.avoid_keywords:
        if _has_keyword(card, keyword.lower()):
            points += AVOIDED_KEYWORD_POINTS
            out.append(
                ScoreBreakdown(
                    ScoreAxis.STRATEGIC, f"Avoided keyword: {keyword}", AVOIDED_KEYWORD_POINTS
                )
            )

    for category in categories:
        gap = context.gaps.for_category(category)
        if gap is None or gap.status != CategoryStatus.UNDER or gap.priority <= 0:
            continue
        value = min(GAP_FILL_MAX, gap.priority / 10)
        points += value
        out.append(ScoreBreakdown(ScoreAxis.STRATEGIC, f"Fills {category.value} gap", value))

    bonus = _stage_bonus(card, context.stage)
    if bonus > 0:
        points += bonus
        reason = f"Good for {context.stage.value} stage"
        out.append(ScoreBreakdown(ScoreAxis.STRATEGIC, reason, bonus))

    if context.strategy:
        boost = STRATEGY_PATTERNS.get(context.strategy)
        if boost is not None and boost[0].search(card.oracle_text):
            points += boost[1]
            reason = f"Matches {context.strategy} strategy"
            out.append(ScoreBreakdown(ScoreAxis.STRATEGIC, reason, boost[1]))

    return max(0.0, min(RAW_CEILINGS[ScoreAxis.STRATEGIC], points))


def _format_context(
    card: Card,
    categories: list[CardCategory],
    context: ScoringContext,
    out: list[ScoreBreakdown],
) -> float:
    adapter = context.adapter
    if not adapter.is_color_compatible(card, context.color_constraint):
        out.append(ScoreBreakdown(ScoreAxis.FORMAT_CONTEXT, "Outside deck color identity", 0.0))
        return 0.0

    points = 0.0

    fit = sum(
        context.modifiers.category_weights.get(category, 1.0) - 1.0
        for category in categories
        if context.modifiers.category_weights.get(category, 1.0) > 1.0
    )
    if fit > 0 and context.confidence > 0:
        value = min(ARCHETYPE_FIT_MAX, fit * 10) * context.confidence / 100
        points += value
        out.append(
            ScoreBreakdown(ScoreAxis.FORMAT_CONTEXT, f"Fits {context.archetype} archetype", value)
        )

    if context.declared_colors and card.colors:
        if card.colors <= context.declared_colors:
            points += COLOR_MATCH_POINTS
            out.append(
                ScoreBreakdown(ScoreAxis.FORMAT_CONTEXT, "Matches deck colors", COLOR_MATCH_POINTS)
            )
        else:
            points += COLOR_MISS_POINTS
            out.append(
                ScoreBreakdown(ScoreAxis.FORMAT_CONTEXT, "Off deck colors", COLOR_MISS_POINTS)
            )

    for reason, value in adapter.format_value(card, context.deck):
        points += value
        out.append(ScoreBreakdown(ScoreAxis.FORMAT_CONTEXT, reason, value))

    return max(0.0, min(RAW_CEILINGS[ScoreAxis.FORMAT_CONTEXT], points))


def _theme(card: Card, context: ScoringContext, out: list[ScoreBreakdown]) -> float:
    tribe = context.dominant_tribe
    if tribe is None or context.dominant_tribe_count < TRIBE_MIN_COUNT:
        return 0.0

    points = 0.0
    if tribe in card.subtypes:
        points += TRIBE_MEMBER_POINTS
        out.append(ScoreBreakdown(ScoreAxis.THEME, f"{tribe} tribal synergy", TRIBE_MEMBER_POINTS))
    if tribe.lower() in card.lowered_text:
        points += TRIBE_REFERENCE_POINTS
        out.append(ScoreBreakdown(ScoreAxis.THEME, f"References {tribe}", TRIBE_REFERENCE_POINTS))
    return min(RAW_CEILINGS[ScoreAxis.THEME], points)


def _scaled(raw: float, axis: ScoreAxis, context: ScoringContext) -> float:
    return round(raw / RAW_CEILINGS[axis] * context.weights.for_axis(axis), 2)


# =============================================================================
# PUBLIC API
# =============================================================================


def score(card: Card, context: ScoringContext) -> SynergyScore:
    """Score one candidate card for the deck in context."""
    breakdown: list[ScoreBreakdown] = []
    categories = classify_card(card)

    mechanical = _scaled(_mechanical(card, context, breakdown), ScoreAxis.MECHANICAL, context)
    strategic = _scaled(
        _strategic(card, categories, context, breakdown), ScoreAxis.STRATEGIC, context
    )
    format_context = _scaled(
        _format_context(card, categories, context, breakdown), ScoreAxis.FORMAT_CONTEXT, context
    )
    theme = _scaled(_theme(card, context, breakdown), ScoreAxis.THEME, context)

    total = max(0.0, min(100.0, mechanical + strategic + format_context + theme))

    return SynergyScore(
        mechanical=mechanical,
        strategic=strategic,
        format_context=format_context,
        theme=theme,
        total=total,
        categories=tuple(categories),
        breakdown=tuple(breakdown),
    )


def rank_key(card: Card, result: SynergyScore) -> tuple[float, float, str, str]:
    """Sort key: total desc, mechanical desc, name asc, id asc."""
    return (-result.total, -result.mechanical, card.name, card.id)


def score_batch(cards: Iterable[Card], context: ScoringContext) -> list[tuple[Card, SynergyScore]]:
    """Score and rank several cards against one context."""
    scored = [(card, score(card, context)) for card in cards]
    scored.sort(key=lambda pair: rank_key(*pair))
    return scored
