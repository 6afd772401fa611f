"""
Deck gap analysis.

Compares a deck's category counts against the adapter's targets for the
deck's archetype. The scorer uses the result to push suggestions toward
under-filled categories.

Status per category:
- UNDER: below the optimal count
- OVER: above the maximum
- MET: otherwise

Priority (0-100) grows with the shortfall: up to 100 below the minimum,
up to 50 between minimum and optimal, 0 once optimal is reached.
"""

from deckforge.analysis.categories import count_categories
from deckforge.formats.base import FormatAdapter
from deckforge.models.deck import DeckWithCards
from deckforge.models.format_config import CategoryTarget
from deckforge.models.scoring import (
    CategoryAnalysis,
    CategoryStatus,
    DeckGapAnalysis,
    GapRecommendation,
)


def category_status(count: int, target: CategoryTarget) -> CategoryStatus:
    if count < target.optimal:
        return CategoryStatus.UNDER
    if count > target.maximum:
        return CategoryStatus.OVER
    return CategoryStatus.MET


def category_priority(count: int, target: CategoryTarget) -> float:
    if count < target.minimum:
        return round(min(100.0, (target.minimum - count) / target.minimum * 100), 1)
    if count < target.optimal:
        return round(min(50.0, (target.optimal - count) / target.optimal * 50), 1)
    return 0.0


def analyze_gaps(deck: DeckWithCards, adapter: FormatAdapter, archetype: str) -> DeckGapAnalysis:
    """Per-category analysis, overall fill score and prioritized recommendations."""
    targets = adapter.category_targets_for(archetype)
    counts = count_categories(deck.playing_cards())

    analyses = {}
    fill_scores = []
    for category, target in targets.targets.items():
        current = counts.get(category, 0)
        analyses[category] = CategoryAnalysis(
            category=category,
            current=current,
            minimum=target.minimum,
            optimal=target.optimal,
            maximum=target.maximum,
            status=category_status(current, target),
            priority=category_priority(current, target),
        )
        if target.optimal > 0:
            fill_scores.append(min(100.0, current / target.optimal * 100))
        else:
            fill_scores.append(100.0)

    overall = round(sum(fill_scores) / len(fill_scores), 1) if fill_scores else 100.0

    recommendations = [
        GapRecommendation(
            category=analysis.category,
            needed=analysis.shortfall,
            priority=analysis.priority,
            reason=(
                f"Add {analysis.shortfall} {analysis.category.value.replace('_', ' ')} "
                f"(have {analysis.current}, target {analysis.optimal})"
            ),
        )
        for analysis in analyses.values()
        if analysis.status == CategoryStatus.UNDER and analysis.priority > 0
    ]
    recommendations.sort(key=lambda rec: (-rec.priority, rec.category.value))

    return DeckGapAnalysis(
        categories=analyses,
        overall_score=overall,
        recommendations=tuple(recommendations),
    )
