from deckforge.analysis.archetype import (
    detect,
    effective_detection,
    get_effective_archetype,
    matches,
)
from deckforge.analysis.buildable import (
    BuildableDecksAnalyzer,
    analyze_template,
    completeness_of,
)
from deckforge.analysis.categories import classify_card, count_categories
from deckforge.analysis.gaps import analyze_gaps
from deckforge.analysis.scorer import build_scoring_context, rank_key, score, score_batch
from deckforge.analysis.templates import DECK_TEMPLATES

__all__ = [
    "DECK_TEMPLATES",
    "BuildableDecksAnalyzer",
    "analyze_gaps",
    "analyze_template",
    "build_scoring_context",
    "classify_card",
    "completeness_of",
    "count_categories",
    "detect",
    "effective_detection",
    "get_effective_archetype",
    "matches",
    "rank_key",
    "score",
    "score_batch",
]
