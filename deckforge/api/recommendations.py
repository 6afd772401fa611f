"""
Recommendation API endpoints.

Suggestions, format coverage, buildable decks, archetype detection and
gap analysis. A failed suggestion computation degrades to an empty page
so deck viewing is never blocked by the recommender.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from deckforge.api.dependencies import EngineDep
from deckforge.config import settings
from deckforge.formats.factory import parse_format
from deckforge.models.buildable import BuildableDeck, FormatCoverage, ViableArchetype
from deckforge.models.card import Card
from deckforge.models.failure import CacheComputationError
from deckforge.models.format_config import CardCategory
from deckforge.models.scoring import Suggestion, SuggestionPage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


class CardResponse(BaseModel):
    id: str
    name: str
    mana_cost: str = ""
    cmc: float = 0.0
    colors: list[str] = Field(default_factory=list)
    color_identity: list[str] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    subtypes: list[str] = Field(default_factory=list)
    oracle_text: str = ""

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(
            id=card.id,
            name=card.name,
            mana_cost=card.mana_cost,
            cmc=card.cmc,
            colors=sorted(card.colors),
            color_identity=sorted(card.color_identity),
            types=sorted(card.types),
            subtypes=sorted(card.subtypes),
            oracle_text=card.oracle_text,
        )


class ScoreBreakdownResponse(BaseModel):
    axis: str
    reason: str
    points: float


class SynergyScoreResponse(BaseModel):
    mechanical: float
    strategic: float
    format_context: float
    theme: float
    total: float
    breakdown: list[ScoreBreakdownResponse] = Field(default_factory=list)


class SuggestionResponse(BaseModel):
    card: CardResponse
    score: SynergyScoreResponse
    categories: list[str]
    in_collection: bool
    owned_quantity: int

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> "SuggestionResponse":
        result = suggestion.score
        return cls(
            card=CardResponse.from_card(suggestion.card),
            score=SynergyScoreResponse(
                mechanical=result.mechanical,
                strategic=result.strategic,
                format_context=result.format_context,
                theme=result.theme,
                total=result.total,
                breakdown=[
                    ScoreBreakdownResponse(
                        axis=item.axis.value, reason=item.reason, points=item.points
                    )
                    for item in result.breakdown
                ],
            ),
            categories=[category.value for category in suggestion.categories],
            in_collection=suggestion.in_collection,
            owned_quantity=suggestion.owned_quantity,
        )


class SuggestionPageResponse(BaseModel):
    """A page of ranked suggestions."""

    suggestions: list[SuggestionResponse] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False
    format: str
    deck_stage: str | None = None
    archetype: str | None = None
    degraded: bool = Field(
        default=False,
        description="True when suggestions could not be computed and an empty page was returned",
    )

    @classmethod
    def from_page(cls, page: SuggestionPage) -> "SuggestionPageResponse":
        return cls(
            suggestions=[SuggestionResponse.from_suggestion(s) for s in page.suggestions],
            total=page.total,
            has_more=page.has_more,
            format=page.format,
            deck_stage=page.deck_stage.value if page.deck_stage else None,
            archetype=page.archetype,
            degraded=page.degraded,
        )


class ViableArchetypeResponse(BaseModel):
    name: str
    archetype: str
    completeness: int
    key_cards: list[str]

    @classmethod
    def from_model(cls, viable: ViableArchetype) -> "ViableArchetypeResponse":
        return cls(
            name=viable.name,
            archetype=viable.archetype,
            completeness=viable.completeness,
            key_cards=list(viable.key_cards),
        )


class BuildableDeckResponse(BaseModel):
    template_name: str
    archetype: str
    completeness: int
    owned_core_cards: list[str]
    missing_key_cards: list[str]
    missing_count: int
    viable: bool

    @classmethod
    def from_model(cls, deck: BuildableDeck) -> "BuildableDeckResponse":
        return cls(
            template_name=deck.template_name,
            archetype=deck.archetype,
            completeness=deck.completeness,
            owned_core_cards=list(deck.owned_core_cards),
            missing_key_cards=list(deck.missing_key_cards),
            missing_count=deck.missing_count,
            viable=deck.viable,
        )


class FormatCoverageResponse(BaseModel):
    format: str
    total_legal_cards: int
    legal_copies: int
    viable_archetypes: list[ViableArchetypeResponse]
    buildable_decks: list[BuildableDeckResponse]

    @classmethod
    def from_model(cls, coverage: FormatCoverage) -> "FormatCoverageResponse":
        return cls(
            format=coverage.format,
            total_legal_cards=coverage.total_legal_cards,
            legal_copies=coverage.legal_copies,
            viable_archetypes=[
                ViableArchetypeResponse.from_model(v) for v in coverage.viable_archetypes
            ],
            buildable_decks=[BuildableDeckResponse.from_model(d) for d in coverage.buildable_decks],
        )


class BuildableResponse(BaseModel):
    collection_id: str
    format: str
    viable_archetypes: list[ViableArchetypeResponse]
    buildable_decks: list[BuildableDeckResponse]


class ArchetypeSignalResponse(BaseModel):
    archetype: str
    strength: float
    reasons: list[str]


class ArchetypeResponse(BaseModel):
    deck_id: str
    primary: str
    secondary: str | None = None
    confidence: float
    signals: list[ArchetypeSignalResponse] = Field(default_factory=list)


class CategoryAnalysisResponse(BaseModel):
    category: str
    current: int
    minimum: int
    optimal: int
    maximum: int
    status: str
    priority: float


class GapRecommendationResponse(BaseModel):
    category: str
    needed: int
    priority: float
    reason: str


class GapsResponse(BaseModel):
    deck_id: str
    overall_score: float
    categories: list[CategoryAnalysisResponse]
    recommendations: list[GapRecommendationResponse]


@router.get("/suggestions", response_model=SuggestionPageResponse)
async def get_suggestions(
    engine: EngineDep,
    deck_id: str,
    collection_id: str,
    format: str,
    category: CardCategory | None = None,
    limit: Annotated[int, Query(ge=1, le=settings.max_suggestion_limit)] = (
        settings.default_suggestion_limit
    ),
    offset: Annotated[int, Query(ge=0)] = 0,
) -> SuggestionPageResponse:
    """
    Ranked owned cards for a deck.

    Only cards the collection owns and that are legal in the format are
    ever suggested.
    """
    format_type = parse_format(format)
    try:
        page = await engine.get_suggestions(
            deck_id,
            collection_id,
            format_type,
            category_filter=category,
            limit=limit,
            offset=offset,
        )
    except CacheComputationError as exc:
        logger.warning(
            "SUGGESTIONS_DEGRADED",
            extra={
                "deck_id": deck_id,
                "collection_id": collection_id,
                "format": format_type.value,
                "error": exc.detail,
            },
        )
        page = SuggestionPage.empty(format_type.value, degraded=True)
    return SuggestionPageResponse.from_page(page)


@router.get(
    "/coverage/{collection_id}",
    response_model=FormatCoverageResponse | dict[str, FormatCoverageResponse],
)
async def get_format_coverage(
    collection_id: str,
    engine: EngineDep,
    format: str | None = None,
) -> FormatCoverageResponse | dict[str, FormatCoverageResponse]:
    """Coverage of one format, or of every supported format when none is given."""
    coverage = await engine.get_format_coverage(collection_id, format)
    if isinstance(coverage, dict):
        return {name: FormatCoverageResponse.from_model(item) for name, item in coverage.items()}
    return FormatCoverageResponse.from_model(coverage)


@router.get("/buildable/{collection_id}", response_model=BuildableResponse)
async def get_buildable_decks(
    collection_id: str,
    engine: EngineDep,
    format: str,
    limit: Annotated[int, Query(ge=1, le=settings.max_buildable_limit)] = (
        settings.default_buildable_limit
    ),
) -> BuildableResponse:
    format_type = parse_format(format)
    report = await engine.get_buildable_decks(collection_id, format_type, limit)
    return BuildableResponse(
        collection_id=collection_id,
        format=format_type.value,
        viable_archetypes=[ViableArchetypeResponse.from_model(v) for v in report.viable_archetypes],
        buildable_decks=[BuildableDeckResponse.from_model(d) for d in report.buildable_decks],
    )


@router.get("/archetype/{deck_id}", response_model=ArchetypeResponse)
async def get_archetype(deck_id: str, engine: EngineDep, format: str) -> ArchetypeResponse:
    detection = await engine.get_archetype(deck_id, format)
    return ArchetypeResponse(
        deck_id=deck_id,
        primary=detection.primary,
        secondary=detection.secondary,
        confidence=detection.confidence,
        signals=[
            ArchetypeSignalResponse(
                archetype=signal.archetype, strength=signal.strength, reasons=list(signal.reasons)
            )
            for signal in detection.signals
        ],
    )


@router.get("/gaps/{deck_id}", response_model=GapsResponse)
async def get_gaps(deck_id: str, engine: EngineDep, format: str) -> GapsResponse:
    analysis = await engine.get_gaps(deck_id, format)
    return GapsResponse(
        deck_id=deck_id,
        overall_score=analysis.overall_score,
        categories=[
            CategoryAnalysisResponse(
                category=item.category.value,
                current=item.current,
                minimum=item.minimum,
                optimal=item.optimal,
                maximum=item.maximum,
                status=item.status.value,
                priority=item.priority,
            )
            for item in analysis.categories.values()
        ],
        recommendations=[
            GapRecommendationResponse(
                category=rec.category.value,
                needed=rec.needed,
                priority=rec.priority,
                reason=rec.reason,
            )
            for rec in analysis.recommendations
        ],
    )
