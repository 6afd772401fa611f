"""
Recommendation engine.

Composes the pipeline: deck and collection are fetched from injected
stores, candidates are narrowed to owned legal cards, every candidate is
scored against one ScoringContext, and the ranked list is cached and
paged.

Scoring itself is synchronous and pure; the ranking loop only yields to
the event loop between batches of candidates. The ranked list for a
given deck, collection, format and category filter is deterministic.

Cancellation is cooperative: the caller's event is checked between
candidates and a cancelled evaluation returns nothing. Only the caller
that cancelled sees the cancellation; callers sharing its computation
recompute.
"""

import asyncio
import logging
from collections.abc import Callable

from deckforge.analysis.archetype import effective_detection
from deckforge.analysis.buildable import BuildableDecksAnalyzer
from deckforge.analysis.categories import classify_card
from deckforge.analysis.gaps import analyze_gaps
from deckforge.analysis.scorer import build_scoring_context, rank_key, score
from deckforge.config import CANCELLATION_CHECK_INTERVAL, settings
from deckforge.formats.base import FormatAdapter
from deckforge.formats.factory import get_format_adapter, supported_formats
from deckforge.models.buildable import BuildableReport, FormatCoverage
from deckforge.models.card import Card
from deckforge.models.collection import CollectionCard
from deckforge.models.deck import DeckWithCards
from deckforge.models.failure import (
    EvaluationCancelledError,
    FailureKind,
    FormatMismatchError,
    KnownError,
    NotFoundError,
)
from deckforge.models.format_config import CardCategory, CardRole, FormatType
from deckforge.models.notifications import CollectionChangeEvent, ProgressiveNotification
from deckforge.models.scoring import (
    ArchetypeDetection,
    DeckGapAnalysis,
    ScoringContext,
    Suggestion,
    SuggestionPage,
    SynergyScore,
)
from deckforge.models.validation import ValidationResult
from deckforge.services.cache import CacheStrategy, RecommendationCache, make_key
from deckforge.services.collection_service import CollectionService
from deckforge.services.progressive_updates import ProgressiveUpdates
from deckforge.services.stores import CardCatalog, CollectionStore, DeckStore

logger = logging.getLogger(__name__)

ScoreFunction = Callable[[Card, ScoringContext], SynergyScore]


def _check_range(name: str, value: int, minimum: int, maximum: int | None = None) -> None:
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f"between {minimum} and {maximum}" if maximum is not None else f">= {minimum}"
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"{name} must be {bounds}, got {value}",
            status_code=422,
        )


async def rank_candidates(
    candidates: list[CollectionCard],
    context: ScoringContext,
    score_fn: ScoreFunction = score,
    cancel_event: asyncio.Event | None = None,
) -> list[Suggestion]:
    """
    Score and rank candidates.

    Yields to the event loop every CANCELLATION_CHECK_INTERVAL candidates so
    another task can set the cancel event while scoring is under way.

    Raises:
        EvaluationCancelledError: If the event is set before all candidates are scored
    """
    scored = []
    for evaluated, entry in enumerate(candidates):
        if evaluated and evaluated % CANCELLATION_CHECK_INTERVAL == 0:
            await asyncio.sleep(0)
        if cancel_event is not None and cancel_event.is_set():
            raise EvaluationCancelledError(evaluated=evaluated)
        result = score_fn(entry.card, context)
        scored.append(
            Suggestion(
                card=entry.card,
                score=result,
                categories=result.categories,
                in_collection=True,
                owned_quantity=entry.quantity,
            )
        )
    scored.sort(key=lambda suggestion: rank_key(suggestion.card, suggestion.score))
    return scored


class RecommendationEngine:
    """
    Entry point for every recommendation query.

    All collaborators are injected; one engine is built per process and
    shared by every request.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        collection_store: CollectionStore,
        deck_store: DeckStore,
        cache: RecommendationCache | None = None,
        progressive: ProgressiveUpdates | None = None,
        analyzer: BuildableDecksAnalyzer | None = None,
        score_fn: ScoreFunction = score,
    ) -> None:
        self.catalog = catalog
        self.deck_store = deck_store
        self.analyzer = analyzer or BuildableDecksAnalyzer()
        self.collections = CollectionService(collection_store, self.analyzer)
        self.cache = cache or RecommendationCache()
        self.progressive = progressive or ProgressiveUpdates(collection_store, self.analyzer)
        self._score_fn = score_fn

    # --- Deck lookups ---

    async def _load_deck(self, deck_id: str) -> DeckWithCards:
        deck = await self.deck_store.get_deck(deck_id)
        if deck is None:
            raise NotFoundError("Deck", deck_id)
        return deck

    async def _load_deck_for(
        self, deck_id: str, format_name: str | FormatType
    ) -> tuple[DeckWithCards, FormatAdapter]:
        adapter = get_format_adapter(format_name)
        deck = await self._load_deck(deck_id)
        if deck.format.lower() != adapter.format.value:
            raise FormatMismatchError(deck_id, deck.format, adapter.format.value)
        return deck, adapter

    # --- Suggestions ---

    async def get_suggestions(
        self,
        deck_id: str,
        collection_id: str,
        format_name: str | FormatType,
        category_filter: CardCategory | None = None,
        limit: int | None = None,
        offset: int = 0,
        cancel_event: asyncio.Event | None = None,
    ) -> SuggestionPage:
        """
        A page of owned, legal cards ranked for the deck.

        Raises:
            UnsupportedFormatError: If the format has no adapter
            NotFoundError: If the deck does not exist
            FormatMismatchError: If the deck belongs to another format
            EvaluationCancelledError: If the caller cancelled the evaluation
            CacheComputationError: If ranking failed unexpectedly
        """
        if limit is None:
            limit = settings.default_suggestion_limit
        _check_range("limit", limit, 1, settings.max_suggestion_limit)
        _check_range("offset", offset, 0)

        deck, adapter = await self._load_deck_for(deck_id, format_name)
        key = make_key(
            CacheStrategy.SUGGESTIONS,
            (deck_id, collection_id),
            adapter.format.value,
            category=category_filter.value if category_filter else None,
        )

        async def compute() -> tuple[list[Suggestion], ScoringContext]:
            candidates = await self.collections.owned_legal_candidates(
                collection_id, adapter.format, deck
            )
            if category_filter is not None:
                candidates = [
                    entry for entry in candidates if category_filter in classify_card(entry.card)
                ]
            context = build_scoring_context(deck, adapter)
            ranked = await rank_candidates(candidates, context, self._score_fn, cancel_event)
            return ranked, context

        ranked, context = await self.cache.get_or_compute(key, compute)
        page = ranked[offset : offset + limit]
        return SuggestionPage(
            suggestions=tuple(page),
            total=len(ranked),
            has_more=offset + limit < len(ranked),
            format=adapter.format.value,
            deck_stage=context.stage,
            archetype=context.archetype,
        )

    # --- Collection-wide queries ---

    async def _coverage(self, collection_id: str, format_type: FormatType) -> FormatCoverage:
        key = make_key(CacheStrategy.FORMAT_COVERAGE, (collection_id,), format_type.value)

        async def compute() -> FormatCoverage:
            return await self.collections.format_coverage(collection_id, format_type)

        return await self.cache.get_or_compute(key, compute)

    async def get_format_coverage(
        self, collection_id: str, format_name: str | FormatType | None = None
    ) -> FormatCoverage | dict[str, FormatCoverage]:
        """Coverage of one format, or of every supported format keyed by name."""
        if format_name is not None:
            adapter = get_format_adapter(format_name)
            return await self._coverage(collection_id, adapter.format)

        coverage = {}
        for name in supported_formats():
            coverage[name] = await self._coverage(collection_id, FormatType(name))
        return coverage

    async def get_buildable_decks(
        self,
        collection_id: str,
        format_name: str | FormatType,
        limit: int | None = None,
    ) -> BuildableReport:
        if limit is None:
            limit = settings.default_buildable_limit
        _check_range("limit", limit, 1, settings.max_buildable_limit)
        adapter = get_format_adapter(format_name)
        key = make_key(CacheStrategy.BUILDABLE_DECKS, (collection_id,), adapter.format.value)

        async def compute() -> BuildableReport:
            owned = await self.collections.list_owned(collection_id)
            return self.analyzer.analyze(owned, adapter.format)

        report = await self.cache.get_or_compute(key, compute)
        return BuildableReport(
            viable_archetypes=report.viable_archetypes,
            buildable_decks=report.buildable_decks[:limit],
        )

    # --- Deck analysis ---

    async def validate_deck(self, deck_id: str) -> ValidationResult:
        """
        Validate a deck against its own format.

        Rule violations are returned as data; only an unknown deck or
        format raises.
        """
        deck = await self._load_deck(deck_id)
        return get_format_adapter(deck.format).validate_deck(deck)

    async def get_archetype(
        self, deck_id: str, format_name: str | FormatType
    ) -> ArchetypeDetection:
        deck, adapter = await self._load_deck_for(deck_id, format_name)
        return effective_detection(deck, adapter)

    async def get_gaps(self, deck_id: str, format_name: str | FormatType) -> DeckGapAnalysis:
        deck, adapter = await self._load_deck_for(deck_id, format_name)
        archetype = effective_detection(deck, adapter).primary
        return analyze_gaps(deck, adapter, archetype)

    # --- Mutations ---

    async def apply_card_change(
        self,
        deck_id: str,
        card_id: str,
        quantity: int,
        role: CardRole = CardRole.MAINBOARD,
    ) -> tuple[DeckWithCards, ValidationResult]:
        """
        Set a card's quantity in a deck and drop the deck's cached results.

        Returns the updated deck and its validation.
        """
        _check_range("quantity", quantity, 0)
        card = await self.catalog.get_card(card_id)
        if card is None:
            raise NotFoundError("Card", card_id)
        await self._load_deck(deck_id)

        deck = await self.deck_store.apply_card_change(deck_id, card_id, quantity, role)
        self.cache.invalidate(deck_id)
        logger.info(
            "DECK_CARD_CHANGED",
            extra={"deck_id": deck_id, "card_id": card_id, "quantity": quantity},
        )
        return deck, get_format_adapter(deck.format).validate_deck(deck)

    async def on_collection_changed(
        self, event: CollectionChangeEvent
    ) -> list[ProgressiveNotification]:
        """Invalidate everything derived from the collection, then check for unlocks."""
        self.cache.invalidate(event.collection_id)
        return await self.progressive.handle_change(event)
