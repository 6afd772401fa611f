import pytest

from deckforge.models.card import Card, LegalityStatus
from deckforge.models.collection import CollectionCard, owned_by_name
from deckforge.models.deck import DeckCard, DeckWithCards, empty_deck
from deckforge.models.failure import (
    ApiResponse,
    CacheComputationError,
    FailureKind,
    FormatMismatchError,
    NotFoundError,
    OutcomeType,
    UnsupportedFormatError,
)
from deckforge.models.format_config import CardRole, CopyLimitConfig, ScoreWeights
from deckforge.models.validation import ValidationCollector, ValidationKind


class TestLegalityStatus:
    def test_parse_known_values(self) -> None:
        assert LegalityStatus.parse("legal") == LegalityStatus.LEGAL
        assert LegalityStatus.parse("Banned") == LegalityStatus.BANNED
        assert LegalityStatus.parse("restricted") == LegalityStatus.RESTRICTED

    def test_parse_unknown_is_not_legal(self) -> None:
        """Unrecognized catalog strings never make a card legal."""
        assert LegalityStatus.parse("suspended") == LegalityStatus.NOT_LEGAL
        assert LegalityStatus.parse(None) == LegalityStatus.NOT_LEGAL


class TestCard:
    def test_card_immutable(self) -> None:
        card = Card(id="bolt", name="Lightning Bolt")
        with pytest.raises(AttributeError):
            card.name = "Shock"  # type: ignore[misc]

    def test_missing_legality_defaults_to_not_legal(self) -> None:
        card = Card(id="bolt", name="Lightning Bolt", legalities={"modern": LegalityStatus.LEGAL})
        assert card.legality("modern") == LegalityStatus.LEGAL
        assert card.legality("standard") == LegalityStatus.NOT_LEGAL

    def test_basic_land_by_name_or_supertype(self) -> None:
        assert Card(id="m", name="Mountain", types=frozenset({"Land"})).is_basic_land
        snow = Card(
            id="s",
            name="Snowy Peak",
            supertypes=frozenset({"Basic", "Snow"}),
            types=frozenset({"Land"}),
        )
        assert snow.is_basic_land
        assert not Card(id="d", name="Dust Bowl", types=frozenset({"Land"})).is_basic_land

    def test_non_numeric_power_counts_as_zero(self) -> None:
        card = Card(id="t", name="Tarmogoyf", power="*", toughness="1+*")
        assert card.power_value == 0
        assert card.toughness_value == 0


class TestDeckWithCards:
    def test_negative_quantity_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be >= 0"):
            DeckCard(Card(id="x", name="X"), -1)

    def test_role_partitions(self) -> None:
        main = Card(id="a", name="A")
        side = Card(id="b", name="B")
        general = Card(id="c", name="C")
        deck = DeckWithCards(
            id="d",
            name="Deck",
            format="commander",
            cards=(
                DeckCard(main, 3),
                DeckCard(side, 2, CardRole.SIDEBOARD),
                DeckCard(general, 1, CardRole.COMMANDER),
            ),
        )

        assert deck.mainboard_count == 3
        assert deck.sideboard_count == 2
        assert deck.commander is not None
        assert deck.commander.card.id == "c"
        assert deck.card_ids == frozenset({"a", "b", "c"})
        assert [entry.card.id for entry in deck.playing_cards()] == ["a", "c"]

    def test_zero_quantity_entries_ignored(self) -> None:
        deck = DeckWithCards(
            id="d", name="Deck", format="standard", cards=(DeckCard(Card(id="a", name="A"), 0),)
        )
        assert deck.mainboard == []
        assert deck.card_ids == frozenset()

    def test_commander_id_breaks_ties(self) -> None:
        first = Card(id="a", name="A")
        second = Card(id="b", name="B")
        deck = DeckWithCards(
            id="d",
            name="Deck",
            format="commander",
            cards=(
                DeckCard(first, 1, CardRole.COMMANDER),
                DeckCard(second, 1, CardRole.COMMANDER),
            ),
            commander_id="b",
        )
        assert deck.commander is not None
        assert deck.commander.card.id == "b"

    def test_empty_deck(self) -> None:
        deck = empty_deck("standard")
        assert deck.cards == ()
        assert deck.commander is None


class TestCollection:
    def test_owned_by_name_sums_printings(self) -> None:
        cards = [
            CollectionCard(Card(id="bolt-1", name="Lightning Bolt"), 2),
            CollectionCard(Card(id="bolt-2", name="Lightning Bolt"), 3),
            CollectionCard(Card(id="shock", name="Shock"), 0),
        ]
        assert owned_by_name(cards) == {"Lightning Bolt": 5}


class TestFormatConfig:
    def test_copy_limit_exceptions(self) -> None:
        limits = CopyLimitConfig(
            default=1, exceptions={"Relentless Rats": None, "Seven Dwarves": 7}
        )
        assert limits.limit_for("Sol Ring") == 1
        assert limits.limit_for("Relentless Rats") is None
        assert limits.limit_for("Seven Dwarves") == 7

    def test_score_weights_bounded(self) -> None:
        """Weights above 100 or below zero are rejected."""
        with pytest.raises(ValueError, match="must be <= 100"):
            ScoreWeights(mechanical=50, strategic=30, format_context=20, theme=10)
        with pytest.raises(ValueError, match="non-negative"):
            ScoreWeights(mechanical=-1, strategic=30, format_context=20, theme=10)

    def test_score_weights_total(self) -> None:
        weights = ScoreWeights(mechanical=40, strategic=30, format_context=20, theme=10)
        assert weights.total == 100


class TestValidationCollector:
    def test_errors_make_result_invalid(self) -> None:
        collector = ValidationCollector()
        collector.warn(ValidationKind.DECK_ABOVE_OPTIMAL, "big deck")
        assert collector.result().valid

        collector.error(ValidationKind.CARD_NOT_LEGAL, "banned", card_id="x", card_name="X")
        result = collector.result()
        assert not result.valid
        assert len(result.of_kind(ValidationKind.CARD_NOT_LEGAL)) == 1
        assert len(result.warnings) == 1


class TestFailures:
    def test_not_found_maps_to_404(self) -> None:
        error = NotFoundError("Deck", "abc")
        assert error.status_code == 404
        response = error.to_response()
        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.NOT_FOUND

    def test_unsupported_format_lists_supported(self) -> None:
        error = UnsupportedFormatError("pauper", ["standard", "modern"])
        assert error.suggestion == "Use one of: standard, modern"

    def test_format_mismatch_names_both_formats(self) -> None:
        error = FormatMismatchError("deck-1", "standard", "commander")
        assert "standard" in error.message
        assert "commander" in error.message
        assert error.kind == FailureKind.FORMAT_MISMATCH

    def test_cache_computation_error_keeps_cause(self) -> None:
        cause = RuntimeError("boom")
        error = CacheComputationError("digest", cause)
        assert error.cause is cause
        assert error.detail == "RuntimeError: boom"
        assert error.status_code == 503

    def test_unknown_failure_envelope(self) -> None:
        response = ApiResponse.unknown_failure("trace")
        assert response.outcome == OutcomeType.UNKNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.UNKNOWN
