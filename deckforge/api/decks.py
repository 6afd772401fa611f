"""
Deck API endpoints.

Validation against the deck's own format, and single-card edits.
Rule violations come back as data with a 200; only an unknown deck,
card or format is an error.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from deckforge.api.dependencies import EngineDep
from deckforge.models.format_config import CardRole
from deckforge.models.validation import ValidationError, ValidationResult

router = APIRouter(prefix="/decks", tags=["decks"])


class ValidationIssueResponse(BaseModel):
    kind: str
    detail: str
    card_id: str | None = None
    card_name: str | None = None

    @classmethod
    def from_model(cls, issue: ValidationError) -> "ValidationIssueResponse":
        return cls(
            kind=issue.kind.value,
            detail=issue.detail,
            card_id=issue.card_id,
            card_name=issue.card_name,
        )


class ValidationResponse(BaseModel):
    """Validation outcome for a deck."""

    deck_id: str
    valid: bool
    errors: list[ValidationIssueResponse] = Field(default_factory=list)
    warnings: list[ValidationIssueResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, deck_id: str, result: ValidationResult) -> "ValidationResponse":
        return cls(
            deck_id=deck_id,
            valid=result.valid,
            errors=[ValidationIssueResponse.from_model(e) for e in result.errors],
            warnings=[ValidationIssueResponse.from_model(w) for w in result.warnings],
        )


class CardChangeRequest(BaseModel):
    """Set how many copies of a card a deck holds in one role."""

    card_id: str
    quantity: int = Field(..., ge=0, description="New quantity; 0 removes the card")
    role: CardRole = CardRole.MAINBOARD


class CardChangeResponse(BaseModel):
    deck_id: str
    mainboard_count: int
    sideboard_count: int
    commander_id: str | None = None
    validation: ValidationResponse


@router.get("/{deck_id}/validate", response_model=ValidationResponse)
async def validate_deck(deck_id: str, engine: EngineDep) -> ValidationResponse:
    result = await engine.validate_deck(deck_id)
    return ValidationResponse.from_result(deck_id, result)


@router.put("/{deck_id}/cards", response_model=CardChangeResponse)
async def apply_card_change(
    deck_id: str,
    request: CardChangeRequest,
    engine: EngineDep,
) -> CardChangeResponse:
    """
    Set a card's quantity in a deck.

    Cached recommendations for the deck are dropped.
    """
    deck, result = await engine.apply_card_change(
        deck_id, request.card_id, request.quantity, request.role
    )
    commander = deck.commander
    return CardChangeResponse(
        deck_id=deck.id,
        mainboard_count=deck.mainboard_count,
        sideboard_count=deck.sideboard_count,
        commander_id=commander.card.id if commander else None,
        validation=ValidationResponse.from_result(deck.id, result),
    )
