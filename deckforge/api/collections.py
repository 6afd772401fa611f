"""
Collection API endpoints.

Owned-card listing and quantity changes. Every change is published to
the recommendation engine, which drops cached results for the
collection and reports newly unlocked archetypes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from deckforge.api.dependencies import EngineDep
from deckforge.db.database import get_session
from deckforge.db.operations import apply_collection_delta
from deckforge.models.notifications import (
    ArchetypeUnlocked,
    CollectionChangeEvent,
    ProgressiveNotification,
)

router = APIRouter(prefix="/collections", tags=["collections"])


class OwnedCardResponse(BaseModel):
    card_id: str
    name: str
    quantity: int


class CollectionCardsResponse(BaseModel):
    collection_id: str
    cards: list[OwnedCardResponse] = Field(default_factory=list)
    total_cards: int = 0
    unique_cards: int = 0


class CollectionDeltaRequest(BaseModel):
    """Add (positive delta) or remove (negative delta) copies of a card."""

    card_id: str
    delta: int = Field(..., description="Copies to add; negative removes")

    @field_validator("delta")
    @classmethod
    def delta_not_zero(cls, value: int) -> int:
        if value == 0:
            raise ValueError("delta must not be 0")
        return value


class NotificationResponse(BaseModel):
    kind: str
    format: str
    template_name: str
    archetype: str | None = None
    completeness: int
    key_cards_added: list[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, notification: ProgressiveNotification) -> "NotificationResponse":
        payload = notification.payload
        response = cls(
            kind=notification.kind.value,
            format=notification.format,
            template_name=payload.template_name,
            completeness=payload.completeness,
        )
        if isinstance(payload, ArchetypeUnlocked):
            response.archetype = payload.archetype
            response.key_cards_added = list(payload.key_cards_added)
        return response


class CollectionDeltaResponse(BaseModel):
    collection_id: str
    card_id: str
    quantity: int
    notifications: list[NotificationResponse] = Field(default_factory=list)


@router.get("/{collection_id}/cards", response_model=CollectionCardsResponse)
async def list_collection_cards(collection_id: str, engine: EngineDep) -> CollectionCardsResponse:
    """Owned cards of a collection. An unknown collection is empty."""
    owned = await engine.collections.list_owned(collection_id)
    return CollectionCardsResponse(
        collection_id=collection_id,
        cards=[
            OwnedCardResponse(card_id=entry.card.id, name=entry.card.name, quantity=entry.quantity)
            for entry in owned
        ],
        total_cards=sum(entry.quantity for entry in owned),
        unique_cards=len(owned),
    )


@router.post("/{collection_id}/cards", response_model=CollectionDeltaResponse)
async def change_collection_card(
    collection_id: str,
    request: CollectionDeltaRequest,
    engine: EngineDep,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionDeltaResponse:
    """
    Apply a quantity change to a collection.

    The change is committed before the engine re-reads the collection.
    """
    quantity = await apply_collection_delta(session, collection_id, request.card_id, request.delta)
    await session.commit()

    notifications = await engine.on_collection_changed(
        CollectionChangeEvent(
            collection_id=collection_id,
            card_id=request.card_id,
            delta_quantity=request.delta,
        )
    )
    return CollectionDeltaResponse(
        collection_id=collection_id,
        card_id=request.card_id,
        quantity=quantity,
        notifications=[NotificationResponse.from_model(n) for n in notifications],
    )
