"""
Collection change events and the notifications they can trigger.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class CollectionChangeEvent:
    """
    A change to a collection, as published by the collection store.

    delta_quantity is positive for additions and negative for removals.
    """

    collection_id: str
    card_id: str
    delta_quantity: int
    occurred_at: datetime = field(default_factory=_utcnow)


class NotificationKind(str, Enum):
    ARCHETYPE_UNLOCKED = "archetype_unlocked"
    DECK_BUILDABLE = "deck_buildable"


@dataclass(frozen=True, slots=True)
class ArchetypeUnlocked:
    template_name: str
    archetype: str
    completeness: int
    key_cards_added: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DeckBuildable:
    """A template the collection can now (almost) fully build."""

    template_name: str
    completeness: int
    owned_cards: tuple[str, ...]
    missing_cards: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ProgressiveNotification:
    kind: NotificationKind
    collection_id: str
    format: str
    payload: ArchetypeUnlocked | DeckBuildable
    created_at: datetime = field(default_factory=_utcnow)
