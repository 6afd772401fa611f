"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence. Set
fields (colors, types, keywords) are stored as sorted JSON lists.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from deckforge.models.card import Card, LegalityStatus
from deckforge.models.format_config import CardRole


def _new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CardDB(Base):
    """A catalog card."""

    __tablename__ = "cards"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    mana_cost: Mapped[str] = mapped_column(String(100), default="")
    cmc: Mapped[float] = mapped_column(Float, default=0.0)
    colors: Mapped[list[str]] = mapped_column(JSON, default=list)
    color_identity: Mapped[list[str]] = mapped_column(JSON, default=list)
    supertypes: Mapped[list[str]] = mapped_column(JSON, default=list)
    types: Mapped[list[str]] = mapped_column(JSON, default=list)
    subtypes: Mapped[list[str]] = mapped_column(JSON, default=list)
    keywords: Mapped[list[str]] = mapped_column(JSON, default=list)
    oracle_text: Mapped[str] = mapped_column(Text, default="")
    power: Mapped[str | None] = mapped_column(String(10), nullable=True)
    toughness: Mapped[str | None] = mapped_column(String(10), nullable=True)

    # format name -> legality status string
    legalities: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<CardDB(id={self.id}, name={self.name})>"


class CollectionDB(Base):
    """
    A card collection.

    Decks may be linked to a collection, but a collection stands alone.
    """

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    cards: Mapped[list["CollectionCardDB"]] = relationship(
        back_populates="collection", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<CollectionDB(id={self.id}, name={self.name})>"


class CollectionCardDB(Base):
    """How many copies of one card a collection owns."""

    __tablename__ = "collection_cards"
    __table_args__ = (UniqueConstraint("collection_id", "card_id", name="uq_collection_card"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("collections.id", ondelete="CASCADE"), index=True
    )
    card_id: Mapped[str] = mapped_column(String(64), ForeignKey("cards.id"), index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1)

    collection: Mapped["CollectionDB"] = relationship(back_populates="cards")
    card: Mapped["CardDB"] = relationship()

    def __repr__(self) -> str:
        return f"<CollectionCardDB(card={self.card_id}, qty={self.quantity})>"


class DeckDB(Base):
    """A deck header. Entries live in deck_cards."""

    __tablename__ = "decks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255))
    format: Mapped[str] = mapped_column(String(50), index=True)
    collection_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("collections.id", ondelete="SET NULL"), nullable=True
    )
    commander_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    colors: Mapped[list[str]] = mapped_column(JSON, default=list)
    strategy: Mapped[str | None] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    cards: Mapped[list["DeckCardDB"]] = relationship(
        back_populates="deck", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<DeckDB(id={self.id}, name={self.name}, format={self.format})>"


class DeckCardDB(Base):
    """One card in one role of a deck."""

    __tablename__ = "deck_cards"
    __table_args__ = (UniqueConstraint("deck_id", "card_id", "role", name="uq_deck_card_role"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("decks.id", ondelete="CASCADE"), index=True
    )
    card_id: Mapped[str] = mapped_column(String(64), ForeignKey("cards.id"), index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    role: Mapped[str] = mapped_column(String(20), default=CardRole.MAINBOARD.value)

    deck: Mapped["DeckDB"] = relationship(back_populates="cards")
    card: Mapped["CardDB"] = relationship()

    def __repr__(self) -> str:
        return f"<DeckCardDB(card={self.card_id}, qty={self.quantity}, role={self.role})>"


def card_to_model(row: CardDB) -> Card:
    """Convert a database card to a domain model."""
    return Card(
        id=row.id,
        name=row.name,
        mana_cost=row.mana_cost or "",
        cmc=row.cmc or 0.0,
        colors=frozenset(row.colors or ()),
        color_identity=frozenset(row.color_identity or ()),
        supertypes=frozenset(row.supertypes or ()),
        types=frozenset(row.types or ()),
        subtypes=frozenset(row.subtypes or ()),
        keywords=frozenset(row.keywords or ()),
        oracle_text=row.oracle_text or "",
        power=row.power,
        toughness=row.toughness,
        legalities={
            name: LegalityStatus.parse(status) for name, status in (row.legalities or {}).items()
        },
    )


def card_from_model(card: Card) -> CardDB:
    """Convert a domain card to a database row."""
    return CardDB(
        id=card.id,
        name=card.name,
        mana_cost=card.mana_cost,
        cmc=card.cmc,
        colors=sorted(card.colors),
        color_identity=sorted(card.color_identity),
        supertypes=sorted(card.supertypes),
        types=sorted(card.types),
        subtypes=sorted(card.subtypes),
        keywords=sorted(card.keywords),
        oracle_text=card.oracle_text,
        power=card.power,
        toughness=card.toughness,
        legalities={name: status.value for name, status in card.legalities.items()},
    )
