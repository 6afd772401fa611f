"""
Database CRUD operations.

Provides async functions for reading and writing cards, collections and
decks, plus SQL-backed implementations of the store protocols the
recommendation engine consumes.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from deckforge.models.card import Card, LegalityStatus
from deckforge.models.collection import CollectionCard
from deckforge.models.db import (
    CardDB,
    CollectionCardDB,
    CollectionDB,
    DeckCardDB,
    DeckDB,
    card_from_model,
    card_to_model,
)
from deckforge.models.deck import DeckCard, DeckWithCards
from deckforge.models.failure import NotFoundError
from deckforge.models.format_config import CardRole

# --- Card Operations ---


async def get_card(session: AsyncSession, card_id: str) -> CardDB | None:
    return await session.get(CardDB, card_id)


async def upsert_card(session: AsyncSession, card: Card) -> CardDB:
    """
    Insert or update a catalog card.

    If a card with the same id exists, its fields are replaced.
    """
    row = card_from_model(card)
    merged = await session.merge(row)
    await session.flush()
    return merged


async def upsert_cards(session: AsyncSession, cards: Iterable[Card]) -> int:
    """Upsert many cards. Returns how many were written."""
    count = 0
    for card in cards:
        await session.merge(card_from_model(card))
        count += 1
    await session.flush()
    return count


# --- Collection Operations ---


async def get_collection(session: AsyncSession, collection_id: str) -> CollectionDB | None:
    """
    Get a collection by id, with its cards loaded.

    Returns None if no such collection exists.
    """
    result = await session.execute(
        select(CollectionDB)
        .where(CollectionDB.id == collection_id)
        .options(selectinload(CollectionDB.cards).selectinload(CollectionCardDB.card))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_collection(
    session: AsyncSession, collection_id: str | None = None, name: str = ""
) -> CollectionDB:
    """
    Create a new, empty collection.

    Raises IntegrityError if the id is already taken.
    """
    collection = CollectionDB(name=name)
    if collection_id is not None:
        collection.id = collection_id
    session.add(collection)
    await session.flush()
    return collection


async def get_or_create_collection(
    session: AsyncSession, collection_id: str
) -> tuple[CollectionDB, bool]:
    """
    Get existing collection or create new one.

    Returns:
        Tuple of (collection, created) where created is True if new.
    """
    collection = await get_collection(session, collection_id)
    if collection:
        return collection, False

    collection = await create_collection(session, collection_id)
    return collection, True


async def list_owned_cards(session: AsyncSession, collection_id: str) -> list[CollectionCard]:
    """Owned cards with quantity > 0. An unknown collection owns nothing."""
    result = await session.execute(
        select(CollectionCardDB)
        .where(CollectionCardDB.collection_id == collection_id, CollectionCardDB.quantity > 0)
        .options(selectinload(CollectionCardDB.card))
    )
    rows = result.scalars().all()
    owned = [CollectionCard(card=card_to_model(row.card), quantity=row.quantity) for row in rows]
    owned.sort(key=lambda entry: (entry.card.name, entry.card.id))
    return owned


async def apply_collection_delta(
    session: AsyncSession, collection_id: str, card_id: str, delta: int
) -> int:
    """
    Add or remove copies of a card. Quantities never go below zero.

    Returns the new owned quantity.

    Raises:
        NotFoundError: If the card is not in the catalog
    """
    if await get_card(session, card_id) is None:
        raise NotFoundError("Card", card_id)
    await get_or_create_collection(session, collection_id)

    result = await session.execute(
        select(CollectionCardDB).where(
            CollectionCardDB.collection_id == collection_id,
            CollectionCardDB.card_id == card_id,
        )
    )
    row = result.scalar_one_or_none()
    current = row.quantity if row is not None else 0
    quantity = max(0, current + delta)

    if row is None and quantity > 0:
        session.add(
            CollectionCardDB(collection_id=collection_id, card_id=card_id, quantity=quantity)
        )
    elif row is not None and quantity == 0:
        await session.delete(row)
    elif row is not None:
        row.quantity = quantity

    await session.flush()
    return quantity


async def set_collection_cards(
    session: AsyncSession, collection_id: str, cards: dict[str, int]
) -> CollectionDB:
    """
    Replace a collection's contents with card id -> quantity.

    Raises:
        NotFoundError: If any card id is not in the catalog
    """
    for card_id in cards:
        if await get_card(session, card_id) is None:
            raise NotFoundError("Card", card_id)

    await get_or_create_collection(session, collection_id)

    # Re-fetch with eager loading to avoid async lazy loads
    collection = await get_collection(session, collection_id)
    if collection is None:
        msg = f"Collection {collection_id} not found after creation"
        raise RuntimeError(msg)
    collection.cards.clear()
    await session.flush()
    for card_id, quantity in cards.items():
        if quantity > 0:
            collection.cards.append(CollectionCardDB(card_id=card_id, quantity=quantity))
    await session.flush()

    loaded = await get_collection(session, collection_id)
    if loaded is None:
        msg = f"Collection {collection_id} not found after update"
        raise RuntimeError(msg)
    return loaded


async def delete_collection(session: AsyncSession, collection_id: str) -> bool:
    """
    Delete a collection.

    Returns True if deleted, False if not found.
    """
    collection = await get_collection(session, collection_id)
    if not collection:
        return False

    await session.delete(collection)
    return True


# --- Deck Operations ---


async def get_deck(session: AsyncSession, deck_id: str) -> DeckDB | None:
    result = await session.execute(
        select(DeckDB)
        .where(DeckDB.id == deck_id)
        .options(selectinload(DeckDB.cards).selectinload(DeckCardDB.card))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_deck(
    session: AsyncSession,
    name: str,
    format_name: str,
    deck_id: str | None = None,
    collection_id: str | None = None,
    colors: Iterable[str] = (),
    strategy: str | None = None,
) -> DeckDB:
    deck = DeckDB(
        name=name,
        format=format_name.lower(),
        collection_id=collection_id,
        colors=sorted(colors),
        strategy=strategy,
    )
    if deck_id is not None:
        deck.id = deck_id
    session.add(deck)
    await session.flush()
    return deck


def deck_to_model(deck: DeckDB) -> DeckWithCards:
    """Convert a database deck, with cards loaded, to a domain model."""
    entries = sorted(deck.cards, key=lambda row: (row.role, row.card.name, row.card_id))
    return DeckWithCards(
        id=deck.id,
        name=deck.name,
        format=deck.format,
        cards=tuple(
            DeckCard(card=card_to_model(row.card), quantity=row.quantity, role=CardRole(row.role))
            for row in entries
        ),
        collection_id=deck.collection_id,
        commander_id=deck.commander_id,
        colors=frozenset(deck.colors or ()),
        strategy=deck.strategy,
    )


async def set_deck_card(
    session: AsyncSession,
    deck_id: str,
    card_id: str,
    quantity: int,
    role: CardRole = CardRole.MAINBOARD,
) -> DeckDB:
    """
    Set the quantity of a card in one role of a deck. 0 removes it.

    Setting a commander records it on the deck header; removing the
    recorded commander clears it.

    Raises:
        NotFoundError: If the deck or the card does not exist
    """
    deck = await get_deck(session, deck_id)
    if deck is None:
        raise NotFoundError("Deck", deck_id)
    if await get_card(session, card_id) is None:
        raise NotFoundError("Card", card_id)

    result = await session.execute(
        select(DeckCardDB).where(
            DeckCardDB.deck_id == deck_id,
            DeckCardDB.card_id == card_id,
            DeckCardDB.role == role.value,
        )
    )
    row = result.scalar_one_or_none()

    if quantity <= 0:
        if row is not None:
            await session.delete(row)
        if role == CardRole.COMMANDER and deck.commander_id == card_id:
            deck.commander_id = None
    else:
        if row is None:
            session.add(
                DeckCardDB(deck_id=deck_id, card_id=card_id, quantity=quantity, role=role.value)
            )
        else:
            row.quantity = quantity
        if role == CardRole.COMMANDER:
            deck.commander_id = card_id

    await session.flush()
    loaded = await get_deck(session, deck_id)
    if loaded is None:
        msg = f"Deck {deck_id} not found after update"
        raise RuntimeError(msg)
    return loaded


async def delete_deck(session: AsyncSession, deck_id: str) -> bool:
    deck = await get_deck(session, deck_id)
    if not deck:
        return False

    await session.delete(deck)
    return True


# --- Store Implementations ---


class SqlCardCatalog:
    """Card catalog backed by the cards table. One session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = session_factory

    async def get_card(self, card_id: str) -> Card | None:
        async with self._sessions() as session:
            row = await get_card(session, card_id)
            return card_to_model(row) if row is not None else None

    async def legality_table(self, card: Card) -> dict[str, LegalityStatus]:
        stored = await self.get_card(card.id)
        source = stored if stored is not None else card
        return dict(source.legalities)


class SqlCollectionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = session_factory

    async def list_owned_cards(self, collection_id: str) -> list[CollectionCard]:
        async with self._sessions() as session:
            return await list_owned_cards(session, collection_id)


class SqlDeckStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = session_factory

    async def get_deck(self, deck_id: str) -> DeckWithCards | None:
        async with self._sessions() as session:
            row = await get_deck(session, deck_id)
            return deck_to_model(row) if row is not None else None

    async def apply_card_change(
        self,
        deck_id: str,
        card_id: str,
        quantity: int,
        role: CardRole,
    ) -> DeckWithCards:
        async with self._sessions() as session, session.begin():
            row = await set_deck_card(session, deck_id, card_id, quantity, role)
            return deck_to_model(row)
