"""Shared fixtures: card and deck builders, in-memory stores and the test database."""

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from deckforge.api.dependencies import build_engine
from deckforge.db.database import get_session, make_session_factory
from deckforge.main import app
from deckforge.models.card import Card, LegalityStatus
from deckforge.models.collection import CollectionCard
from deckforge.models.db import Base
from deckforge.models.deck import DeckCard, DeckWithCards
from deckforge.models.failure import NotFoundError
from deckforge.models.format_config import CardRole

ALL_FORMATS = ("standard", "modern", "commander", "brawl")


def build_card(
    name: str,
    card_id: str | None = None,
    *,
    cmc: float = 2.0,
    colors: str = "",
    color_identity: str | None = None,
    supertypes: Iterable[str] = (),
    types: Iterable[str] = ("Creature",),
    subtypes: Iterable[str] = (),
    keywords: Iterable[str] = (),
    oracle_text: str = "",
    power: str | None = None,
    toughness: str | None = None,
    legal_in: Iterable[str] = ALL_FORMATS,
    legalities: dict[str, str] | None = None,
) -> Card:
    """A catalog card, legal everywhere unless told otherwise."""
    table = {format_name: LegalityStatus.LEGAL for format_name in legal_in}
    for format_name, status in (legalities or {}).items():
        table[format_name] = LegalityStatus(status)
    return Card(
        id=card_id or name.lower().replace(" ", "-").replace(",", ""),
        name=name,
        cmc=cmc,
        colors=frozenset(colors),
        color_identity=frozenset(colors if color_identity is None else color_identity),
        supertypes=frozenset(supertypes),
        types=frozenset(types),
        subtypes=frozenset(subtypes),
        keywords=frozenset(keywords),
        oracle_text=oracle_text,
        power=power,
        toughness=toughness,
        legalities=table,
    )


def build_basic(name: str = "Mountain", colors: str = "R") -> Card:
    return build_card(
        name,
        cmc=0.0,
        color_identity=colors,
        supertypes=("Basic",),
        types=("Land",),
    )


def build_fillers(count: int, prefix: str = "Filler", **kwargs: Any) -> list[Card]:
    """Distinct vanilla cards, colorless unless colors are given."""
    return [build_card(f"{prefix} {index:03d}", **kwargs) for index in range(count)]


def build_deck(
    format_name: str = "standard",
    mainboard: Iterable[tuple[Card, int]] = (),
    sideboard: Iterable[tuple[Card, int]] = (),
    commander: Card | None = None,
    deck_id: str = "deck-1",
    strategy: str | None = None,
    colors: str = "",
) -> DeckWithCards:
    entries = [DeckCard(card, quantity) for card, quantity in mainboard]
    entries += [DeckCard(card, quantity, CardRole.SIDEBOARD) for card, quantity in sideboard]
    if commander is not None:
        entries.append(DeckCard(commander, 1, CardRole.COMMANDER))
    return DeckWithCards(
        id=deck_id,
        name="Test Deck",
        format=format_name,
        cards=tuple(entries),
        commander_id=commander.id if commander is not None else None,
        colors=frozenset(colors),
        strategy=strategy,
    )


class InMemoryCatalog:
    def __init__(self) -> None:
        self.cards: dict[str, Card] = {}

    def add(self, *cards: Card) -> None:
        for card in cards:
            self.cards[card.id] = card

    async def get_card(self, card_id: str) -> Card | None:
        await asyncio.sleep(0)
        return self.cards.get(card_id)

    async def legality_table(self, card: Card) -> dict[str, LegalityStatus]:
        return dict(card.legalities)


class InMemoryCollectionStore:
    """Yields to the loop on every read so concurrent callers interleave."""

    def __init__(self) -> None:
        self.owned: dict[str, dict[str, CollectionCard]] = {}
        self.reads = 0

    def set(self, collection_id: str, card: Card, quantity: int) -> None:
        cards = self.owned.setdefault(collection_id, {})
        if quantity <= 0:
            cards.pop(card.id, None)
        else:
            cards[card.id] = CollectionCard(card=card, quantity=quantity)

    def add_all(self, collection_id: str, cards: Iterable[Card], quantity: int = 1) -> None:
        for card in cards:
            self.set(collection_id, card, quantity)

    async def list_owned_cards(self, collection_id: str) -> list[CollectionCard]:
        self.reads += 1
        await asyncio.sleep(0)
        cards = self.owned.get(collection_id, {}).values()
        return sorted(cards, key=lambda entry: (entry.card.name, entry.card.id))


class InMemoryDeckStore:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.decks: dict[str, DeckWithCards] = {}
        self._catalog = catalog

    def add(self, deck: DeckWithCards) -> None:
        self.decks[deck.id] = deck

    async def get_deck(self, deck_id: str) -> DeckWithCards | None:
        await asyncio.sleep(0)
        return self.decks.get(deck_id)

    async def apply_card_change(
        self, deck_id: str, card_id: str, quantity: int, role: CardRole
    ) -> DeckWithCards:
        deck = self.decks.get(deck_id)
        if deck is None:
            raise NotFoundError("Deck", deck_id)
        card = self._catalog.cards[card_id]
        entries = [e for e in deck.cards if not (e.card.id == card_id and e.role == role)]
        if quantity > 0:
            entries.append(DeckCard(card, quantity, role))

        commander_id = deck.commander_id
        if role == CardRole.COMMANDER:
            if quantity > 0:
                commander_id = card_id
            elif commander_id == card_id:
                commander_id = None

        updated = replace(deck, cards=tuple(entries), commander_id=commander_id)
        self.decks[deck_id] = updated
        return updated


@pytest.fixture
def make_card() -> Callable[..., Card]:
    return build_card


@pytest.fixture
def make_basic() -> Callable[..., Card]:
    return build_basic


@pytest.fixture
def make_fillers() -> Callable[..., list[Card]]:
    return build_fillers


@pytest.fixture
def make_deck() -> Callable[..., DeckWithCards]:
    return build_deck


@pytest.fixture
def catalog() -> InMemoryCatalog:
    return InMemoryCatalog()


@pytest.fixture
def collection_store() -> InMemoryCollectionStore:
    return InMemoryCollectionStore()


@pytest.fixture
def deck_store(catalog: InMemoryCatalog) -> InMemoryDeckStore:
    return InMemoryDeckStore(catalog)


# =============================================================================
# DATABASE AND API
# =============================================================================


@pytest.fixture
async def async_engine():
    """In-memory SQLite shared by every session of a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return make_session_factory(async_engine)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Async test client backed by the in-memory database."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    # The transport does not run the lifespan, so the engine is installed here
    app.state.engine = build_engine(session_factory)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    app.state.engine = None
