from deckforge.db.database import get_session, init_db, make_session_factory
from deckforge.db.operations import (
    SqlCardCatalog,
    SqlCollectionStore,
    SqlDeckStore,
    apply_collection_delta,
    create_collection,
    create_deck,
    deck_to_model,
    delete_collection,
    delete_deck,
    get_card,
    get_collection,
    get_deck,
    get_or_create_collection,
    list_owned_cards,
    set_collection_cards,
    set_deck_card,
    upsert_card,
    upsert_cards,
)

__all__ = [
    "SqlCardCatalog",
    "SqlCollectionStore",
    "SqlDeckStore",
    "apply_collection_delta",
    "create_collection",
    "create_deck",
    "deck_to_model",
    "delete_collection",
    "delete_deck",
    "get_card",
    "get_collection",
    "get_deck",
    "get_or_create_collection",
    "get_session",
    "init_db",
    "list_owned_cards",
    "make_session_factory",
    "set_collection_cards",
    "set_deck_card",
    "upsert_card",
    "upsert_cards",
]
