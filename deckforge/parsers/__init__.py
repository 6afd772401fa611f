from deckforge.parsers.scryfall import (
    download_bulk_data,
    fetch_card,
    iter_bulk_cards,
    parse_card,
    split_type_line,
)

__all__ = [
    "download_bulk_data",
    "fetch_card",
    "iter_bulk_cards",
    "parse_card",
    "split_type_line",
]
