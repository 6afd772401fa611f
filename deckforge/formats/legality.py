"""
Legality lookups across formats.

Format legality is read from the catalog's per-format table and nowhere
else. Brawl falls back to Standard legality when the catalog publishes no
Brawl entry, as Brawl's pool tracks Standard.
"""

from collections import Counter
from collections.abc import Iterable

from deckforge.models.card import Card, LegalityStatus
from deckforge.models.format_config import FormatType

LEGALITY_FALLBACKS: dict[FormatType, tuple[str, ...]] = {
    FormatType.STANDARD: ("standard",),
    FormatType.MODERN: ("modern",),
    FormatType.COMMANDER: ("commander",),
    FormatType.BRAWL: ("brawl", "standard"),
}


def legality_status(card: Card, format_type: FormatType) -> LegalityStatus:
    """First published status among the format's legality keys."""
    for key in LEGALITY_FALLBACKS[format_type]:
        if key in card.legalities:
            return card.legalities[key]
    return LegalityStatus.NOT_LEGAL


def is_legal(card: Card, format_type: FormatType) -> bool:
    return legality_status(card, format_type) == LegalityStatus.LEGAL


def is_banned(card: Card, format_type: FormatType) -> bool:
    return legality_status(card, format_type) == LegalityStatus.BANNED


def is_restricted(card: Card, format_type: FormatType) -> bool:
    return legality_status(card, format_type) == LegalityStatus.RESTRICTED


def filter_legal_cards(cards: Iterable[Card], format_type: FormatType) -> list[Card]:
    return [card for card in cards if is_legal(card, format_type)]


def legality_summary(card: Card) -> dict[FormatType, LegalityStatus]:
    """Status of one card in every supported format."""
    return {format_type: legality_status(card, format_type) for format_type in FormatType}


def count_legal_by_format(cards: Iterable[Card]) -> dict[FormatType, int]:
    counts: Counter[FormatType] = Counter({format_type: 0 for format_type in FormatType})
    for card in cards:
        for format_type in FormatType:
            if is_legal(card, format_type):
                counts[format_type] += 1
    return dict(counts)
