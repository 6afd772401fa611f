from deckforge.formats.base import FormatAdapter
from deckforge.formats.brawl import BrawlAdapter
from deckforge.formats.commander import CommanderAdapter
from deckforge.formats.factory import (
    get_format_adapter,
    is_supported,
    parse_format,
    supported_formats,
)
from deckforge.formats.legality import (
    count_legal_by_format,
    filter_legal_cards,
    is_banned,
    is_legal,
    is_restricted,
    legality_status,
    legality_summary,
)
from deckforge.formats.modern import ModernAdapter
from deckforge.formats.standard import StandardAdapter

__all__ = [
    "BrawlAdapter",
    "CommanderAdapter",
    "FormatAdapter",
    "ModernAdapter",
    "StandardAdapter",
    "count_legal_by_format",
    "filter_legal_cards",
    "get_format_adapter",
    "is_banned",
    "is_legal",
    "is_restricted",
    "is_supported",
    "legality_status",
    "legality_summary",
    "parse_format",
    "supported_formats",
]
