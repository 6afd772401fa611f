"""
Format adapter lookup.

One adapter instance per format for the life of the process. Adapters
are immutable, so the same instance is handed to every caller.
"""

from deckforge.formats.base import FormatAdapter
from deckforge.formats.brawl import BrawlAdapter
from deckforge.formats.commander import CommanderAdapter
from deckforge.formats.modern import ModernAdapter
from deckforge.formats.standard import StandardAdapter
from deckforge.models.failure import UnsupportedFormatError
from deckforge.models.format_config import FormatType

_ADAPTERS: dict[FormatType, FormatAdapter] = {
    FormatType.STANDARD: StandardAdapter(),
    FormatType.MODERN: ModernAdapter(),
    FormatType.COMMANDER: CommanderAdapter(),
    FormatType.BRAWL: BrawlAdapter(),
}


def supported_formats() -> list[str]:
    return [format_type.value for format_type in _ADAPTERS]


def is_supported(format_name: str) -> bool:
    return format_name.lower() in supported_formats()


def parse_format(format_name: str | FormatType) -> FormatType:
    """
    Resolve a format key.

    Raises:
        UnsupportedFormatError: If no adapter exists for the key
    """
    if isinstance(format_name, FormatType):
        return format_name
    try:
        return FormatType(format_name.lower())
    except ValueError:
        raise UnsupportedFormatError(format_name, supported_formats()) from None


def get_format_adapter(format_name: str | FormatType) -> FormatAdapter:
    """
    Return the adapter for a format.

    Raises:
        UnsupportedFormatError: If no adapter exists for the key
    """
    return _ADAPTERS[parse_format(format_name)]
