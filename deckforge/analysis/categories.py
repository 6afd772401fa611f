"""
Functional card classification.

Maps a card onto the CardCategory roles it can fill, from its types,
keywords and rules text. Classification is format-agnostic: whether a
deck needs ramp is the adapter's business, whether a card is ramp is not.

Lands are classified as lands only. Their mana abilities would otherwise
make every land read as ramp.
"""

import re
from collections import Counter
from collections.abc import Iterable

from deckforge.models.card import Card
from deckforge.models.deck import DeckCard
from deckforge.models.format_config import CardCategory

THREAT_KEYWORDS = frozenset({"flying", "trample", "haste"})
THREAT_POWER = 3

PROTECTION_KEYWORDS = frozenset({"hexproof", "indestructible"})

_REMOVAL = re.compile(
    r"(?:destroy|exile) (?:target|up to|another target)"
    r"|deals? (?:\d+|x) damage to (?:any target|target|each creature)"
    r"|gets? -(?:\d+|x)/-(?:\d+|x)"
    r"|counter target"
)
_BOARD_WIPE = re.compile(
    r"(?:destroy|exile) all (?:creatures|nonland permanents|permanents|other creatures)"
    r"|damage to each creature"
    r"|all creatures get -"
)
_CARD_DRAW = re.compile(r"\bdraws? (?:a|an|one|two|three|four|x|\d+|that many)? ?cards?")
_RAMP = re.compile(
    r"add \{[wubrgc]\}"
    r"|add (?:one|two|three|x) mana"
    r"|mana of any (?:one )?color"
    r"|search your library for (?:a|up to \w+) (?:basic )?lands?"
)
_LAND_SEARCH = re.compile(r"search your library for (?:a|up to \w+) (?:basic )?lands?")
_PROTECTION = re.compile(
    r"gains? (?:hexproof|indestructible|protection|ward)"
    r"|protection from"
    r"|phases? out"
)
_TUTOR = re.compile(r"search your library for")
_RECURSION = re.compile(r"return .*from (?:your|a) graveyard|from your graveyard (?:to|onto)")


def classify_card(card: Card) -> list[CardCategory]:
    """Categories a card can fill, in CardCategory declaration order."""
    if card.is_land:
        return [CardCategory.LANDS]

    text = card.lowered_text
    keywords = card.lowered_keywords
    categories: list[CardCategory] = []

    if card.is_creature:
        categories.append(CardCategory.CREATURES)
    if _REMOVAL.search(text):
        categories.append(CardCategory.REMOVAL)
    if _CARD_DRAW.search(text):
        categories.append(CardCategory.CARD_DRAW)
    if _RAMP.search(text):
        categories.append(CardCategory.RAMP)
    if _BOARD_WIPE.search(text):
        categories.append(CardCategory.BOARD_WIPE)
    if keywords & PROTECTION_KEYWORDS or _PROTECTION.search(text):
        categories.append(CardCategory.PROTECTION)
    if card.is_creature and (card.power_value >= THREAT_POWER or keywords & THREAT_KEYWORDS):
        categories.append(CardCategory.THREATS)
    if _TUTOR.search(text) and not _LAND_SEARCH.search(text):
        categories.append(CardCategory.TUTOR)
    if _RECURSION.search(text):
        categories.append(CardCategory.RECURSION)

    return categories


def count_categories(entries: Iterable[DeckCard]) -> Counter[CardCategory]:
    """Copies per category across deck entries."""
    counts: Counter[CardCategory] = Counter()
    for entry in entries:
        if entry.quantity <= 0:
            continue
        for category in classify_card(entry.card):
            counts[category] += entry.quantity
    return counts
