"""
Buildable-deck analysis.

Measures how much of each archetype template a collection already owns.

Completeness is the share of a template's core cards the collection
covers, by exact card name. A core card counts as owned only when the
collection holds at least the template's quantity of it.

INVARIANT: completeness is an integer in [0, 100]; a template with no
core cards is 0% complete.
"""

import logging
from collections.abc import Mapping, Sequence

from deckforge.analysis.templates import DECK_TEMPLATES
from deckforge.config import VIABLE_THRESHOLD
from deckforge.models.buildable import (
    BuildableDeck,
    BuildableReport,
    DeckTemplate,
    ViableArchetype,
)
from deckforge.models.collection import CollectionCard, owned_by_name
from deckforge.models.format_config import FormatType

logger = logging.getLogger(__name__)


def completeness_of(template: DeckTemplate, owned: Mapping[str, int]) -> int:
    if not template.core_cards:
        return 0
    covered = sum(
        1 for entry in template.core_cards if owned.get(entry.card_name, 0) >= entry.quantity
    )
    # Half rounds up: 5 of 8 is 63
    return int(covered * 100 / len(template.core_cards) + 0.5)


def analyze_template(
    template: DeckTemplate,
    owned: Mapping[str, int],
    viable_threshold: int = VIABLE_THRESHOLD,
) -> BuildableDeck:
    owned_core = []
    missing_core = []
    missing_count = 0
    for entry in template.core_cards:
        have = owned.get(entry.card_name, 0)
        if have >= entry.quantity:
            owned_core.append(entry.card_name)
        else:
            missing_core.append(entry.card_name)
            missing_count += entry.quantity - have

    owned_support = []
    for entry in template.support_cards:
        have = owned.get(entry.card_name, 0)
        if have > 0:
            owned_support.append(entry.card_name)
        missing_count += max(0, entry.quantity - have)

    completeness = completeness_of(template, owned)
    return BuildableDeck(
        template_name=template.name,
        archetype=template.archetype,
        format=template.format,
        completeness=completeness,
        owned_core_cards=tuple(owned_core),
        missing_key_cards=tuple(missing_core),
        missing_count=missing_count,
        owned_support_cards=tuple(owned_support),
        viable=completeness >= viable_threshold,
    )


class BuildableDecksAnalyzer:
    """
    Ranks a format's templates against a collection snapshot.

    The template set is injectable so alternative reference data can be
    analyzed with the same rules.
    """

    def __init__(
        self,
        templates: Mapping[FormatType, Sequence[DeckTemplate]] | None = None,
        viable_threshold: int = VIABLE_THRESHOLD,
    ) -> None:
        self._templates = DECK_TEMPLATES if templates is None else templates
        self.viable_threshold = viable_threshold

    def templates_for_format(self, format_type: FormatType) -> list[DeckTemplate]:
        return list(self._templates.get(format_type, ()))

    def find_templates_by_archetype(
        self, format_type: FormatType, archetype: str
    ) -> list[DeckTemplate]:
        wanted = archetype.lower()
        return [t for t in self.templates_for_format(format_type) if t.archetype == wanted]

    def analyze_owned(
        self, owned: Mapping[str, int], format_type: FormatType
    ) -> list[BuildableDeck]:
        """Every template of the format, most complete first, then by name."""
        decks = [
            analyze_template(template, owned, self.viable_threshold)
            for template in self.templates_for_format(format_type)
        ]
        decks.sort(key=lambda deck: (-deck.completeness, deck.template_name))
        return decks

    def analyze(
        self, collection_cards: list[CollectionCard], format_type: FormatType
    ) -> BuildableReport:
        decks = self.analyze_owned(owned_by_name(collection_cards), format_type)
        viable = tuple(
            ViableArchetype(
                name=deck.template_name,
                archetype=deck.archetype,
                completeness=deck.completeness,
                key_cards=deck.owned_core_cards,
            )
            for deck in decks
            if deck.viable
        )
        logger.debug(
            "BUILDABLE_DECKS_ANALYZED",
            extra={
                "format": format_type.value,
                "templates": len(decks),
                "viable": len(viable),
            },
        )
        return BuildableReport(viable_archetypes=viable, buildable_decks=tuple(decks))
