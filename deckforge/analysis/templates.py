"""
Archetype templates per format.

Static reference data: the core cards define an archetype, the support
cards round it out. Card names must match catalog names exactly.
"""

from deckforge.models.buildable import DeckTemplate, TemplateCard
from deckforge.models.format_config import CardCategory, FormatType

C = CardCategory


def _cards(*entries: tuple[str, int, CardCategory]) -> tuple[TemplateCard, ...]:
    return tuple(TemplateCard(name, quantity, category) for name, quantity, category in entries)


DECK_TEMPLATES: dict[FormatType, tuple[DeckTemplate, ...]] = {
    FormatType.STANDARD: (
        DeckTemplate(
            name="Mono-Red Aggro",
            archetype="aggro",
            format="standard",
            core_cards=_cards(
                ("Monastery Swiftspear", 4, C.CREATURES),
                ("Phoenix Chick", 4, C.CREATURES),
                ("Kumano Faces Kakkazan", 4, C.REMOVAL),
                ("Play with Fire", 4, C.REMOVAL),
            ),
            support_cards=_cards(
                ("Lightning Strike", 4, C.REMOVAL),
                ("Imodane's Recruiter", 4, C.CREATURES),
            ),
            land_count=20,
            color_identity=frozenset({"R"}),
        ),
        DeckTemplate(
            name="Esper Control",
            archetype="control",
            format="standard",
            core_cards=_cards(
                ("The Wandering Emperor", 4, C.THREATS),
                ("Make Disappear", 4, C.REMOVAL),
                ("Farewell", 3, C.BOARD_WIPE),
            ),
            support_cards=_cards(
                ("Absorb", 4, C.REMOVAL),
                ("Memory Deluge", 3, C.CARD_DRAW),
            ),
            land_count=26,
            color_identity=frozenset({"W", "U", "B"}),
        ),
    ),
    FormatType.MODERN: (
        DeckTemplate(
            name="Burn",
            archetype="aggro",
            format="modern",
            core_cards=_cards(
                ("Lightning Bolt", 4, C.REMOVAL),
                ("Monastery Swiftspear", 4, C.CREATURES),
                ("Eidolon of the Great Revel", 4, C.CREATURES),
                ("Boros Charm", 4, C.THREATS),
            ),
            support_cards=_cards(
                ("Goblin Guide", 4, C.CREATURES),
                ("Searing Blaze", 2, C.REMOVAL),
            ),
            land_count=20,
            color_identity=frozenset({"R", "W"}),
        ),
        DeckTemplate(
            name="Elves",
            archetype="tribal",
            format="modern",
            core_cards=_cards(
                ("Llanowar Elves", 4, C.RAMP),
                ("Elvish Archdruid", 4, C.RAMP),
                ("Collected Company", 4, C.CARD_DRAW),
            ),
            support_cards=_cards(
                ("Craterhoof Behemoth", 2, C.THREATS),
                ("Ezuri, Renegade Leader", 2, C.THREATS),
            ),
            land_count=18,
            color_identity=frozenset({"G"}),
        ),
    ),
    FormatType.COMMANDER: (
        DeckTemplate(
            name="Aristocrats",
            archetype="aristocrats",
            format="commander",
            core_cards=_cards(
                ("Blood Artist", 1, C.THREATS),
                ("Zulaport Cutthroat", 1, C.THREATS),
                ("Viscera Seer", 1, C.CREATURES),
                ("Ashnod's Altar", 1, C.RAMP),
                ("Skullclamp", 1, C.CARD_DRAW),
            ),
            support_cards=_cards(
                ("Grave Pact", 1, C.REMOVAL),
                ("Phyrexian Altar", 1, C.RAMP),
            ),
            land_count=37,
            color_identity=frozenset({"B"}),
        ),
        DeckTemplate(
            name="Spellslinger",
            archetype="spellslinger",
            format="commander",
            core_cards=_cards(
                ("Talrand, Sky Summoner", 1, C.THREATS),
                ("Young Pyromancer", 1, C.THREATS),
                ("Archmage Emeritus", 1, C.CARD_DRAW),
                ("Counterspell", 1, C.REMOVAL),
            ),
            support_cards=_cards(
                ("Mana Drain", 1, C.RAMP),
                ("Cyclonic Rift", 1, C.BOARD_WIPE),
            ),
            land_count=36,
            color_identity=frozenset({"U", "R"}),
        ),
    ),
    FormatType.BRAWL: (
        DeckTemplate(
            name="Aggro",
            archetype="aggro",
            format="brawl",
            core_cards=_cards(
                ("Adeline, Resplendent Cathar", 1, C.CREATURES),
                ("Thalia, Guardian of Thraben", 1, C.CREATURES),
                ("Brutal Cathar", 1, C.REMOVAL),
            ),
            support_cards=_cards(
                ("Legion Angel", 1, C.THREATS),
                ("Skyclave Apparition", 1, C.REMOVAL),
            ),
            land_count=24,
            color_identity=frozenset({"W"}),
        ),
    ),
}
