"""Tests for buildable-deck analysis."""

import pytest

from deckforge.analysis import DECK_TEMPLATES, BuildableDecksAnalyzer, analyze_template
from deckforge.analysis.buildable import completeness_of
from deckforge.models.buildable import DeckTemplate, TemplateCard
from deckforge.models.collection import CollectionCard
from deckforge.models.format_config import CardCategory, FormatType


def _template(name: str, core: int, quantity: int = 1, support: int = 0) -> DeckTemplate:
    return DeckTemplate(
        name=name,
        archetype="midrange",
        format="standard",
        core_cards=tuple(
            TemplateCard(f"{name} Core {i:02d}", quantity, CardCategory.CREATURES)
            for i in range(core)
        ),
        support_cards=tuple(
            TemplateCard(f"{name} Support {i:02d}", quantity, CardCategory.REMOVAL)
            for i in range(support)
        ),
    )


@pytest.fixture
def mono_red() -> DeckTemplate:
    return next(t for t in DECK_TEMPLATES[FormatType.STANDARD] if t.name == "Mono-Red Aggro")


class TestCompleteness:
    def test_rounds_to_nearest_percent(self) -> None:
        template = _template("Big", core=41)
        owned = {name: 1 for name in template.core_names[:24]}
        assert completeness_of(template, owned) == 59
        owned[template.core_names[24]] = 1
        assert completeness_of(template, owned) == 61

    def test_half_rounds_up(self) -> None:
        template = _template("Eight", core=8)
        owned = {name: 1 for name in template.core_names[:5]}
        assert completeness_of(template, owned) == 63

    def test_no_core_cards_is_zero(self) -> None:
        assert completeness_of(_template("Empty", core=0), {}) == 0

    def test_requires_template_quantity(self, mono_red) -> None:
        """Three copies of a four-of core card do not count."""
        owned = {"Monastery Swiftspear": 3, "Phoenix Chick": 4}
        assert completeness_of(mono_red, owned) == 25

    def test_full_collection(self, mono_red) -> None:
        owned = {entry.card_name: 4 for entry in mono_red.core_cards}
        assert completeness_of(mono_red, owned) == 100


class TestAnalyzeTemplate:
    def test_owned_and_missing_cards(self, mono_red) -> None:
        owned = {
            "Monastery Swiftspear": 4,
            "Phoenix Chick": 4,
            "Kumano Faces Kakkazan": 4,
            "Play with Fire": 1,
            "Lightning Strike": 2,
        }
        deck = analyze_template(mono_red, owned)

        assert deck.completeness == 75
        assert deck.viable
        assert deck.owned_core_cards == (
            "Monastery Swiftspear",
            "Phoenix Chick",
            "Kumano Faces Kakkazan",
        )
        assert deck.missing_key_cards == ("Play with Fire",)
        assert deck.owned_support_cards == ("Lightning Strike",)
        # 3 Play with Fire, 2 Lightning Strike, 4 Imodane's Recruiter
        assert deck.missing_count == 9

    def test_viable_threshold(self) -> None:
        template = _template("Five", core=5)
        owned = {name: 1 for name in template.core_names[:3]}
        assert analyze_template(template, owned).viable
        assert not analyze_template(template, owned, viable_threshold=61).viable


class TestBuildableDecksAnalyzer:
    def test_templates_for_format(self) -> None:
        analyzer = BuildableDecksAnalyzer()
        names = [t.name for t in analyzer.templates_for_format(FormatType.STANDARD)]
        assert names == ["Mono-Red Aggro", "Esper Control"]

    def test_find_by_archetype(self) -> None:
        analyzer = BuildableDecksAnalyzer()
        found = analyzer.find_templates_by_archetype(FormatType.MODERN, "Tribal")
        assert [t.name for t in found] == ["Elves"]

    def test_sorted_by_completeness_then_name(self) -> None:
        templates = {FormatType.STANDARD: (_template("B", 2), _template("A", 2), _template("C", 2))}
        analyzer = BuildableDecksAnalyzer(templates)
        owned = {"C Core 00": 1, "A Core 00": 1}
        decks = analyzer.analyze_owned(owned, FormatType.STANDARD)
        assert [deck.template_name for deck in decks] == ["A", "C", "B"]

    def test_format_without_templates(self) -> None:
        analyzer = BuildableDecksAnalyzer({})
        report = analyzer.analyze([], FormatType.BRAWL)
        assert report.buildable_decks == ()
        assert report.viable_archetypes == ()

    def test_report_lists_viable_archetypes(self, make_card) -> None:
        template = _template("Four", core=4)
        analyzer = BuildableDecksAnalyzer({FormatType.STANDARD: (template,)})
        owned = [CollectionCard(make_card(name), 1) for name in template.core_names[:3]]

        report = analyzer.analyze(owned, FormatType.STANDARD)

        assert [v.name for v in report.viable_archetypes] == ["Four"]
        assert report.viable_archetypes[0].completeness == 75
        assert report.viable_archetypes[0].key_cards == tuple(template.core_names[:3])

    def test_completeness_always_in_range(self) -> None:
        analyzer = BuildableDecksAnalyzer()
        for format_type in FormatType:
            for deck in analyzer.analyze_owned({"Lightning Bolt": 4}, format_type):
                assert 0 <= deck.completeness <= 100
