"""
Tests for FilterController selection state and change notifications.
"""

import pytest

from dex_browser.controllers.filter_controller import FilterController, FilterEvents
from dex_browser.utils.data.models import Generation, Pokemon, StatRange
from fakes import make_payload


@pytest.fixture
def filters(bus):
    return FilterController(bus)


@pytest.fixture
def trio():
    return [
        Pokemon.from_payload(make_payload(4, "charmander", ("fire",), hp=39, attack=52)),
        Pokemon.from_payload(make_payload(7, "squirtle", ("water",), hp=44, attack=48)),
        Pokemon.from_payload(make_payload(6, "charizard", ("fire", "flying"), hp=78, attack=84)),
    ]


class TestTypeSelection:
    def test_toggle_adds_then_removes(self, filters):
        filters.toggle_type("fire")
        assert filters.get_active_filters().types == frozenset({"fire"})

        filters.toggle_type("fire")
        assert filters.get_active_filters().types == frozenset()

    def test_unknown_type_is_ignored(self, filters, recorder):
        recorder.listen(FilterEvents.CHANGED)
        filters.toggle_type("shadow")
        assert recorder.events == []
        assert not filters.has_active_filters()

    def test_type_names_are_normalized(self, filters):
        filters.toggle_type(" Fire ")
        assert filters.get_active_filters().types == frozenset({"fire"})

    def test_apply_type_filter(self, filters, trio):
        filters.toggle_type("fire")
        assert [p.name for p in filters.apply_filters(trio)] == ["charmander", "charizard"]


class TestGenerationSelection:
    def test_set_and_clear(self, filters):
        filters.set_generation("2")
        assert filters.get_active_filters().generation is Generation.II
        filters.set_generation("")
        assert filters.get_active_filters().generation is None

    def test_unknown_generation(self, filters):
        with pytest.raises(ValueError):
            filters.set_generation(12)


class TestStatRanges:
    def test_set_range(self, filters):
        filters.set_stat_range("hp", 40, 100)
        assert filters.get_active_filters().stat_ranges["hp"] == StatRange(40, 100)
        assert filters.has_active_filters()

    def test_values_are_clamped(self, filters):
        filters.set_stat_range("attack", -10, 999)
        assert filters.get_active_filters().stat_ranges["attack"] == StatRange(0, 255)
        assert not filters.has_active_filters()

    def test_min_above_max_is_lowered(self, filters):
        filters.set_stat_range("hp", 120, 80)
        assert filters.get_active_filters().stat_ranges["hp"] == StatRange(80, 80)

    def test_unknown_stat(self, filters):
        with pytest.raises(ValueError):
            filters.set_stat_range("speed", 0, 100)

    def test_apply_stat_filter(self, filters, trio):
        filters.set_stat_range("attack", 50, 90)
        assert [p.id for p in filters.apply_filters(trio)] == [4, 6]


class TestNotifications:
    """Every mutation publishes a snapshot of the selection."""

    def test_each_mutation_publishes(self, filters, recorder):
        recorder.listen(FilterEvents.CHANGED)

        filters.toggle_type("fire")
        filters.set_generation(1)
        filters.set_stat_range("hp", 10, 200)
        filters.clear_all()

        snapshots = recorder.payloads(FilterEvents.CHANGED)
        assert len(snapshots) == 4
        assert snapshots[0].types == frozenset({"fire"})
        assert snapshots[1].generation is Generation.I
        assert snapshots[2].stat_ranges["hp"] == StatRange(10, 200)
        assert not snapshots[3].is_active

    def test_snapshots_are_not_affected_by_later_changes(self, filters, recorder):
        recorder.listen(FilterEvents.CHANGED)
        filters.toggle_type("fire")
        filters.toggle_type("water")

        first, second = recorder.payloads(FilterEvents.CHANGED)
        assert first.types == frozenset({"fire"})
        assert second.types == frozenset({"fire", "water"})

    def test_clear_all_resets_everything(self, filters):
        filters.toggle_type("grass")
        filters.set_generation(3)
        filters.set_stat_range("hp", 100, 150)

        filters.clear_all()

        active = filters.get_active_filters()
        assert active.types == frozenset()
        assert active.generation is None
        assert all(r.is_full for r in active.stat_ranges.values())
        assert not filters.has_active_filters()
