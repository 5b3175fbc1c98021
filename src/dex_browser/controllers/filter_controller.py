"""
Filter selection state: types, generation and stat ranges.
"""

from types import MappingProxyType
from typing import Iterable, Optional

from dex_browser.utils.core.events import EventBus
from dex_browser.utils.core.logger import get_logger
from dex_browser.utils.data.constants import (
    FILTERABLE_STATS,
    MAX_STAT_VALUE,
    MIN_STAT_VALUE,
    POKEMON_TYPES,
)
from dex_browser.utils.data.models import ActiveFilters, Generation, Pokemon, StatRange
from dex_browser.utils.data.pokemon import filter_pokemon

logger = get_logger(__name__)


class FilterEvents:
    """Topics published by FilterController."""

    CHANGED = "filters:changed"


class FilterController:
    """Headless filter panel. Every mutation publishes an ActiveFilters snapshot."""

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        available_types: Iterable[str] = POKEMON_TYPES,
        stats: Iterable[str] = FILTERABLE_STATS,
    ):
        self.events = bus if bus is not None else EventBus()
        self.available_types: tuple[str, ...] = tuple(available_types)
        self._stats = tuple(stats)
        self._types: set[str] = set()
        self._generation: Optional[Generation] = None
        self._stat_ranges: dict[str, StatRange] = {stat: StatRange() for stat in self._stats}

    def toggle_type(self, pokemon_type: str) -> None:
        """Add the type to the selection, or remove it if already selected."""
        pokemon_type = pokemon_type.strip().lower()
        if pokemon_type not in self.available_types:
            logger.warning(f"Ignoring unknown type filter '{pokemon_type}'")
            return

        if pokemon_type in self._types:
            self._types.discard(pokemon_type)
        else:
            self._types.add(pokemon_type)
        self._emit_changed()

    def set_generation(self, generation: Generation | int | str | None) -> None:
        """Select a generation; None or "" clears it.

        Raises:
            ValueError: If the generation is unknown
        """
        self._generation = Generation.parse(generation)
        self._emit_changed()

    def set_stat_range(self, stat: str, minimum: int, maximum: int) -> None:
        """Narrow a stat to [minimum, maximum].

        Values are clamped to the stat scale and a minimum above the maximum is
        lowered to the maximum.

        Raises:
            ValueError: If the stat is not filterable
        """
        if stat not in self._stat_ranges:
            raise ValueError(f"Stat '{stat}' is not filterable; expected one of {self._stats}")

        maximum = min(max(maximum, MIN_STAT_VALUE), MAX_STAT_VALUE)
        minimum = min(max(minimum, MIN_STAT_VALUE), maximum)
        self._stat_ranges[stat] = StatRange(minimum, maximum)
        self._emit_changed()

    def clear_all(self) -> None:
        self._types.clear()
        self._generation = None
        self._stat_ranges = {stat: StatRange() for stat in self._stats}
        self._emit_changed()

    def get_active_filters(self) -> ActiveFilters:
        return ActiveFilters(
            types=frozenset(self._types),
            generation=self._generation,
            stat_ranges=MappingProxyType(dict(self._stat_ranges)),
        )

    def has_active_filters(self) -> bool:
        """True if a type, a generation or a narrowed stat range is selected."""
        return self.get_active_filters().is_active

    def apply_filters(self, pokemon: Iterable[Pokemon]) -> list[Pokemon]:
        """Filter an already-fetched collection with the current selection (no I/O)."""
        return filter_pokemon(pokemon, self.get_active_filters())

    def _emit_changed(self) -> None:
        self.events.publish(FilterEvents.CHANGED, self.get_active_filters())
