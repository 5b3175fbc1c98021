"""
Catalog data structures.

Raw* dataclasses mirror the JSON returned by the remote service and are filled
with dacite. Domain objects (Pokemon, PageResult, ActiveFilters, ...) are
immutable and built from the raw structures.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from dacite import Config, DaciteError, from_dict

from dex_browser.utils.core.errors import DecodeError
from dex_browser.utils.data.constants import (
    DEFAULT_TYPE,
    FILTERABLE_STATS,
    GENERATION_RANGES,
    MAX_STAT_VALUE,
    MIN_STAT_VALUE,
    PLACEHOLDER_IMAGE_URL,
    STAT_BAR_CEILING,
    TYPE_COLORS,
)
from dex_browser.utils.text.text_util import format_display_name, stat_key

_DACITE_CONFIG = Config(check_types=True)

_RESOURCE_ID_PATTERN = re.compile(r"/(\d+)/?$")


# region Enums
class Generation(IntEnum):
    """Main-series generation, used to narrow the id universe."""

    I = 1
    II = 2
    III = 3
    IV = 4
    V = 5
    VI = 6
    VII = 7
    VIII = 8
    IX = 9

    @property
    def id_range(self) -> tuple[int, int]:
        """Inclusive (first_id, last_id) for this generation."""
        return GENERATION_RANGES[int(self)]

    def contains(self, entity_id: int) -> bool:
        first, last = self.id_range
        return first <= entity_id <= last

    @classmethod
    def parse(cls, value: Generation | int | str | None) -> Optional[Generation]:
        """Parse a generation selector; empty values mean "no generation".

        Raises:
            ValueError: If the value is not a known generation
        """
        if value is None or value == "":
            return None
        if isinstance(value, Generation):
            return value
        try:
            return cls(int(value))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Unknown generation: {value!r}") from e


# endregion


# region Raw Payload Structures
@dataclass(slots=True)
class RawNamedResource:
    name: str
    url: str = ""


@dataclass(slots=True)
class RawTypeSlot:
    type: RawNamedResource
    slot: int = 0


@dataclass(slots=True)
class RawStat:
    base_stat: int
    stat: RawNamedResource
    effort: int = 0


@dataclass(slots=True)
class RawPokemon:
    """Per-entity payload as returned by GET /pokemon/{id-or-name}."""

    id: int
    name: str
    types: list[RawTypeSlot] = field(default_factory=list)
    stats: list[RawStat] = field(default_factory=list)
    height: Optional[int] = None
    weight: Optional[int] = None
    sprites: Optional[dict[str, Any]] = None

    def __post_init__(self):
        """Validate identity fields."""
        if isinstance(self.id, bool) or self.id <= 0:
            raise ValueError(f"id must be a positive integer, got: {self.id}")
        if not self.name.strip():
            raise ValueError("name must be a non-empty string")


@dataclass(slots=True)
class RawListPage:
    """Paginated list payload as returned by GET /pokemon?limit=&offset=."""

    count: int
    results: list[RawNamedResource] = field(default_factory=list)

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"count must be non-negative, got: {self.count}")


def decode_payload(data_class: type, data: Any, resource: str):
    """Map a decoded JSON payload onto a Raw* dataclass.

    Raises:
        DecodeError: If the payload shape does not match
    """
    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected a JSON object for {resource}, got {type(data).__name__}", resource
        )
    try:
        return from_dict(data_class=data_class, data=data, config=_DACITE_CONFIG)
    except (DaciteError, ValueError, TypeError) as e:
        raise DecodeError(f"Malformed payload for {resource}: {e}", resource) from e


# endregion


# region Pokemon
@dataclass(frozen=True, slots=True)
class Stat:
    """One base stat, ready for display."""

    display_name: str
    value: int
    percentage: float

    @classmethod
    def from_base(cls, name: str, value: int) -> Stat:
        return cls(
            display_name=format_display_name(name),
            value=value,
            percentage=min(value / STAT_BAR_CEILING * 100, 100),
        )


def _resolve_image_url(sprites: Optional[dict[str, Any]]) -> str:
    """Official artwork, then the default front sprite, then the placeholder."""
    sprites = sprites or {}
    other = sprites.get("other")
    if isinstance(other, dict):
        artwork = other.get("official-artwork")
        if isinstance(artwork, dict) and artwork.get("front_default"):
            return artwork["front_default"]
    if sprites.get("front_default"):
        return sprites["front_default"]
    return PLACEHOLDER_IMAGE_URL


@dataclass(frozen=True, slots=True)
class Pokemon:
    """Immutable species record built from a per-entity payload."""

    id: int
    name: str
    types: tuple[str, ...]
    stats: Mapping[str, Stat]
    height: float
    weight: float
    image_url: str

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def from_payload(cls, data: Any) -> Pokemon:
        """Build a Pokemon from the decoded JSON of GET /pokemon/{id}.

        Raises:
            DecodeError: If the payload cannot be mapped onto a Pokemon
        """
        resource = f"pokemon {data.get('id', data.get('name', '?'))}" if isinstance(data, dict) else "pokemon"
        raw: RawPokemon = decode_payload(RawPokemon, data, resource)
        types = tuple(slot.type.name for slot in sorted(raw.types, key=lambda s: s.slot))
        stats = {
            stat_key(entry.stat.name): Stat.from_base(entry.stat.name, entry.base_stat)
            for entry in raw.stats
        }
        return cls(
            id=raw.id,
            name=raw.name.lower(),
            types=types,
            stats=MappingProxyType(stats),
            height=(raw.height or 0) / 10,
            weight=(raw.weight or 0) / 10,
            image_url=_resolve_image_url(raw.sprites),
        )

    @property
    def display_name(self) -> str:
        return format_display_name(self.name)

    @property
    def primary_type(self) -> str:
        return self.types[0] if self.types else DEFAULT_TYPE

    @property
    def type_colors(self) -> list[str]:
        return [TYPE_COLORS.get(t, TYPE_COLORS[DEFAULT_TYPE]) for t in self.types]

    @property
    def generation(self) -> Optional[Generation]:
        for generation in Generation:
            if generation.contains(self.id):
                return generation
        return None

    def stat_value(self, key: str) -> Optional[int]:
        stat = self.stats.get(key)
        return stat.value if stat is not None else None

    def matches_search(self, query: str) -> bool:
        """True if the query is empty or a substring of the name or any type."""
        term = query.strip().lower()
        if not term:
            return True
        return term in self.name or any(term in t for t in self.types)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "types": list(self.types),
            "stats": {key: asdict(stat) for key, stat in self.stats.items()},
            "height": self.height,
            "weight": self.weight,
            "image_url": self.image_url,
        }


# endregion


# region Name Index
@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One row of the list endpoint: a name plus the resource URL."""

    name: str
    url: str
    id: Optional[int] = None

    @classmethod
    def from_resource(cls, resource: RawNamedResource) -> IndexEntry:
        match = _RESOURCE_ID_PATTERN.search(resource.url)
        return cls(
            name=resource.name.lower(),
            url=resource.url,
            id=int(match.group(1)) if match else None,
        )

    @property
    def identifier(self) -> int | str:
        """The cheapest key for fetching this entry: its id when known, else its name."""
        return self.id if self.id is not None else self.name


@dataclass(frozen=True, slots=True)
class ListPage:
    count: int
    results: tuple[IndexEntry, ...]

    @classmethod
    def from_payload(cls, data: Any, resource: str = "pokemon list") -> ListPage:
        raw: RawListPage = decode_payload(RawListPage, data, resource)
        return cls(
            count=raw.count,
            results=tuple(IndexEntry.from_resource(r) for r in raw.results),
        )


# endregion


# region Filters
@dataclass(frozen=True, slots=True)
class StatRange:
    """Inclusive numeric range for a stat filter."""

    minimum: int = MIN_STAT_VALUE
    maximum: int = MAX_STAT_VALUE

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum

    @property
    def is_full(self) -> bool:
        return self.minimum <= MIN_STAT_VALUE and self.maximum >= MAX_STAT_VALUE


def default_stat_ranges() -> Mapping[str, StatRange]:
    return MappingProxyType({stat: StatRange() for stat in FILTERABLE_STATS})


@dataclass(frozen=True, slots=True)
class ActiveFilters:
    """Immutable snapshot of the filter selection."""

    types: frozenset[str] = frozenset()
    generation: Optional[Generation] = None
    stat_ranges: Mapping[str, StatRange] = field(default_factory=default_stat_ranges)

    @property
    def narrowed_stats(self) -> dict[str, StatRange]:
        return {stat: r for stat, r in self.stat_ranges.items() if not r.is_full}

    @property
    def is_active(self) -> bool:
        """True if any clause would exclude some item."""
        return bool(self.types) or self.generation is not None or bool(self.narrowed_stats)


# endregion


# region Results and Query State
def total_pages_for(total_count: int, page_size: int) -> int:
    return max(1, math.ceil(total_count / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return min(max(1, page), max(1, total_pages))


@dataclass(frozen=True, slots=True)
class PageResult:
    """One page of entities plus the totals needed to paginate."""

    items: tuple[Pokemon, ...]
    total_count: int
    page: int
    total_pages: int

    @classmethod
    def build(cls, items, total_count: int, page: int, page_size: int) -> PageResult:
        total_pages = total_pages_for(total_count, page_size)
        return cls(
            items=tuple(items),
            total_count=total_count,
            page=clamp_page(page, total_pages),
            total_pages=total_pages,
        )

    @classmethod
    def empty(cls, total_count: int = 0, page: int = 1, page_size: int = 1) -> PageResult:
        return cls.build((), total_count, page, page_size)

    @property
    def is_no_results(self) -> bool:
        return not self.items and self.total_count == 0


@dataclass(frozen=True, slots=True)
class QueryState:
    """Snapshot of (search, filters, page) that selects the fetch strategy."""

    search_query: str = ""
    filters: ActiveFilters = field(default_factory=ActiveFilters)
    page: int = 1
    page_size: int = 50

    @property
    def strategy(self) -> str:
        if self.search_query.strip():
            return "search"
        if self.filters.is_active:
            return "filter"
        return "page"


# endregion


# region Event Payloads
@dataclass(frozen=True, slots=True)
class SearchQuery:
    query: str
    immediate: bool = False


@dataclass(frozen=True, slots=True)
class PageChange:
    page: int
    offset: int
    limit: int


# endregion
