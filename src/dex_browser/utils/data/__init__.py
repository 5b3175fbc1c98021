"""Pokemon-specific domain utilities."""

from .constants import (
    GENERATION_RANGES,
    POKEMON_TYPES,
    TYPE_COLORS,
)
from .models import (
    ActiveFilters,
    Generation,
    IndexEntry,
    ListPage,
    PageChange,
    PageResult,
    Pokemon,
    QueryState,
    SearchQuery,
    Stat,
    StatRange,
)
from .pokemon import filter_pokemon, matches_filters, paginate, resolve_id_universe

__all__ = [
    # Constants
    "GENERATION_RANGES",
    "POKEMON_TYPES",
    "TYPE_COLORS",
    # Filtering and paging
    "filter_pokemon",
    "matches_filters",
    "paginate",
    "resolve_id_universe",
    # Models
    "ActiveFilters",
    "Generation",
    "IndexEntry",
    "ListPage",
    "PageChange",
    "PageResult",
    "Pokemon",
    "QueryState",
    "SearchQuery",
    "Stat",
    "StatRange",
]
