"""
Utility functions for evaluating filters and paginating Pokemon collections.

These are pure functions shared by the data service (server-backed filtering)
and the filter controller (client-side re-filtering).
"""

from typing import Iterable, Sequence, TypeVar

from dex_browser.utils.data.models import (
    ActiveFilters,
    Generation,
    Pokemon,
    clamp_page,
    total_pages_for,
)

T = TypeVar("T")


def matches_filters(pokemon: Pokemon, filters: ActiveFilters) -> bool:
    """Check a single Pokemon against every filter clause.

    Args:
        pokemon (Pokemon): The Pokemon to test
        filters (ActiveFilters): Filter snapshot

    Returns:
        bool: True if the Pokemon passes the type, generation and stat clauses
    """
    if filters.types and not any(t in filters.types for t in pokemon.types):
        return False

    if filters.generation is not None and not filters.generation.contains(pokemon.id):
        return False

    for stat, stat_range in filters.stat_ranges.items():
        value = pokemon.stat_value(stat)
        # Pokemon without this stat are not excluded by it
        if value is not None and not stat_range.contains(value):
            return False

    return True


def filter_pokemon(pokemon: Iterable[Pokemon], filters: ActiveFilters) -> list[Pokemon]:
    """Return the Pokemon passing every clause, preserving input order."""
    return [p for p in pokemon if matches_filters(p, filters)]


def resolve_id_universe(total_known: int, generation: Generation | None = None) -> range:
    """Resolve the ids a filter query has to consider.

    Args:
        total_known (int): Number of entities the remote catalog reports
        generation (Generation | None, optional): Narrows the universe to one generation. Defaults to None.

    Returns:
        range: Inclusive id range as a Python range (possibly empty)
    """
    first, last = 1, total_known
    if generation is not None:
        gen_first, gen_last = generation.id_range
        first, last = max(first, gen_first), min(last, gen_last)
    return range(first, last + 1)


def page_id_range(page: int, page_size: int, total_known: int) -> range:
    """Ids shown on a plain catalog page: [(page-1)*size+1, min(page*size, total)]."""
    start = (page - 1) * page_size + 1
    end = min(page * page_size, total_known)
    return range(start, end + 1)


def paginate(items: Sequence[T], page: int, page_size: int) -> tuple[Sequence[T], int, int]:
    """Slice one page out of a sequence.

    The page is clamped into [1, total_pages] before slicing.

    Args:
        items (Sequence[T]): The full ordered sequence
        page (int): Requested 1-based page
        page_size (int): Items per page

    Returns:
        tuple[Sequence[T], int, int]: (page_items, clamped_page, total_pages)
    """
    total_pages = total_pages_for(len(items), page_size)
    page = clamp_page(page, total_pages)
    offset = (page - 1) * page_size
    return items[offset : offset + page_size], page, total_pages
