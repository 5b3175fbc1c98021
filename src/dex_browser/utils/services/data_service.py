"""
Cache-backed data service for the remote Pokemon catalog.

Three query strategies (plain page, name search, filter) all produce a
PageResult. Individual entity fetches inside a batch may fail without failing
the batch; list and index fetches that a strategy depends on fail the call.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Optional

from dex_browser.utils.core.cache import ResponseCache, entity_key, list_key
from dex_browser.utils.core.errors import DataServiceError, NotFoundError
from dex_browser.utils.core.logger import LogContext, get_logger
from dex_browser.utils.core.transport import HttpTransport, Transport
from dex_browser.utils.data.models import (
    ActiveFilters,
    IndexEntry,
    ListPage,
    PageResult,
    Pokemon,
)
from dex_browser.utils.data.pokemon import (
    filter_pokemon,
    page_id_range,
    paginate,
    resolve_id_universe,
)
from dex_browser.utils.text.text_util import name_to_id, normalize_query

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"


def _validate_paging(page: int, page_size: int) -> None:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")


def normalize_identifier(identifier: int | str) -> int | str:
    """Normalize an id or name into the form used for URLs and cache keys.

    Identifiers with a leading or trailing dash (including signed numbers
    such as "-1") are rejected rather than rewritten to a different resource.

    Raises:
        NotFoundError: If the identifier is empty or malformed
    """
    if isinstance(identifier, int) and not isinstance(identifier, bool):
        return identifier
    text = str(identifier).strip()
    if text.isdigit():
        return int(text)
    if text.startswith(("-", "+")) or text.endswith("-"):
        raise NotFoundError(f"Invalid identifier: {identifier!r}", str(identifier))
    normalized = name_to_id(text)
    if not normalized:
        raise NotFoundError(f"Invalid identifier: {identifier!r}", str(identifier))
    return normalized


class PokemonDataService:
    """
    Fetches, caches and pages Pokemon records from a PokeAPI-compatible service.

    One instance owns one cache; construct it once per browser session and
    pass it to whatever needs catalog data. Call clear_cache() to force every
    later call to refetch.
    """

    def __init__(
        self,
        transport: Transport,
        base_url: str = DEFAULT_BASE_URL,
        name_index_limit: int = 2000,
        catalog_limit: Optional[int] = None,
        cache: Optional[ResponseCache] = None,
        initial_count: int = 50,
    ):
        """Initialize the data service.

        Args:
            transport (Transport): Collaborator performing the HTTP GETs
            base_url (str, optional): Root URL of the REST service. Defaults to PokeAPI v2.
            name_index_limit (int, optional): Rows requested for the name index. Defaults to 2000.
            catalog_limit (Optional[int], optional): Cap on the catalog size reported by the service. Defaults to None.
            cache (Optional[ResponseCache], optional): Cache to use. Defaults to a new empty cache.
            initial_count (int, optional): Entities returned by get_initial(). Defaults to 50.
        """
        self._transport = transport
        self._base_url = base_url.rstrip("/")
        self._name_index_limit = name_index_limit
        self._catalog_limit = catalog_limit
        self._initial_count = initial_count
        self._cache = cache if cache is not None else ResponseCache()
        self._name_index: Optional[tuple[IndexEntry, ...]] = None

    @classmethod
    def from_config(cls, config, transport: Optional[Transport] = None) -> PokemonDataService:
        """Build a data service from a BrowserConfig.

        Args:
            config: BrowserConfig instance
            transport (Optional[Transport], optional): Defaults to an HttpTransport built from the config.
        """
        if transport is None:
            transport = HttpTransport(timeout=config.request_timeout, user_agent=config.user_agent)
        return cls(
            transport,
            base_url=config.api_base_url,
            name_index_limit=config.name_index_limit,
            catalog_limit=config.catalog_limit,
            initial_count=config.initial_count,
        )

    # region Raw access
    def _entity_url(self, identifier: int | str) -> str:
        return f"{self._base_url}/pokemon/{identifier}"

    def _list_url(self, limit: int, offset: int) -> str:
        return f"{self._base_url}/pokemon?limit={limit}&offset={offset}"

    async def get_entity_list(self, limit: int, offset: int = 0) -> ListPage:
        """Fetch one page of the list endpoint (cached per limit/offset).

        Raises:
            DataServiceError: If the list cannot be fetched or decoded
        """
        key = list_key(limit, offset)

        async def fetch() -> Any:
            payload = await self._transport.get_json(self._list_url(limit, offset))
            # Validate before the payload is cached
            ListPage.from_payload(payload, key)
            return payload

        payload = await self._cache.get_or_fetch(key, fetch)
        return ListPage.from_payload(payload, key)

    def _known_count(self, list_page: ListPage) -> int:
        if self._catalog_limit is None:
            return list_page.count
        return min(list_page.count, self._catalog_limit)

    async def get_name_index(self) -> tuple[IndexEntry, ...]:
        """Materialize the name index once and reuse it until the cache is cleared."""
        if self._name_index is not None:
            return self._name_index

        generation = self._cache.generation
        list_page = await self.get_entity_list(self._name_index_limit, 0)
        if generation == self._cache.generation:
            self._name_index = list_page.results
            logger.info(f"Loaded name index with {len(list_page.results)} entries")
        return list_page.results

    # endregion

    # region Entities
    async def fetch_entity(self, identifier: int | str) -> Pokemon:
        """Fetch a single Pokemon by id or name.

        Args:
            identifier (int | str): National dex id or name (case-insensitive)

        Raises:
            NotFoundError: If the service has no such Pokemon
            TransportError: On network failure or another non-success status
            DecodeError: If the payload cannot be mapped onto a Pokemon

        Returns:
            Pokemon: The decoded Pokemon
        """
        identifier = normalize_identifier(identifier)
        key = entity_key(identifier)
        generation = self._cache.generation

        async def fetch() -> Any:
            payload = await self._transport.get_json(self._entity_url(identifier))
            pokemon = Pokemon.from_payload(payload)
            id_key = entity_key(pokemon.id)
            stale = generation != self._cache.generation
            if id_key != key and id_key not in self._cache and not stale:
                # Name lookups also satisfy later lookups by id
                self._cache.put(id_key, payload)
            return payload

        payload = await self._cache.get_or_fetch(key, fetch)
        return Pokemon.from_payload(payload)

    async def fetch_batch(self, identifiers: Iterable[int | str]) -> list[Pokemon]:
        """Fetch many Pokemon concurrently, dropping the ones that fail.

        Args:
            identifiers (Iterable[int | str]): Ids or names, in display order

        Returns:
            list[Pokemon]: Successfully fetched Pokemon, in input order
        """
        identifiers = list(identifiers)
        if not identifiers:
            return []

        results = await asyncio.gather(
            *(self.fetch_entity(identifier) for identifier in identifiers),
            return_exceptions=True,
        )

        pokemon: list[Pokemon] = []
        failures = 0
        for identifier, result in zip(identifiers, results):
            if isinstance(result, Pokemon):
                pokemon.append(result)
            elif isinstance(result, DataServiceError):
                failures += 1
                logger.warning(f"Skipping Pokemon '{identifier}': {result}")
            elif isinstance(result, asyncio.CancelledError):
                raise result
            else:
                failures += 1
                logger.error(
                    f"Unexpected error fetching Pokemon '{identifier}': {result}",
                    exc_info=result,
                )

        if failures:
            logger.info(f"Fetched {len(pokemon)}/{len(identifiers)} Pokemon ({failures} failed)")
        return pokemon

    async def get_initial(self, count: Optional[int] = None) -> list[Pokemon]:
        """Fetch the first `count` Pokemon of the catalog (initial_count by default)."""
        return list((await self.fetch_page(1, count or self._initial_count)).items)

    # endregion

    # region Query strategies
    async def fetch_page(self, page: int, page_size: int) -> PageResult:
        """Fetch one plain catalog page by id range.

        A page past the end of the catalog is an empty result, not an error.

        Raises:
            DataServiceError: If the list endpoint (for the total count) fails
        """
        _validate_paging(page, page_size)
        list_page = await self.get_entity_list(page_size, (page - 1) * page_size)
        total = self._known_count(list_page)

        ids = page_id_range(page, page_size, total)
        if not ids:
            logger.debug(f"Page {page} is past the end of the catalog ({total} Pokemon)")
            return PageResult.empty(total, page, page_size)

        items = await self.fetch_batch(ids)
        return PageResult.build(items, total, page, page_size)

    async def search_by_name(self, query: str, page: int, page_size: int) -> PageResult:
        """Search the name index by substring, falling back to a direct lookup.

        Only the requested page of matches is fetched.

        Raises:
            DataServiceError: If the name index cannot be fetched
        """
        _validate_paging(page, page_size)
        term = normalize_query(query)
        if not term:
            return PageResult.empty(page_size=page_size)

        index = await self.get_name_index()
        matches = [entry for entry in index if term in entry.name]

        if not matches:
            try:
                pokemon = await self.fetch_entity(term)
            except DataServiceError as e:
                logger.info(f"No Pokemon matching '{term}': {e}")
                return PageResult.empty(page_size=page_size)
            return PageResult.build([pokemon], 1, 1, page_size)

        page_entries, page, total_pages = paginate(matches, page, page_size)
        items = await self.fetch_batch(entry.identifier for entry in page_entries)
        logger.debug(f"Search '{term}' matched {len(matches)} Pokemon (page {page}/{total_pages})")
        return PageResult(
            items=tuple(items),
            total_count=len(matches),
            page=page,
            total_pages=total_pages,
        )

    async def filter_entities(
        self, filters: ActiveFilters, page: int, page_size: int
    ) -> PageResult:
        """Fetch the whole id universe, filter it in memory, then paginate.

        This is the most expensive strategy: it fetches every Pokemon in the
        universe, not just one page.

        Raises:
            DataServiceError: If the list endpoint (for the total count) fails
        """
        _validate_paging(page, page_size)
        with LogContext(logger, "filtering catalog"):
            list_page = await self.get_entity_list(page_size, 0)
            universe = resolve_id_universe(self._known_count(list_page), filters.generation)
            pokemon = await self.fetch_batch(universe)
            filtered = filter_pokemon(pokemon, filters)

        page_items, page, total_pages = paginate(filtered, page, page_size)
        return PageResult(
            items=tuple(page_items),
            total_count=len(filtered),
            page=page,
            total_pages=total_pages,
        )

    # endregion

    # region Cache management
    def clear_cache(self) -> None:
        """Drop every cached payload and the name index."""
        self._cache.clear()
        self._name_index = None

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def cache_stats(self) -> dict[str, Any]:
        return self._cache.stats()

    # endregion
