"""
Couples the three controllers to the data service and the render boundary.

The orchestrator listens to search, filter and pagination events, picks one
query strategy from the current state (search > filters > plain page), and
publishes the outcome on its bus for the rendering collaborator.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from dex_browser.controllers.filter_controller import FilterController, FilterEvents
from dex_browser.controllers.pagination_controller import (
    PaginationController,
    PaginationEvents,
)
from dex_browser.controllers.search_controller import SearchController, SearchEvents
from dex_browser.utils.core.errors import DataServiceError
from dex_browser.utils.core.events import EventBus, Subscription
from dex_browser.utils.core.logger import get_logger
from dex_browser.utils.core.transport import Transport
from dex_browser.utils.data.models import PageResult, Pokemon, QueryState
from dex_browser.utils.services.data_service import PokemonDataService

logger = get_logger(__name__)


class RenderEvents:
    """Topics consumed by the rendering collaborator."""

    LOADING_STARTED = "render:loadingStarted"
    LOADING_FINISHED = "render:loadingFinished"
    RENDERED = "render:rendered"
    NO_RESULTS = "render:noResults"
    ERROR = "render:error"


class BrowserOrchestrator:
    """Resolves the current QueryState into a PageResult and publishes it."""

    def __init__(
        self,
        data_service: PokemonDataService,
        search: SearchController,
        filters: FilterController,
        pagination: PaginationController,
        bus: Optional[EventBus] = None,
    ):
        self.data_service = data_service
        self.search = search
        self.filters = filters
        self.pagination = pagination
        self.events = bus if bus is not None else EventBus()

        self._task: Optional[asyncio.Task] = None
        self._current: Optional[PageResult] = None
        self._subscriptions: list[tuple[EventBus, Subscription]] = [
            (search.events, search.events.subscribe(SearchEvents.QUERY, self._on_search_changed)),
            (search.events, search.events.subscribe(SearchEvents.CLEAR, self._on_search_changed)),
            (filters.events, filters.events.subscribe(FilterEvents.CHANGED, self._on_filters_changed)),
            (
                pagination.events,
                pagination.events.subscribe(PaginationEvents.PAGE_CHANGED, self._on_page_changed),
            ),
        ]

    @classmethod
    def from_config(
        cls,
        config,
        transport: Optional[Transport] = None,
        data_service: Optional[PokemonDataService] = None,
    ) -> BrowserOrchestrator:
        """Wire a complete browser session sharing one event bus.

        Args:
            config: BrowserConfig instance
            transport (Optional[Transport], optional): Used when data_service is not given.
            data_service (Optional[PokemonDataService], optional): Defaults to one built from config.
        """
        bus = EventBus()
        if data_service is None:
            data_service = PokemonDataService.from_config(config, transport)
        return cls(
            data_service,
            SearchController(bus, debounce_ms=config.debounce_ms),
            FilterController(bus),
            PaginationController(
                bus, page_size=config.page_size, max_visible_pages=config.max_visible_pages
            ),
            bus,
        )

    # region State
    def snapshot(self) -> QueryState:
        return QueryState(
            search_query=self.search.query,
            filters=self.filters.get_active_filters(),
            page=self.pagination.current_page,
            page_size=self.pagination.page_size,
        )

    @property
    def current_result(self) -> Optional[PageResult]:
        return self._current

    @property
    def current_items(self) -> list[Pokemon]:
        return list(self._current.items) if self._current is not None else []

    @property
    def is_loading(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "total_pokemon": len(self.current_items),
            "cache_size": self.data_service.cache_size,
            "is_loading": self.is_loading,
        }

    # endregion

    # region Event handlers
    def _on_search_changed(self, _payload) -> None:
        self.pagination.reset()
        self._schedule_load()

    def _on_filters_changed(self, _payload) -> None:
        self.pagination.reset()
        self._schedule_load()

    def _on_page_changed(self, _payload) -> None:
        self._schedule_load()

    def _schedule_load(self) -> None:
        """Start a load for the current state, superseding any load in flight."""
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling superseded load")
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self.load())
        self._task.add_done_callback(self._on_task_done)

    @staticmethod
    def _on_task_done(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Unexpected error while loading Pokemon", exc_info=task.exception())

    # endregion

    # region Loading
    async def _resolve(self, state: QueryState) -> PageResult:
        strategy = state.strategy
        logger.debug(f"Resolving page {state.page} with '{strategy}' strategy")
        if strategy == "search":
            return await self.data_service.search_by_name(
                state.search_query, state.page, state.page_size
            )
        if strategy == "filter":
            return await self.data_service.filter_entities(
                state.filters, state.page, state.page_size
            )
        return await self.data_service.fetch_page(state.page, state.page_size)

    @staticmethod
    def _error_message(state: QueryState, error: DataServiceError) -> str:
        strategy = state.strategy
        if strategy == "search":
            return f"Search failed: {error.message}"
        if strategy == "filter":
            return f"Filtering failed: {error.message}"
        return f"Failed to load Pokemon data. Please try again. ({error.message})"

    async def load(self) -> Optional[PageResult]:
        """Resolve the current state and publish the outcome.

        A call-level failure publishes ERROR and keeps the previously
        rendered result.

        Returns:
            Optional[PageResult]: The new result, or None if the call failed
        """
        state = self.snapshot()
        self.events.publish(RenderEvents.LOADING_STARTED, state)
        try:
            result = await self._resolve(state)
        except DataServiceError as e:
            message = self._error_message(state, e)
            logger.error(message)
            self.events.publish(RenderEvents.ERROR, message)
            return None
        finally:
            self.events.publish(RenderEvents.LOADING_FINISHED, state)

        self.pagination.set_total_items(result.total_count)
        self._current = result

        if result.is_no_results:
            self.events.publish(RenderEvents.NO_RESULTS, state)
        else:
            self.events.publish(RenderEvents.RENDERED, result)
        return result

    async def _load_latest(self) -> Optional[PageResult]:
        """Schedule a load like any state change and wait for whichever load ends up last."""
        self._schedule_load()
        await self.wait_idle()
        if self._task is None or self._task.cancelled():
            return None
        return self._task.result()

    async def start(self) -> Optional[PageResult]:
        """Initial load: page 1 of the plain catalog (or whatever state is set)."""
        logger.info("Loading initial Pokemon")
        return await self._load_latest()

    async def refresh(self) -> Optional[PageResult]:
        """Drop every cached response and reload the current state.

        A load already in flight is superseded.
        """
        self.data_service.clear_cache()
        return await self._load_latest()

    async def wait_idle(self) -> None:
        """Wait until no load is in flight, re-raising an unexpected failure of the last one."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        if self._task is not None and not self._task.cancelled():
            error = self._task.exception()
            if error is not None:
                raise error

    def close(self) -> None:
        """Cancel pending work and detach from the controllers."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        for bus, subscription in self._subscriptions:
            bus.unsubscribe(subscription)
        self._subscriptions.clear()
        self.search.destroy()

    # endregion
