"""
Debounced search input.

Raw keystrokes are collapsed into a committed query once input has been quiet
for the debounce delay. Explicit submits commit immediately.
"""

import asyncio
from typing import Callable, Optional, Protocol

from dex_browser.utils.core.events import EventBus
from dex_browser.utils.core.logger import get_logger
from dex_browser.utils.data.models import SearchQuery

logger = get_logger(__name__)


class SearchEvents:
    """Topics published by SearchController."""

    INPUT = "search:input"
    START = "search:start"
    QUERY = "search:query"
    CLEAR = "search:clear"


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback after a delay and returns a cancellable handle."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class AsyncioScheduler:
    """Scheduler backed by the running event loop's call_later."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class SearchController:
    """Headless search box: debounces input and publishes committed queries."""

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        debounce_ms: int = 300,
        scheduler: Optional[Scheduler] = None,
    ):
        """Initialize the controller.

        Args:
            bus (Optional[EventBus], optional): Bus to publish on. Defaults to a private bus.
            debounce_ms (int, optional): Quiet period before a typed query commits. Defaults to 300.
            scheduler (Optional[Scheduler], optional): Timer source. Defaults to the asyncio loop.
        """
        self.events = bus if bus is not None else EventBus()
        self._scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._debounce_ms = max(0, debounce_ms)
        self._pending: Optional[ScheduledTask] = None
        self._last_query = ""

    @property
    def query(self) -> str:
        """The last committed query."""
        return self._last_query

    @property
    def debounce_ms(self) -> int:
        return self._debounce_ms

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def set_debounce_delay(self, delay_ms: int) -> None:
        self._debounce_ms = max(0, delay_ms)

    def on_input(self, raw: str) -> None:
        """Handle a change of the raw input value.

        Args:
            raw (str): Current contents of the search box
        """
        self._cancel_pending()
        query = raw.strip()
        if query == self._last_query:
            return

        self.events.publish(SearchEvents.INPUT, SearchQuery(query))
        self._pending = self._scheduler.call_later(
            self._debounce_ms / 1000, lambda: self._commit(query)
        )

    def submit(self, raw: str) -> None:
        """Commit a query immediately, bypassing the debounce (e.g. Enter key)."""
        self._commit(raw.strip(), immediate=True)

    def set_query(self, raw: str) -> None:
        """Programmatically replace the query and commit it immediately."""
        self.submit(raw)

    def clear(self) -> None:
        self._commit("", immediate=True)

    def destroy(self) -> None:
        """Cancel any pending debounce so it cannot fire after teardown."""
        self._cancel_pending()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _commit(self, query: str, immediate: bool = False) -> None:
        self._cancel_pending()
        self._last_query = query
        self.events.publish(SearchEvents.START, SearchQuery(query, immediate))
        if not query:
            logger.debug("Search cleared")
            self.events.publish(SearchEvents.CLEAR)
            return
        logger.debug(f"Search committed: '{query}' (immediate={immediate})")
        self.events.publish(SearchEvents.QUERY, SearchQuery(query, immediate))
