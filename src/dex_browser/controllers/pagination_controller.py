"""
Page position state and page-button window generation.
"""

from typing import Optional

from dex_browser.utils.core.events import EventBus
from dex_browser.utils.data.models import PageChange, total_pages_for

ELLIPSIS = "..."


class PaginationEvents:
    """Topics published by PaginationController."""

    PAGE_CHANGED = "pagination:pageChanged"


def build_page_window(current_page: int, total_pages: int, max_visible: int = 5) -> list[int | str]:
    """Build the list of page buttons to show.

    At most `max_visible` contiguous pages around the current page are listed.
    The first and last pages are always present; ELLIPSIS marks skipped pages.

    Args:
        current_page (int): The active page
        total_pages (int): Total number of pages (>= 1)
        max_visible (int, optional): Width of the contiguous window. Defaults to 5.

    Returns:
        list[int | str]: Page numbers and ELLIPSIS markers, in display order

    Examples:
        >>> build_page_window(10, 20)
        [1, '...', 8, 9, 10, 11, 12, '...', 20]
    """
    if total_pages < 1:
        return []

    start = max(1, current_page - max_visible // 2)
    end = min(total_pages, start + max_visible - 1)
    # Near the end, slide the window back so it stays full
    start = max(1, end - max_visible + 1)

    window: list[int | str] = []
    if start > 1:
        window.append(1)
        if start > 2:
            window.append(ELLIPSIS)

    window.extend(range(start, end + 1))

    if end < total_pages:
        if end < total_pages - 1:
            window.append(ELLIPSIS)
        window.append(total_pages)

    return window


class PaginationController:
    """Headless pager over {current_page, total_pages, page_size}."""

    def __init__(
        self,
        bus: Optional[EventBus] = None,
        page_size: int = 50,
        max_visible_pages: int = 5,
    ):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.events = bus if bus is not None else EventBus()
        self.max_visible_pages = max_visible_pages
        self._page_size = page_size
        self._current_page = 1
        self._total_pages = 1
        self._total_items = 0

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def total_items(self) -> int:
        return self._total_items

    @property
    def current_offset(self) -> int:
        return (self._current_page - 1) * self._page_size

    def set_total_items(self, total_items: int) -> None:
        """Recompute the page count, clamping the current page down if needed."""
        self._total_items = max(0, total_items)
        self._total_pages = total_pages_for(self._total_items, self._page_size)
        if self._current_page > self._total_pages:
            self._current_page = self._total_pages

    def go_to_page(self, page: int) -> None:
        """Move to a page and publish PAGE_CHANGED; out-of-range or same page is a no-op."""
        if page < 1 or page > self._total_pages or page == self._current_page:
            return

        self._current_page = page
        self.events.publish(
            PaginationEvents.PAGE_CHANGED,
            PageChange(page=page, offset=self.current_offset, limit=self._page_size),
        )

    def next_page(self) -> None:
        if self._current_page < self._total_pages:
            self.go_to_page(self._current_page + 1)

    def previous_page(self) -> None:
        if self._current_page > 1:
            self.go_to_page(self._current_page - 1)

    def reset(self) -> None:
        self._current_page = 1
        self._total_items = 0
        self._total_pages = 1

    def set_page_size(self, page_size: int) -> None:
        """Change the page size; returns to page 1. Non-positive sizes are ignored."""
        if page_size <= 0 or page_size == self._page_size:
            return
        self._page_size = page_size
        self._total_pages = total_pages_for(self._total_items, page_size)
        self._current_page = 1

    def current_range(self) -> tuple[int, int]:
        """1-based (first, last) item numbers shown on the current page."""
        start = self.current_offset + 1
        end = min(self._current_page * self._page_size, self._total_items)
        return start, end

    def results_summary(self) -> str:
        if self._total_items == 0:
            return "No Pokemon found"
        start, end = self.current_range()
        return f"Showing {start}-{end} of {self._total_items} Pokemon"

    def page_window(self) -> list[int | str]:
        return build_page_window(self._current_page, self._total_pages, self.max_visible_pages)
