"""Headless controllers for search, filters, pagination and their orchestration."""

from .filter_controller import FilterController, FilterEvents
from .orchestrator import BrowserOrchestrator, RenderEvents
from .pagination_controller import (
    ELLIPSIS,
    PaginationController,
    PaginationEvents,
    build_page_window,
)
from .search_controller import AsyncioScheduler, SearchController, SearchEvents

__all__ = [
    "AsyncioScheduler",
    "BrowserOrchestrator",
    "ELLIPSIS",
    "FilterController",
    "FilterEvents",
    "PaginationController",
    "PaginationEvents",
    "RenderEvents",
    "SearchController",
    "SearchEvents",
    "build_page_window",
]
