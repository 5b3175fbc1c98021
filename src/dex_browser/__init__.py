"""Dex Browser - Headless, cache-backed browser for a remote Pokemon catalog."""

from .config import BrowserConfig
from .controllers import (
    BrowserOrchestrator,
    FilterController,
    PaginationController,
    RenderEvents,
    SearchController,
)
from .utils.services import PokemonDataService

__version__ = "1.0.0"
__all__ = [
    "BrowserConfig",
    "BrowserOrchestrator",
    "FilterController",
    "PaginationController",
    "PokemonDataService",
    "RenderEvents",
    "SearchController",
]
