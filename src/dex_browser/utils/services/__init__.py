"""Services for catalog data access."""

from .data_service import PokemonDataService, normalize_identifier

__all__ = ["PokemonDataService", "normalize_identifier"]
