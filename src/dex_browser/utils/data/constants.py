"""
Shared constants for Pokemon catalog data and presentation.

This module centralizes the domain constants used by the models, the data
service and the controllers so the values are defined once.
"""

# ============================================================================
# Display Name Special Cases
# ============================================================================
POKEMON_DISPLAY_CASES: dict[str, str] = {
    "mr mime": "Mr. Mime",
    "mime jr": "Mime Jr.",
    "mr rime": "Mr. Rime",
    "farfetchd": "Farfetch'd",
    "sirfetchd": "Sirfetch'd",
    "nidoran m": "Nidoran♂",
    "nidoran f": "Nidoran♀",
    "ho oh": "Ho-Oh",
    "porygon z": "Porygon-Z",
    "type null": "Type: Null",
}

STAT_DISPLAY_CASES: dict[str, str] = {
    "hp": "HP",
}

# ============================================================================
# Type-Related Constants
# ============================================================================

POKEMON_TYPES: tuple[str, ...] = (
    "normal",
    "fire",
    "water",
    "electric",
    "grass",
    "ice",
    "fighting",
    "poison",
    "ground",
    "flying",
    "psychic",
    "bug",
    "rock",
    "ghost",
    "dragon",
    "dark",
    "steel",
    "fairy",
)

DEFAULT_TYPE = "normal"

TYPE_COLORS: dict[str, str] = {
    "normal": "#A8A878",
    "fire": "#F08030",
    "water": "#6890F0",
    "electric": "#F8D030",
    "grass": "#78C850",
    "ice": "#98D8D8",
    "fighting": "#C03028",
    "poison": "#A040A0",
    "ground": "#E0C068",
    "flying": "#A890F0",
    "psychic": "#F85888",
    "bug": "#A8B820",
    "rock": "#B8A038",
    "ghost": "#705898",
    "dragon": "#7038F8",
    "dark": "#705848",
    "steel": "#B8B8D0",
    "fairy": "#EE99AC",
}

# ============================================================================
# Stat Constants
# ============================================================================

MIN_STAT_VALUE = 0
MAX_STAT_VALUE = 255

# Base stat that maps to a full stat bar
STAT_BAR_CEILING = 200

# Stats exposed as range filters
FILTERABLE_STATS: tuple[str, ...] = ("hp", "attack")

# ============================================================================
# Generation Ranges (inclusive national dex ids)
# ============================================================================

GENERATION_RANGES: dict[int, tuple[int, int]] = {
    1: (1, 151),
    2: (152, 251),
    3: (252, 386),
    4: (387, 493),
    5: (494, 649),
    6: (650, 721),
    7: (722, 809),
    8: (810, 905),
    9: (906, 1025),
}

# ============================================================================
# Images
# ============================================================================

PLACEHOLDER_IMAGE_URL = "/placeholder-pokemon.png"
