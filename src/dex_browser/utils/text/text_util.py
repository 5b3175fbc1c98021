"""
Text utility functions for name formatting and identifier normalization.
"""

import re
import string

from dex_browser.utils.data.constants import POKEMON_DISPLAY_CASES, STAT_DISPLAY_CASES


def name_to_id(name: str) -> str:
    """Convert a name to the remote service's identifier format.

    Args:
        name (str): The name to convert.

    Returns:
        str: A standardized ID string (lowercase, kebab-case, alphanumeric only).
    """
    id_str = name.replace("é", "e")
    id_str = re.sub(r"[^a-z0-9\s-]", "", id_str.lower())
    id_str = re.sub(r"\s+", "-", id_str)
    id_str = id_str.strip("-")
    return id_str


def normalize_query(query: str) -> str:
    """Lowercase and trim a free-text search query."""
    return query.strip().lower()


def format_display_name(name: str, special_cases: dict[str, str] = {}) -> str:
    """Format a name for display with proper capitalization and special case handling.

    Args:
        name (str): The name to format (e.g. "special-attack", "mr-mime").
        special_cases (dict[str, str], optional): Mapping of lowercase names to their special-cased versions. Defaults to {}.

    Returns:
        str: The formatted display name.
    """
    formatted_name = name.replace("-", " ").replace("_", " ")

    special_cases = special_cases | POKEMON_DISPLAY_CASES | STAT_DISPLAY_CASES

    lower_name = formatted_name.lower()
    if lower_name in special_cases:
        return special_cases[lower_name]

    return string.capwords(formatted_name)


def stat_key(stat_name: str) -> str:
    """Convert a remote stat name ("special-attack") to its mapping key ("special_attack")."""
    return stat_name.replace("-", "_")
