"""Text processing utilities."""

from .text_util import format_display_name, name_to_id, normalize_query, stat_key

__all__ = [
    "name_to_id",
    "format_display_name",
    "normalize_query",
    "stat_key",
]
