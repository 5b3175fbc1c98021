"""
Configuration for the catalog browser.

This module provides the BrowserConfig dataclass. Every component (data
service, controllers, orchestrator) accepts values taken from a BrowserConfig
instance, so one object describes a whole browser session.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class BrowserConfig:
    """
    Configuration for one browser session.

    Example:
        config = BrowserConfig(page_size=24, debounce_ms=250)
        config = BrowserConfig.from_yaml(Path("browser.yaml"))
    """

    # ============================================================================
    # Remote Service Configuration
    # ============================================================================

    api_base_url: str = "https://pokeapi.co/api/v2"
    request_timeout: float = 30.0
    user_agent: Optional[str] = None

    # Number of rows requested when materializing the name index
    name_index_limit: int = 2000

    # Optional cap on the catalog size reported by the service
    catalog_limit: Optional[int] = None

    # Entities shown by the start-up load
    initial_count: int = 50

    # ============================================================================
    # Presentation State Configuration
    # ============================================================================

    page_size: int = 50
    debounce_ms: int = 300
    max_visible_pages: int = 5

    # ============================================================================
    # Logging Configuration
    # ============================================================================

    logging_level: str = "INFO"
    logging_format: str = "text"
    logging_log_dir: str = ""  # Empty disables file logging
    logging_max_log_size_mb: int = 10
    logging_backup_count: int = 5
    logging_console_colors: bool = True

    def __post_init__(self):
        """Normalize and validate configuration values.

        Raises:
            ValueError: If configuration validation fails
            TypeError: If configuration types are incorrect
        """
        self.api_base_url = self.api_base_url.rstrip("/")
        self._validate_configuration()

    def _validate_configuration(self) -> None:
        """Validate configuration values and ranges.

        Raises:
            ValueError: If configuration values are invalid
            TypeError: If configuration types are incorrect
        """
        if not self.api_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"api_base_url must start with http:// or https://, got '{self.api_base_url}'"
            )

        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")

        for name in ("page_size", "max_visible_pages", "name_index_limit", "initial_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an int, got {type(value).__name__}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be non-negative, got {self.debounce_ms}")

        if self.catalog_limit is not None and self.catalog_limit < 0:
            raise ValueError(f"catalog_limit must be non-negative, got {self.catalog_limit}")

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level.upper() not in valid_log_levels:
            raise ValueError(
                f"logging_level must be one of {valid_log_levels}, got '{self.logging_level}'"
            )

        valid_log_formats = ["text", "json"]
        if self.logging_format not in valid_log_formats:
            raise ValueError(
                f"logging_format must be one of {valid_log_formats}, got '{self.logging_format}'"
            )

        if self.logging_max_log_size_mb <= 0:
            raise ValueError(
                f"logging_max_log_size_mb must be positive, got {self.logging_max_log_size_mb}"
            )

        if self.logging_backup_count < 0:
            raise ValueError(
                f"logging_backup_count must be non-negative, got {self.logging_backup_count}"
            )

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BrowserConfig":
        """Build a config from a mapping, rejecting unknown keys.

        Raises:
            ValueError: If the mapping contains keys that are not config fields
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> "BrowserConfig":
        """Load a config from a YAML file containing a single mapping.

        Raises:
            TypeError: If the document is not a mapping
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise TypeError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
        return cls.from_dict(data)
