"""
Logging utilities for the catalog browser.

Provides structured logging with:
- Per-module loggers using standard Python logging
- Colored console output
- Optional rotating file handlers
- JSON structured logging support
- Context managers for operation tracking
"""

import asyncio
import json
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Global configuration (with defaults, can be overridden via configure_logging_system)
LOG_DIR: Optional[Path] = None
LOG_LEVEL = "INFO"
LOG_FORMAT_JSON = False
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10MB in bytes
BACKUP_COUNT = 5
CONSOLE_COLORS = True


def configure_logging_system(config):
    """Configure logging system with BrowserConfig settings.

    This should be called early in your application, before creating loggers.
    Loggers created earlier are rebuilt with the new settings.

    Args:
        config: BrowserConfig instance with logging settings
    """
    global LOG_DIR, LOG_LEVEL, LOG_FORMAT_JSON, MAX_LOG_SIZE, BACKUP_COUNT, CONSOLE_COLORS

    LOG_DIR = Path(config.logging_log_dir) if config.logging_log_dir else None
    LOG_LEVEL = config.logging_level.upper()
    LOG_FORMAT_JSON = config.logging_format == "json"
    MAX_LOG_SIZE = config.logging_max_log_size_mb * 1024 * 1024
    BACKUP_COUNT = config.logging_backup_count
    CONSOLE_COLORS = config.logging_console_colors

    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger_obj = logging.getLogger(logger_name)
        if getattr(logger_obj, "_dex_browser_managed", False):
            for handler in list(logger_obj.handlers):
                handler.close()
                logger_obj.removeHandler(handler)
            setup_logger(logger_name)


# Standard fields that are part of every LogRecord instance
# These fields are excluded when adding extra fields to JSON logs
_STANDARD_LOG_RECORD_FIELDS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    ]
)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string.

        Args:
            record (logging.LogRecord): The log record to format.

        Returns:
            str: The formatted log record as a JSON string.
        """
        log_data = {
            "timestamp": datetime.now().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOG_RECORD_FIELDS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored console formatter for better readability."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors for console output.

        Args:
            record (logging.LogRecord): The log record to format.

        Returns:
            str: The formatted log record with colors.
        """
        # Work on a copy so other handlers see the plain level name
        record_copy = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record_copy.levelname, self.RESET)
        record_copy.levelname = f"{log_color}{record_copy.levelname}{self.RESET}"
        return super().format(record_copy)


def _build_console_formatter() -> logging.Formatter:
    if LOG_FORMAT_JSON:
        return JSONFormatter()
    formatter_class = ColoredConsoleFormatter if CONSOLE_COLORS else logging.Formatter
    return formatter_class(fmt="%(levelname)s - %(name)s - %(message)s", datefmt="%H:%M:%S")


def _log_file_for(log_dir: Path, name: str) -> Path:
    """Map a dotted logger name onto a nested log file path inside log_dir."""
    parts = name.split(".")
    if len(parts) > 1:
        subdir = log_dir / Path(*parts[:-1])
        subdir.mkdir(parents=True, exist_ok=True)
        return subdir / f"{parts[-1]}.log"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"{name}.log"


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Set up a logger with a console handler and, when a log directory is set, a file handler.

    Args:
        name (str): Logger name (typically __name__ from calling module)
        level (Optional[str], optional): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to None.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    has_file = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    wants_file = LOG_DIR is not None

    if has_console and (has_file or not wants_file):
        return logger

    log_level = getattr(logging, level or LOG_LEVEL, logging.INFO)
    logger.setLevel(log_level)
    logger._dex_browser_managed = True  # type: ignore[attr-defined]

    if not has_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(_build_console_formatter())
        logger.addHandler(console_handler)

    if LOG_DIR is not None and not has_file:
        file_handler = RotatingFileHandler(
            _log_file_for(LOG_DIR, name),
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        if LOG_FORMAT_JSON:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the specified module.

    Args:
        name (str): The name of the logger (typically __name__ from the calling module).

    Returns:
        logging.Logger: Configured logger instance.
    """
    return setup_logger(name)


class LogContext:
    """Context manager for tracking operations with automatic success/failure logging."""

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        level: int = logging.INFO,
    ):
        """Initialize log context.

        Args:
            logger (logging.Logger): Logger instance to use
            operation (str): Description of the operation
            level (int, optional): Log level for success messages. Defaults to logging.INFO.
        """
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time = None

    def __enter__(self):
        """Enter the context."""
        self.start_time = datetime.now()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit the context and log completion or failure."""
        if self.start_time is not None:
            duration_ms = (datetime.now() - self.start_time).total_seconds() * 1000
        else:
            duration_ms = None

        if exc_type is not None and issubclass(exc_type, asyncio.CancelledError):
            self.logger.log(self.level, f"Cancelled {self.operation}")
        elif exc_type is None:
            self.logger.log(
                self.level,
                f"Completed {self.operation}",
                extra={"duration_ms": duration_ms},
            )
        else:
            self.logger.error(
                f"Failed {self.operation}: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
                extra={"duration_ms": duration_ms},
            )

        # Don't suppress exceptions
        return False
