"""Core infrastructure utilities."""

from .cache import ResponseCache, entity_key, list_key
from .errors import DataServiceError, DecodeError, NotFoundError, TransportError
from .events import EventBus, Subscription
from .logger import LogContext, configure_logging_system, get_logger
from .transport import HttpTransport, Transport

__all__ = [
    "get_logger",
    "configure_logging_system",
    "LogContext",
    "EventBus",
    "Subscription",
    "ResponseCache",
    "entity_key",
    "list_key",
    "DataServiceError",
    "NotFoundError",
    "TransportError",
    "DecodeError",
    "HttpTransport",
    "Transport",
]
