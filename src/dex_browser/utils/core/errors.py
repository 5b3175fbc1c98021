"""
Error taxonomy for remote catalog access.

Every failure raised by the transport or the data service is a
DataServiceError, so callers that only care about "the call failed" can catch
the base class while batch operations can downgrade individual failures.
"""

from typing import Optional


class DataServiceError(Exception):
    """Base class for all catalog access failures."""

    def __init__(self, message: str, resource: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.resource = resource


class NotFoundError(DataServiceError):
    """The remote service has no record for the requested id or name."""


class TransportError(DataServiceError):
    """Network failure or a non-success HTTP status other than 404."""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, resource)
        self.status_code = status_code


class DecodeError(DataServiceError):
    """The payload could not be parsed or mapped onto the domain model."""
