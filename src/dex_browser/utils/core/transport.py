"""
HTTP transport for the remote catalog service.

The blocking requests call runs in a worker thread so the event loop stays
responsive while a fetch is outstanding. Responses are mapped onto the error
taxonomy in errors.py.
"""

import asyncio
from typing import Any, Optional, Protocol

import orjson
import requests

from dex_browser.utils.core.errors import DecodeError, NotFoundError, TransportError
from dex_browser.utils.core.logger import get_logger

logger = get_logger(__name__)


class Transport(Protocol):
    """Anything that can GET a URL and return the decoded JSON body."""

    async def get_json(self, url: str) -> Any: ...


class HttpTransport:
    """requests-backed transport returning orjson-decoded bodies."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the transport.

        Args:
            timeout (float, optional): Per-request timeout in seconds. Defaults to 30.0.
            user_agent (Optional[str], optional): User-Agent header. Defaults to the package name and version.
            session (Optional[requests.Session], optional): Session to reuse. Defaults to a new session.
        """
        if user_agent is None:
            # Import version to keep User-Agent in sync with package version
            from dex_browser import __version__

            user_agent = f"dex-browser/{__version__}"

        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    async def get_json(self, url: str) -> Any:
        """Fetch a URL without blocking the event loop.

        Args:
            url (str): Absolute URL to fetch

        Raises:
            NotFoundError: If the service responds with 404
            TransportError: On network failure or any other non-success status
            DecodeError: If the body is not valid JSON

        Returns:
            Any: The decoded JSON body
        """
        return await asyncio.to_thread(self._get_json, url)

    def _get_json(self, url: str) -> Any:
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timeout after {self.timeout} seconds fetching {url}")
            raise TransportError(f"Request timed out: {url}", url) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Network error fetching {url}: {e}")
            raise TransportError(f"Network error: {e}", url) from e

        if response.status_code == 404:
            raise NotFoundError(f"Not found: {url}", url)
        if not response.ok:
            raise TransportError(
                f"HTTP error! status: {response.status_code}", url, response.status_code
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise DecodeError(f"Invalid JSON from {url}: {e}", url) from e

    def close(self) -> None:
        self.session.close()
