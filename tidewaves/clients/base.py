"""Base class for API clients."""

# Standard library imports
import abc
import asyncio
import json
import logging
import urllib.parse
from typing import Any, Mapping, Optional

# Third-party imports
import aiohttp

# Local imports
from tidewaves.errors import (
    DecodingError,
    ProviderError,
    TransportError,
)

# Longest slice of an error response body kept for diagnostics
MAX_ERROR_BODY = 500


class BaseApiClient(abc.ABC):
    """Abstract base class for API clients.

    Subclasses issue their requests through request_with_retry(), which calls
    _execute_request() and retries it only when it fails with a TransportError.
    Provider-reported errors and undecodable responses are never retried.
    """

    _session: aiohttp.ClientSession

    @property
    @abc.abstractmethod
    def client_type(self) -> str:
        """Return the string identifier for the client type (e.g., 'coops', 'nominatim')."""
        raise NotImplementedError

    def __init__(
        self,
        session: aiohttp.ClientSession,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        """Initialize the base client with an aiohttp session.

        Args:
            session: The aiohttp client session to use for requests.
            max_retries: Total attempts for a request failing at transport level.
            retry_delay: Base delay in seconds, multiplied by the attempt number.
        """
        self._session = session
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def log(
        self,
        message: str,
        level: int = logging.INFO,
        tag: Optional[str] = None,
    ) -> None:
        """Log a message, automatically prepending client type and optional request tag."""
        client_tag = self.client_type
        if tag:
            prefix = f"[{tag}][{client_tag}]"
        else:
            prefix = f"[{client_tag}]"
        logging.log(level, f"{prefix} {message}")

    async def request_with_retry(
        self,
        url: str,
        params: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        tag: Optional[str] = None,
    ) -> Any:
        """Execute a request, retrying transport failures with linear back-off.

        Returns:
            The decoded JSON payload

        Raises:
            TransportError: If every attempt failed to reach the provider
            ProviderError: If the provider answered with a non-success status
            DecodingError: If the response body is not valid JSON
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._execute_request(url, params, headers, tag)
            except TransportError as e:
                if attempt >= self.max_retries:
                    self.log(
                        f"Giving up after {attempt} attempts: {e}",
                        level=logging.ERROR,
                        tag=tag,
                    )
                    raise
                self.log(
                    f"Attempt {attempt} failed, retrying: {e}",
                    level=logging.WARNING,
                    tag=tag,
                )
                await asyncio.sleep(self.retry_delay * attempt)

    async def _execute_request(
        self,
        url: str,
        params: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
        tag: Optional[str] = None,
    ) -> Any:
        """Issue a single GET request and decode the JSON body.

        Raises:
            TransportError: On connection failures and timeouts
            ProviderError: If the response status is not 200
            DecodingError: If the response body is not valid JSON
        """
        self.log(f"GET {url}?{urllib.parse.urlencode(params)}", tag=tag)
        try:
            async with self._session.get(
                url, params=dict(params), headers=dict(headers or {})
            ) as response:
                body = await response.text()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(
                f"Failed to connect to {self.client_type}: {e.__class__.__name__}: {e}"
            ) from e

        if status != 200:
            error_msg = f"HTTP error {status}: {body[:MAX_ERROR_BODY]}"
            self.log(error_msg, level=logging.ERROR, tag=tag)
            raise ProviderError(error_msg)

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            self.log(
                f"Response is not valid JSON: {e}", level=logging.ERROR, tag=tag
            )
            raise DecodingError(f"Invalid JSON from {self.client_type}: {e}") from e
