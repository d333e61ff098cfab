"""Pocket API transport for pocketsync."""

from __future__ import annotations

import logging
from typing import Any

import httpx

# Pocket API endpoints (relative to the configured api_endpoint)
REQUEST_CODE_ENDPOINT = "/oauth/request"
REQUEST_TOKEN_ENDPOINT = "/oauth/authorize"
LINKS_ENDPOINT = "/get"

logger = logging.getLogger(__name__)


class PocketAPIError(Exception):
    """Base exception for Pocket API errors."""

    pass


class TransportError(PocketAPIError):
    """Network, connection or HTTP-level failure."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(PocketAPIError):
    """Response body does not have the expected shape."""

    pass


class PocketClient:
    """Client for the Pocket REST API.

    Owns one httpx.Client for the whole run so every call shares the same
    connection pool. Use as a context manager, or call close() when done.
    """

    def __init__(
        self,
        api_endpoint: str,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the Pocket client.

        Args:
            api_endpoint: API base URL, e.g. https://getpocket.com/v3
            timeout: Request timeout in seconds (None waits indefinitely)
            http_client: Pre-built httpx client. Not closed by this object.
        """
        self.api_endpoint = api_endpoint.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self) -> PocketClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self._client.close()

    def _get_headers(self) -> dict[str, str]:
        """Get HTTP headers for API requests."""
        return {
            "Content-Type": "application/json; charset=UTF-8",
            "X-Accept": "application/json",
        }

    def post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON payload to an API endpoint.

        Args:
            endpoint: API endpoint (without base URL)
            payload: JSON body

        Returns:
            Decoded JSON object

        Raises:
            TransportError: If the request fails or returns an HTTP error
            DecodeError: If the body is not a JSON object
        """
        url = f"{self.api_endpoint}{endpoint}"
        logger.debug("POST %s", url)

        try:
            response = self._client.post(url, headers=self._get_headers(), json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.status_code >= 400:
            # Pocket puts the human-readable reason in X-Error
            reason = response.headers.get("X-Error") or response.text.strip()
            raise TransportError(
                f"API error {response.status_code} from {endpoint}: {reason}",
                response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {endpoint} is not valid JSON") from e

        if not isinstance(data, dict):
            raise DecodeError(f"Response from {endpoint} is not a JSON object")

        return data

    def get_status(self, url: str) -> int:
        """GET an absolute URL, following redirects, and return the status code.

        Raises:
            TransportError: If the request fails before a response arrives
        """
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url, follow_redirects=True)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e
        return response.status_code


def require_str(data: dict[str, Any], key: str, endpoint: str) -> str:
    """Extract a required string field from a response object.

    Raises:
        DecodeError: If the key is missing or not a string
    """
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise DecodeError(f"Response from {endpoint} has no '{key}'")
    return value
