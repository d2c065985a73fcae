"""Async client for Yahoo Finance's unauthenticated JSON endpoints.

Two endpoints are used: ``/v8/finance/chart/{symbol}`` for daily bars and
``/v10/finance/quoteSummary/{symbol}`` for valuation data. Symbols carry the
exchange suffix (``2330.TW`` for TWSE, ``6488.TWO`` for TPEx).
"""

from typing import Any

import httpx

from signal_scanner.clients.yahoo.exceptions import YahooAPIError
from signal_scanner.core.config import get_config

_HTTP_BAD_REQUEST = 400
_DEFAULT_TIMEOUT = 30.0


def _failure_message(response: httpx.Response) -> str:
    """Pull Yahoo's error description out of an error body.

    Yahoo nests the error under the endpoint name, e.g.
    ``{"chart": {"result": null, "error": {"description": "..."}}}``.
    Bodies that are not JSON, or carry no description, yield ``HTTP <status>``.
    """
    fallback = f"HTTP {response.status_code}"
    try:
        body: Any = response.json()
    except ValueError:
        return fallback
    if not isinstance(body, dict):
        return fallback
    for envelope in body.values():  # pyright: ignore[reportUnknownVariableType]
        if not isinstance(envelope, dict):
            continue
        error: Any = envelope.get("error") or {}  # pyright: ignore[reportUnknownMemberType]
        if isinstance(error, dict) and error.get("description"):  # pyright: ignore[reportUnknownMemberType]
            return str(error["description"])  # pyright: ignore[reportUnknownArgumentType]
    return fallback


class YahooClient:
    """Thin wrapper around ``httpx.AsyncClient`` bound to the Yahoo query host."""

    BASE_URL = "https://query1.finance.yahoo.com"

    def __init__(self, base_url: str = BASE_URL, timeout: float = _DEFAULT_TIMEOUT) -> None:
        """Open a pooled HTTP session.

        Args:
            base_url: Query host; a trailing slash is dropped.
            timeout: Per-request timeout in seconds.

        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls) -> "YahooClient":
        """Build a client from ``yahoo.base_url`` and ``yahoo.timeout``."""
        config = get_config()
        return cls(
            base_url=str(config.get("yahoo.base_url", cls.BASE_URL)),
            timeout=float(config.get("yahoo.timeout", _DEFAULT_TIMEOUT)),
        )

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Fetch ``path`` under the query host and decode the JSON body.

        Raises:
            YahooAPIError: The host answered with a 4xx or 5xx status.

        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        response = await self._http_client.request("GET", url, params=params)
        if response.status_code >= _HTTP_BAD_REQUEST:
            raise YahooAPIError(status=response.status_code, msg=_failure_message(response))
        return response.json()

    async def close(self) -> None:
        """Release pooled connections."""
        await self._http_client.aclose()

    async def __aenter__(self) -> "YahooClient":
        """Return the open client."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the client on exit."""
        await self.close()
