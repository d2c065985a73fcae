"""HTTP client for the TWSE market information (MIS) quote service."""

import time
from typing import Any

import httpx

from signal_scanner.clients.twse.exceptions import TwseAPIError
from signal_scanner.core.config import get_config

_HTTP_BAD_REQUEST = 400
_MS_PER_SECOND = 1000


class TwseClient:
    """HTTP client for the TWSE MIS ``getStockInfo.jsp`` endpoint.

    A single request can query several exchange channels at once, which
    is how listed (``tse_``) and over-the-counter (``otc_``) codes are
    resolved together.
    """

    BASE_URL = "https://mis.twse.com.tw/stock"

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the TWSE client.

        Args:
            base_url: Base URL for the MIS service.
            timeout: Request timeout in seconds.

        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls) -> "TwseClient":
        """Create a client from the ``twse`` configuration section.

        Returns:
            Configured TwseClient instance.

        """
        config = get_config()
        return cls(
            base_url=str(config.get("twse.base_url", cls.BASE_URL)),
            timeout=float(config.get("twse.timeout", 30.0)),
        )

    async def get_stock_info(self, channels: list[str]) -> list[dict[str, Any]]:
        """Return the raw quote records for the given exchange channels.

        Args:
            channels: Channel identifiers such as ``tse_2330.tw``.

        Returns:
            The ``msgArray`` records, possibly empty.

        Raises:
            TwseAPIError: When the service returns an error response.

        """
        params = {
            "ex_ch": "|".join(channels),
            "json": 1,
            "delay": 0,
            "_": int(time.time() * _MS_PER_SECOND),
        }
        response = await self._http_client.request(
            "GET", f"{self.base_url}/api/getStockInfo.jsp", params=params
        )
        if response.status_code >= _HTTP_BAD_REQUEST:
            raise TwseAPIError(status=response.status_code, msg=f"HTTP {response.status_code}")

        data: dict[str, Any] = response.json()
        records: list[dict[str, Any]] = data.get("msgArray") or []
        return records

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http_client.aclose()

    async def __aenter__(self) -> "TwseClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()
