"""TWSE quote provider.

Fetch current quote snapshots from the TWSE market information service.
Each request queries the listed (``tse_``) and OTC (``otc_``) channels
together and uses the first record returned.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from signal_scanner.clients.twse.client import TwseClient
from signal_scanner.clients.twse.exceptions import TwseAPIError
from signal_scanner.core.exceptions import DataUnavailableError
from signal_scanner.core.models import ZERO, Quote

logger = logging.getLogger(__name__)


def _to_decimal(raw: Any) -> Decimal | None:
    """Parse a MIS price field, returning ``None`` for placeholders like ``-``."""
    if raw is None:
        return None
    try:
        value = Decimal(str(raw))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _to_int(raw: Any) -> int:
    """Parse a MIS volume field, treating anything unparseable as zero."""
    try:
        return int(str(raw))
    except ValueError:
        return 0


class TwseQuoteProvider:
    """Fetch quote snapshots from the TWSE MIS ``getStockInfo`` endpoint.

    Implement the ``QuoteProvider`` protocol. Before the first trade of the
    session the last-trade field ``z`` is ``-``; the prior close ``y`` is
    used as the price in that case.
    """

    def __init__(self, client: TwseClient) -> None:
        """Initialize the provider with a TWSE HTTP client.

        Args:
            client: A ``TwseClient`` instance for making API requests.

        """
        self._client = client

    async def get_quote(self, code: str) -> Quote:
        """Return the latest quote for ``code``.

        Raises:
            DataUnavailableError: If neither venue knows the code or the request fails.

        """
        channels = [f"tse_{code}.tw", f"otc_{code}.tw"]
        try:
            records = await self._client.get_stock_info(channels)
        except (TwseAPIError, httpx.HTTPError) as exc:
            raise DataUnavailableError(code, f"Quote request failed: {exc}") from exc
        if not records:
            raise DataUnavailableError(code, "Unknown stock code")

        record = records[0]
        prior_close = _to_decimal(record.get("y"))
        price = _to_decimal(record.get("z"))
        if price is None:
            logger.debug("No trade yet for %s, using prior close", code)
            price = prior_close if prior_close is not None else ZERO

        return Quote(
            code=str(record.get("c", code)),
            name=str(record.get("n", "")),
            price=price,
            prior_close=prior_close if prior_close is not None else ZERO,
            volume=_to_int(record.get("v")),
        )
