"""Yahoo Finance history and fundamentals providers.

Fetch daily OHLCV history from the v8 chart endpoint and financial ratios
from the v10 quote-summary endpoint. Taiwanese codes can be listed on the
main board (``.TW``) or the OTC market (``.TWO``), so every lookup tries
the primary suffix first and falls back to the secondary one.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import httpx

from signal_scanner.clients.yahoo.client import YahooClient
from signal_scanner.clients.yahoo.exceptions import YahooAPIError
from signal_scanner.core.exceptions import DataUnavailableError
from signal_scanner.core.models import Candle, Fundamentals, HistoryRange, Interval

logger = logging.getLogger(__name__)

PRIMARY_SUFFIX = ".TW"
FALLBACK_SUFFIX = ".TWO"

_FUNDAMENTAL_MODULES = "financialData,summaryDetail"


class YahooHistoryProvider:
    """Fetch daily candles from the Yahoo Finance chart API.

    Implement the ``HistoryProvider`` protocol. Days with a missing close
    (half-filled rows Yahoo emits for suspended sessions) are dropped.
    """

    def __init__(
        self,
        client: YahooClient,
        suffixes: tuple[str, ...] = (PRIMARY_SUFFIX, FALLBACK_SUFFIX),
    ) -> None:
        """Initialize the provider.

        Args:
            client: A ``YahooClient`` instance for making API requests.
            suffixes: Venue suffixes to try, in order.

        """
        self._client = client
        self._suffixes = suffixes

    async def get_history(
        self,
        code: str,
        history_range: HistoryRange,
        interval: Interval,
    ) -> list[Candle]:
        """Fetch daily candles for ``code`` over ``history_range``.

        Args:
            code: Exchange code without suffix (e.g. ``2330``).
            history_range: Lookback range.
            interval: Candle interval.

        Returns:
            Candles ordered ascending by date.

        Raises:
            DataUnavailableError: If no venue returns a usable series.

        """
        params = {"range": history_range.value, "interval": interval.value}
        for suffix in self._suffixes:
            ticker = f"{code}{suffix}"
            result = await self._fetch_chart(ticker, params)
            if result is None:
                logger.debug("No chart data for %s, trying next venue", ticker)
                continue
            candles = self._parse_chart(code, result)
            if candles:
                return candles
        raise DataUnavailableError(code, "No history found")

    async def _fetch_chart(self, ticker: str, params: dict[str, str]) -> dict[str, Any] | None:
        """Return the first chart result for ``ticker``, or ``None`` if not listed there."""
        try:
            data: dict[str, Any] = await self._client.get(
                f"/v8/finance/chart/{ticker}", params=params
            )
        except YahooAPIError as exc:
            logger.debug("Chart request for %s failed: %s", ticker, exc)
            return None
        except httpx.HTTPError as exc:
            raise DataUnavailableError(ticker, f"History request failed: {exc}") from exc
        results: list[dict[str, Any]] | None = (data.get("chart") or {}).get("result")
        if not results:
            return None
        return results[0]

    @staticmethod
    def _parse_chart(code: str, result: dict[str, Any]) -> list[Candle]:
        """Parse a chart result into ``Candle`` objects.

        Yahoo pads halted or partial sessions with nulls; a row missing any
        of open, high, low or close is dropped.
        """
        timestamps: list[int] = result.get("timestamp") or []
        quotes: list[dict[str, list[Any]]] = (result.get("indicators") or {}).get("quote") or []
        if not quotes:
            return []
        quote = quotes[0]
        candles: list[Candle] = []
        for i, ts in enumerate(timestamps):
            ohlc = [_field(quote, name, i) for name in ("open", "high", "low", "close")]
            if any(value is None for value in ohlc):
                logger.debug("Skipping incomplete %s bar at %d", code, ts)
                continue
            volume = _field(quote, "volume", i)
            candles.append(
                Candle(
                    symbol=code,
                    date=datetime.fromtimestamp(ts, tz=UTC).date(),
                    open=Decimal(str(ohlc[0])),
                    high=Decimal(str(ohlc[1])),
                    low=Decimal(str(ohlc[2])),
                    close=Decimal(str(ohlc[3])),
                    volume=int(volume) if volume is not None else 0,
                )
            )
        return candles


def _field(quote: dict[str, list[Any]], name: str, index: int) -> Any:
    """Return ``quote[name][index]``, or ``None`` when the column is short or absent."""
    column = quote.get(name) or []
    return column[index] if index < len(column) else None


def _raw(section: dict[str, Any], key: str) -> Decimal | None:
    """Extract the ``raw`` number from a quote-summary field, if present."""
    field: Any = section.get(key)
    if not isinstance(field, dict):
        return None
    raw: Any = field.get("raw")  # pyright: ignore[reportUnknownMemberType]
    if raw is None:
        return None
    return Decimal(str(raw))


class YahooFundamentalsProvider:
    """Fetch financial ratios from the Yahoo Finance quote-summary API.

    Implement the ``FundamentalsProvider`` protocol. Return ``None``
    rather than raising when no venue has the data, because fundamentals
    only refine a score that is meaningful without them.
    """

    def __init__(
        self,
        client: YahooClient,
        suffixes: tuple[str, ...] = (PRIMARY_SUFFIX, FALLBACK_SUFFIX),
    ) -> None:
        """Initialize the provider.

        Args:
            client: A ``YahooClient`` instance for making API requests.
            suffixes: Venue suffixes to try, in order.

        """
        self._client = client
        self._suffixes = suffixes

    async def get_fundamentals(self, code: str) -> Fundamentals | None:
        """Return the ratios for ``code``, or ``None`` when unavailable."""
        for suffix in self._suffixes:
            ticker = f"{code}{suffix}"
            try:
                data: dict[str, Any] = await self._client.get(
                    f"/v10/finance/quoteSummary/{ticker}",
                    params={"modules": _FUNDAMENTAL_MODULES},
                )
            except (YahooAPIError, httpx.HTTPError) as exc:
                logger.debug("Quote summary for %s failed: %s", ticker, exc)
                continue
            results: list[dict[str, Any]] | None = (data.get("quoteSummary") or {}).get("result")
            if not results:
                continue
            financial: dict[str, Any] = results[0].get("financialData") or {}
            summary: dict[str, Any] = results[0].get("summaryDetail") or {}
            return Fundamentals(
                roe=_raw(financial, "returnOnEquity"),
                profit_margin=_raw(financial, "profitMargins"),
                revenue_growth=_raw(financial, "revenueGrowth"),
                earnings_growth=_raw(financial, "earningsGrowth"),
                pe_trailing=_raw(summary, "trailingPE"),
            )
        return None
