"""Tests for the Yahoo Finance history and fundamentals providers."""

from datetime import date
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from signal_scanner.clients.yahoo.exceptions import YahooAPIError
from signal_scanner.core.exceptions import DataUnavailableError
from signal_scanner.core.models import Fundamentals, HistoryRange, Interval
from signal_scanner.data.providers.yahoo import (
    YahooFundamentalsProvider,
    YahooHistoryProvider,
    _raw,
)

# 2024-01-02 and 2024-01-03 at 01:00 UTC, the Taipei session open
TS_DAY_1 = 1_704_157_200
TS_DAY_2 = 1_704_243_600
TS_DAY_3 = 1_704_330_000


def _chart(closes: list[float | None], volumes: list[int | None] | None = None) -> dict[str, Any]:
    """Create a chart response in the v8 envelope."""
    count = len(closes)
    return {
        "chart": {
            "result": [
                {
                    "timestamp": [TS_DAY_1, TS_DAY_2, TS_DAY_3][:count],
                    "indicators": {
                        "quote": [
                            {
                                "open": [590.0] * count,
                                "high": [595.0] * count,
                                "low": [588.0] * count,
                                "close": closes,
                                "volume": volumes or [25_000_000] * count,
                            }
                        ]
                    },
                }
            ],
            "error": None,
        }
    }


def _mock_client(*responses: object) -> AsyncMock:
    """Create a mock client answering successive GETs in order."""
    client = AsyncMock()
    client.get = AsyncMock(side_effect=list(responses))
    return client


class TestYahooHistoryProvider:
    """Tests for YahooHistoryProvider."""

    @pytest.mark.asyncio
    async def test_parses_chart(self) -> None:
        """Convert each row to a Decimal candle dated in UTC."""
        client = _mock_client(_chart([593.0, 600.5]))
        provider = YahooHistoryProvider(client)

        candles = await provider.get_history("2330", HistoryRange.Y2, Interval.D1)

        assert [c.date for c in candles] == [date(2024, 1, 2), date(2024, 1, 3)]
        assert candles[0].symbol == "2330"
        assert candles[0].close == Decimal("593.0")
        assert candles[1].close == Decimal("600.5")
        assert candles[0].volume == 25_000_000
        client.get.assert_awaited_once_with(
            "/v8/finance/chart/2330.TW", params={"range": "2y", "interval": "1d"}
        )

    @pytest.mark.asyncio
    async def test_skips_missing_close(self) -> None:
        """Drop half-filled rows and default a missing volume to zero."""
        client = _mock_client(_chart([593.0, None, 601.0], [100, None, None]))
        candles = await YahooHistoryProvider(client).get_history(
            "2330", HistoryRange.Y1, Interval.D1
        )
        assert [c.close for c in candles] == [Decimal("593.0"), Decimal("601.0")]
        assert candles[1].volume == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["open", "high", "low"])
    async def test_skips_rows_with_any_null_price(self, field: str) -> None:
        """A null open, high or low drops the row instead of failing to parse."""
        payload = _chart([593.0, 600.5])
        payload["chart"]["result"][0]["indicators"]["quote"][0][field] = [None, 590.0]
        client = _mock_client(payload)

        candles = await YahooHistoryProvider(client).get_history(
            "2330", HistoryRange.Y1, Interval.D1
        )

        assert [c.close for c in candles] == [Decimal("600.5")]
        assert candles[0].date == date(2024, 1, 3)

    @pytest.mark.asyncio
    async def test_falls_back_to_otc(self) -> None:
        """Try the OTC suffix when the main board does not list the code."""
        client = _mock_client(YahooAPIError(404, "No data found"), _chart([120.0]))
        candles = await YahooHistoryProvider(client).get_history(
            "6488", HistoryRange.Y2, Interval.D1
        )
        assert len(candles) == 1
        assert client.get.await_args_list[1].args == ("/v8/finance/chart/6488.TWO",)

    @pytest.mark.asyncio
    async def test_empty_result_falls_back(self) -> None:
        """An empty result list counts as not listed."""
        client = _mock_client({"chart": {"result": None}}, _chart([120.0]))
        candles = await YahooHistoryProvider(client).get_history(
            "6488", HistoryRange.Y2, Interval.D1
        )
        assert len(candles) == 1

    @pytest.mark.asyncio
    async def test_unknown_code(self) -> None:
        """Raise when no venue has the code."""
        client = _mock_client(YahooAPIError(404, "x"), YahooAPIError(404, "x"))
        with pytest.raises(DataUnavailableError, match="9999: No history found"):
            await YahooHistoryProvider(client).get_history("9999", HistoryRange.Y2, Interval.D1)

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        """A network failure is not retried on the next venue."""
        client = _mock_client(httpx.ConnectError("boom"))
        with pytest.raises(DataUnavailableError, match="History request failed"):
            await YahooHistoryProvider(client).get_history("2330", HistoryRange.Y2, Interval.D1)
        assert client.get.await_count == 1


class TestRaw:
    """Tests for quote-summary field extraction."""

    def test_raw_value(self) -> None:
        """Read the raw number from a formatted field."""
        assert _raw({"returnOnEquity": {"raw": 0.25, "fmt": "25%"}}, "returnOnEquity") == Decimal(
            "0.25"
        )

    def test_missing(self) -> None:
        """Missing, empty or non-dict fields are None."""
        assert _raw({}, "x") is None
        assert _raw({"x": {}}, "x") is None
        assert _raw({"x": 1}, "x") is None


class TestYahooFundamentalsProvider:
    """Tests for YahooFundamentalsProvider."""

    @pytest.mark.asyncio
    async def test_maps_ratios(self) -> None:
        """Map financialData and summaryDetail fields to Fundamentals."""
        payload = {
            "quoteSummary": {
                "result": [
                    {
                        "financialData": {
                            "returnOnEquity": {"raw": 0.3},
                            "profitMargins": {"raw": 0.4},
                            "revenueGrowth": {"raw": 0.35},
                            "earningsGrowth": {"raw": 0.5},
                        },
                        "summaryDetail": {"trailingPE": {"raw": 21.5}},
                    }
                ]
            }
        }
        client = _mock_client(payload)
        result = await YahooFundamentalsProvider(client).get_fundamentals("2330")
        assert result == Fundamentals(
            roe=Decimal("0.3"),
            profit_margin=Decimal("0.4"),
            revenue_growth=Decimal("0.35"),
            earnings_growth=Decimal("0.5"),
            pe_trailing=Decimal("21.5"),
        )
        client.get.assert_awaited_once_with(
            "/v10/finance/quoteSummary/2330.TW",
            params={"modules": "financialData,summaryDetail"},
        )

    @pytest.mark.asyncio
    async def test_falls_back_then_gives_up(self) -> None:
        """Return None after every venue fails."""
        client = _mock_client(YahooAPIError(404, "x"), httpx.ReadTimeout("slow"))
        assert await YahooFundamentalsProvider(client).get_fundamentals("9999") is None
        assert client.get.await_count == 2
