"""CSV-based history provider for offline and testing use.

Read daily candle data from a local CSV file instead of a live market-data
API. This is useful for running backtests against a fixed dataset, for
deterministic testing, or when the network is unavailable.
"""

import csv
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from signal_scanner.core.exceptions import DataUnavailableError
from signal_scanner.core.models import Candle, HistoryRange, Interval

_RANGE_DAYS: dict[HistoryRange, int] = {
    HistoryRange.Y1: 365,
    HistoryRange.Y2: 730,
    HistoryRange.Y5: 1826,
}


class CsvHistoryProvider:
    """Load daily candles from a local CSV file.

    Implement the ``HistoryProvider`` protocol by reading rows with columns
    ``symbol``, ``date`` (ISO format), ``open``, ``high``, ``low``,
    ``close``, ``volume``. A single file may hold several symbols. The
    requested range is measured back from the file's latest date for that
    symbol, so fixed datasets stay usable over time.
    """

    def __init__(self, file_path: Path) -> None:
        """Initialize the provider with the path to the CSV file.

        Args:
            file_path: Absolute or relative path to the CSV data file.

        """
        self._file_path = file_path

    async def get_history(
        self,
        code: str,
        history_range: HistoryRange,
        interval: Interval,  # noqa: ARG002
    ) -> list[Candle]:
        """Load candles for ``code`` within ``history_range`` of its latest date.

        Raises:
            DataUnavailableError: If the file holds no rows for ``code``.

        """
        candles: list[Candle] = []
        with self._file_path.open() as f:
            reader = csv.DictReader(f)
            for row in reader:
                if row["symbol"] != code:
                    continue
                candles.append(
                    Candle(
                        symbol=row["symbol"],
                        date=date.fromisoformat(row["date"]),
                        open=Decimal(row["open"]),
                        high=Decimal(row["high"]),
                        low=Decimal(row["low"]),
                        close=Decimal(row["close"]),
                        volume=int(row["volume"]),
                    )
                )
        if not candles:
            raise DataUnavailableError(code, f"No rows in {self._file_path}")

        candles.sort(key=lambda c: c.date)
        cutoff = candles[-1].date - timedelta(days=_RANGE_DAYS[history_range])
        return [c for c in candles if c.date > cutoff]
