"""Tests for the MACD crossover strategy."""

from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest

from signal_scanner.apps.analyzer.engine import run_backtest
from signal_scanner.apps.analyzer.indicators import MacdSeries
from signal_scanner.apps.analyzer.strategies.macd import MacdStrategy
from signal_scanner.core.models import Candle, Prediction, Side

START = date(2024, 1, 1)


def _candle(day: int, close: int) -> Candle:
    c = Decimal(close)
    return Candle(
        symbol="2308",
        date=START + timedelta(days=day),
        open=c,
        high=c + 1,
        low=c - 1,
        close=c,
        volume=1000,
    )


def _series(closes: list[int]) -> list[Candle]:
    return [_candle(i, close) for i, close in enumerate(closes)]


class TestMacdStrategy:
    """Tests for MacdStrategy."""

    def test_name_and_start(self) -> None:
        """Name carries the periods; the engine starts at the slow period."""
        strategy = MacdStrategy()
        assert strategy.name == "macd_12_26_9"
        assert strategy.start_index(100) == 26

    def test_invalid_periods(self) -> None:
        """The slow period must exceed the fast period."""
        with pytest.raises(ValueError, match="slow_period"):
            MacdStrategy(fast_period=26, slow_period=12)

    def test_golden_cross_today(self) -> None:
        """A jump off a flat base crosses MACD above its signal line."""
        analysis = MacdStrategy().analyze(_series([100] * 59 + [110]))
        assert analysis.signal is Side.BUY
        assert analysis.details == "MACD Golden Cross Today"
        assert analysis.suggested_entry == Decimal(110)

    def test_death_cross_today(self) -> None:
        """A drop off a flat base crosses MACD below its signal line."""
        analysis = MacdStrategy().analyze(_series([100] * 59 + [90]))
        assert analysis.signal is Side.SELL
        assert analysis.details == "MACD Death Cross Today"

    def test_narrowing_gap_predicts_cross(self) -> None:
        """MACD under its signal by less than 0.05 and closing in is a prediction."""
        series = MacdSeries(
            macd=[Decimal("-0.05"), Decimal("-0.03")],
            signal=[Decimal(0), Decimal("-0.01")],
        )
        with patch("signal_scanner.apps.analyzer.strategies.macd.macd", return_value=series):
            analysis = MacdStrategy().analyze(_series([100] * 60))
        assert analysis.signal is None
        assert analysis.prediction is Prediction.APPROACHING_BUY
        assert analysis.details == "MACD Gap: 0.020"

    def test_backtest_enters_on_cross(self) -> None:
        """The engine enters on the crossover bar."""
        candles = _series([100] * 30 + [110] * 5 + [90] * 5)
        result = run_backtest(MacdStrategy(), candles)
        assert result.log[0].side is Side.BUY
        assert result.log[0].date == candles[30].date
        assert result.log[0].reason == "MACD(12,26) crossed above signal(9)"
