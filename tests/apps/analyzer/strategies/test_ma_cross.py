"""Tests for the moving average crossover strategy."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from signal_scanner.apps.analyzer.engine import run_backtest
from signal_scanner.apps.analyzer.strategies.ma_cross import MaCrossStrategy
from signal_scanner.core.models import Candle, Prediction, Side, SignalAnalysis

START = date(2024, 1, 1)


def _candle(day: int, close: float) -> Candle:
    c = Decimal(str(close))
    return Candle(
        symbol="2330",
        date=START + timedelta(days=day),
        open=c,
        high=c + 1,
        low=c - 1,
        close=c,
        volume=1000,
    )


def _series(closes: list[float]) -> list[Candle]:
    return [_candle(i, close) for i, close in enumerate(closes)]


class TestMaCrossStrategy:
    """Tests for MaCrossStrategy."""

    def test_name_and_start(self) -> None:
        """Name carries the periods; the engine starts at the long period."""
        strategy = MaCrossStrategy()
        assert strategy.name == "ma_cross_5_20"
        assert strategy.start_index(100) == 20

    def test_invalid_periods(self) -> None:
        """The long period must exceed the short period."""
        with pytest.raises(ValueError, match="long_period"):
            MaCrossStrategy(short_period=20, long_period=5)

    def test_golden_cross_today(self) -> None:
        """A jump that lifts SMA5 over SMA20 is a confirmed BUY."""
        analysis = MaCrossStrategy().analyze(_series([100] * 59 + [200]))
        assert analysis.signal is Side.BUY
        assert analysis.details == "Golden Cross Today"
        assert analysis.suggested_entry == Decimal(200)
        assert analysis.suggested_target == Decimal(201)
        assert analysis.suggested_stop_loss == Decimal(99)

    def test_death_cross_today(self) -> None:
        """A drop that pushes SMA5 under SMA20 is a confirmed SELL."""
        analysis = MaCrossStrategy().analyze(_series([100] * 59 + [50]))
        assert analysis.signal is Side.SELL
        assert analysis.details == "Death Cross Today"

    def test_approaching_golden_cross(self) -> None:
        """A narrowing gap under 2% predicts a Golden Cross."""
        closes: list[float] = [100] * 54 + [99] * 5 + [99.5]
        analysis = MaCrossStrategy().analyze(_series(closes))
        assert analysis.signal is None
        assert analysis.prediction is Prediction.APPROACHING_BUY
        assert analysis.details == "MA Gap: 0.63%"

    def test_flat_prices_report_levels_only(self) -> None:
        """No cross and no gap leaves only the suggested levels."""
        analysis = MaCrossStrategy().analyze(_series([100] * 60))
        assert analysis.signal is None
        assert analysis.prediction is None
        assert analysis.suggested_entry == Decimal(100)

    def test_short_history(self) -> None:
        """Fewer than 60 candles yield an empty analysis."""
        assert MaCrossStrategy().analyze(_series([100] * 58 + [200])) == SignalAnalysis()

    def test_backtest_round_trip(self) -> None:
        """Enter on the Golden Cross and exit on the Death Cross."""
        candles = _series([100] * 30 + [120] * 10 + [90] * 10)
        result = run_backtest(MaCrossStrategy(), candles)
        assert len(result.trades) == 1
        trade = result.trades[0]
        assert trade.entry_date == candles[30].date
        assert trade.entry_price == Decimal(120)
        assert trade.exit_date == candles[41].date
        assert trade.exit_price == Decimal(90)
        assert result.final_capital == Decimal(75_000)
        assert result.total_return == Decimal(-25)
        assert [e.reason for e in result.log] == ["Golden Cross", "Death Cross"]
