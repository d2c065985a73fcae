"""Tests for the long-horizon breakout strategy."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from signal_scanner.apps.analyzer.engine import run_backtest
from signal_scanner.apps.analyzer.strategies.breakout import BreakoutStrategy
from signal_scanner.core.models import Candle, Prediction, Side

START = date(2023, 1, 2)


def _candle(day: int, close: int) -> Candle:
    c = Decimal(close)
    return Candle(
        symbol="2454",
        date=START + timedelta(days=day),
        open=c,
        high=c + 1,
        low=c - 1,
        close=c,
        volume=1000,
    )


def _series(closes: list[int]) -> list[Candle]:
    return [_candle(i, close) for i, close in enumerate(closes)]


class TestBreakoutStrategy:
    """Tests for BreakoutStrategy."""

    def test_name(self) -> None:
        """Name carries the lookback and exit period."""
        assert BreakoutStrategy().name == "breakout_500_20"

    @pytest.mark.parametrize(("count", "expected"), [(600, 250), (100, 90), (5, 1)])
    def test_start_index(self, count: int, expected: int) -> None:
        """Start at bar 250, or 10 bars before the end, but never before bar 1."""
        assert BreakoutStrategy().start_index(count) == expected

    def test_new_high_today(self) -> None:
        """A close above the trailing high is a confirmed BUY."""
        analysis = BreakoutStrategy().analyze(_series([100] * 59 + [110]))
        assert analysis.signal is Side.BUY
        assert analysis.details == "New High! > 101"
        assert analysis.suggested_entry == Decimal(101)
        assert analysis.suggested_target == Decimal("121.20")
        assert analysis.suggested_stop_loss == Decimal("93.93")

    def test_near_high(self) -> None:
        """A close within 3% under the level predicts a breakout."""
        analysis = BreakoutStrategy().analyze(_series([100] * 59 + [99]))
        assert analysis.signal is None
        assert analysis.prediction is Prediction.APPROACHING_BUY
        assert analysis.details == "Near High (-2.0%)"

    def test_far_below_high(self) -> None:
        """A close far under the level reports levels only."""
        analysis = BreakoutStrategy().analyze(_series([100] * 59 + [80]))
        assert analysis.signal is None
        assert analysis.prediction is None
        assert analysis.suggested_entry == Decimal(101)

    def test_backtest_exits_below_average(self) -> None:
        """Enter on the breakout and exit when the close drops under SMA20."""
        result = run_backtest(BreakoutStrategy(), _series([100] * 20 + [110] * 5 + [90]))
        assert [e.reason for e in result.log] == ["Breakout High 101", "Below MA20"]
        assert len(result.trades) == 1
        assert result.trades[0].entry_price == Decimal(110)
        assert result.trades[0].exit_price == Decimal(90)
