"""Tests for backtest performance metrics."""

from datetime import date
from decimal import Decimal

from signal_scanner.apps.analyzer.metrics import (
    avg_trade_return,
    calculate_metrics,
    total_return,
    win_rate,
)
from signal_scanner.core.models import ZERO, Trade

DAY = date(2024, 1, 2)


def _trade(return_pct: int) -> Trade:
    return Trade(
        entry_date=DAY,
        exit_date=DAY,
        entry_price=Decimal(100),
        exit_price=Decimal(100 + return_pct),
        return_pct=Decimal(return_pct),
        profit=Decimal(return_pct * 1000),
    )


TRADES = [_trade(10), _trade(-5), _trade(0)]


class TestMetrics:
    """Tests for the individual statistics."""

    def test_win_rate_counts_strict_gains(self) -> None:
        """A flat trade is not a win."""
        assert win_rate(TRADES) == Decimal(1) / Decimal(3) * Decimal(100)

    def test_avg_trade_return(self) -> None:
        """Average the per-trade percent returns."""
        assert avg_trade_return(TRADES) == Decimal(5) / Decimal(3)

    def test_total_return_uses_capital(self) -> None:
        """Derive the total return from compounded capital."""
        assert total_return(Decimal(100_000), Decimal(82_500)) == Decimal("-17.5")

    def test_zero_capital(self) -> None:
        """Zero initial capital reports no return."""
        assert total_return(ZERO, Decimal(10)) == ZERO

    def test_no_trades(self) -> None:
        """Every statistic is zero without trades."""
        metrics = calculate_metrics([], Decimal(100_000), Decimal(100_000))
        assert metrics == {
            "total_return": ZERO,
            "win_rate": ZERO,
            "avg_trade_return": ZERO,
            "total_trades": ZERO,
        }
