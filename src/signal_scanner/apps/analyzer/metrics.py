"""Performance metrics for evaluating backtest results.

Provide standalone functions that each compute a single statistic from a
list of ``Trade`` objects. All statistics are expressed as percentages and
return zero when there are no trades.
"""

from decimal import Decimal

from signal_scanner.core.models import HUNDRED, ZERO, Trade


def total_return(initial_capital: Decimal, final_capital: Decimal) -> Decimal:
    """Return the compounded portfolio return in percent (e.g. 25 = +25%)."""
    if initial_capital == ZERO:
        return ZERO
    return (final_capital - initial_capital) / initial_capital * HUNDRED


def win_rate(trades: list[Trade]) -> Decimal:
    """Return the percentage of trades with a positive return (0 to 100)."""
    if not trades:
        return ZERO
    winners = sum(1 for t in trades if t.return_pct > ZERO)
    return Decimal(winners) / Decimal(len(trades)) * HUNDRED


def avg_trade_return(trades: list[Trade]) -> Decimal:
    """Return the mean per-trade return in percent."""
    if not trades:
        return ZERO
    return sum((t.return_pct for t in trades), ZERO) / Decimal(len(trades))


def calculate_metrics(
    trades: list[Trade], initial_capital: Decimal, final_capital: Decimal
) -> dict[str, Decimal]:
    """Calculate all performance metrics and return them as a named dictionary."""
    return {
        "total_return": total_return(initial_capital, final_capital),
        "win_rate": win_rate(trades),
        "avg_trade_return": avg_trade_return(trades),
        "total_trades": Decimal(len(trades)),
    }
