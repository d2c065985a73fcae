"""Backtest engine that replays a strategy over a candle sequence.

Prepare the strategy's indicator series once, walk the candles from the
strategy's start index, and route entry and exit decisions through a
``Portfolio``. Return a ``BacktestResult`` containing the trades, the
action log, and summary statistics.
"""

from collections.abc import Sequence
from decimal import Decimal

from signal_scanner.apps.analyzer.metrics import calculate_metrics
from signal_scanner.apps.analyzer.portfolio import DEFAULT_INITIAL_CAPITAL, Portfolio
from signal_scanner.core.models import BacktestResult, Candle
from signal_scanner.core.protocols import Strategy


class BacktestEngine:
    """Run a long-only strategy against a fixed candle sequence.

    At most one position is open at a time. While flat only the entry
    rule is consulted; while holding only the exit rule is. Positions left
    open at the end are not force-closed.
    """

    def __init__(
        self,
        strategy: Strategy,
        initial_capital: Decimal = DEFAULT_INITIAL_CAPITAL,
    ) -> None:
        """Initialize the backtest engine.

        Args:
            strategy: Strategy providing the entry and exit rules.
            initial_capital: Notional starting capital.

        """
        self._strategy = strategy
        self._initial_capital = initial_capital

    def run(self, candles: Sequence[Candle]) -> BacktestResult:
        """Execute the backtest and return results.

        Args:
            candles: Daily candles ordered ascending by date.

        Returns:
            A ``BacktestResult`` with trades, log, and statistics.

        """
        symbol = candles[0].symbol if candles else ""
        portfolio = Portfolio(self._initial_capital)
        if candles:
            self._strategy.prepare(candles)
            for i in range(self._strategy.start_index(len(candles)), len(candles)):
                self._step(i, candles[i], portfolio)

        trades = portfolio.trades
        metrics = calculate_metrics(trades, self._initial_capital, portfolio.capital)
        return BacktestResult(
            strategy_name=self._strategy.name,
            symbol=symbol,
            initial_capital=self._initial_capital,
            final_capital=portfolio.capital,
            trades=tuple(trades),
            log=tuple(portfolio.log),
            win_rate=metrics["win_rate"],
            total_return=metrics["total_return"],
            avg_trade_return=metrics["avg_trade_return"],
        )

    def _step(self, i: int, candle: Candle, portfolio: Portfolio) -> None:
        """Evaluate the rule that applies to the current position state."""
        if portfolio.position is None:
            reason = self._strategy.entry_reason(i)
            if reason is not None:
                portfolio.buy(candle.date, candle.close, reason)
            return
        reason = self._strategy.exit_reason(i)
        if reason is not None:
            portfolio.sell(candle.date, candle.close, reason)


def run_backtest(
    strategy: Strategy,
    candles: Sequence[Candle],
    initial_capital: Decimal = DEFAULT_INITIAL_CAPITAL,
) -> BacktestResult:
    """Run ``strategy`` over ``candles`` and return the result."""
    return BacktestEngine(strategy, initial_capital).run(candles)
