"""Portfolio state tracking for backtesting.

Manage notional capital, the single open position, the completed trades,
and the BUY/SELL narration log during a backtest run. The ``Portfolio``
enforces a one-position-at-a-time rule: a buy opens a position only when
flat and a sell closes it only when holding. Every close reinvests the
full capital, booking ``round(capital * return)`` in whole units.
"""

from datetime import date
from decimal import ROUND_FLOOR, Decimal

from signal_scanner.core.models import (
    HUNDRED,
    LogEntry,
    Position,
    Side,
    Trade,
)

DEFAULT_INITIAL_CAPITAL = Decimal(100_000)
_HALF = Decimal("0.5")


def round_half_up(value: Decimal) -> Decimal:
    """Round to the nearest whole unit, sending exact halves toward +infinity.

    ``-2.5`` rounds to ``-2`` and ``2.5`` to ``3``, unlike Python's
    ``round`` which rounds halves to even.
    """
    return (value + _HALF).to_integral_value(rounding=ROUND_FLOOR)


class Portfolio:
    """Track capital, the open position, trades, and the action log.

    BUY requests are ignored while a position is open and SELL requests
    are ignored while flat. A position still open when the run ends is
    simply left open: it never produces a trade.
    """

    def __init__(self, initial_capital: Decimal = DEFAULT_INITIAL_CAPITAL) -> None:
        """Initialize the portfolio with the given starting capital.

        Args:
            initial_capital: Notional starting capital.

        """
        self._initial_capital = initial_capital
        self._capital = initial_capital
        self._position: Position | None = None
        self._trades: list[Trade] = []
        self._log: list[LogEntry] = []

    @property
    def initial_capital(self) -> Decimal:
        """Return the starting capital."""
        return self._initial_capital

    @property
    def capital(self) -> Decimal:
        """Return the current compounded capital."""
        return self._capital

    @property
    def position(self) -> Position | None:
        """Return the current open position, if any."""
        return self._position

    @property
    def trades(self) -> list[Trade]:
        """Return a copy of completed trades."""
        return list(self._trades)

    @property
    def log(self) -> list[LogEntry]:
        """Return a copy of the action log."""
        return list(self._log)

    def buy(self, on: date, price: Decimal, reason: str) -> bool:
        """Open a position at ``price`` unless one is already open.

        Args:
            on: Date of the entry candle.
            price: Entry price (the candle's close).
            reason: Narration recorded in the log.

        Returns:
            ``True`` if a position was opened.

        """
        if self._position is not None:
            return False
        self._position = Position(entry_date=on, entry_price=price)
        self._log.append(LogEntry(side=Side.BUY, date=on, price=price, reason=reason))
        return True

    def sell(self, on: date, price: Decimal, reason: str) -> Trade | None:
        """Close the open position at ``price`` and compound the capital.

        Args:
            on: Date of the exit candle.
            price: Exit price (the candle's close).
            reason: Narration recorded in the log.

        Returns:
            The completed ``Trade``, or ``None`` when no position was open.

        """
        if self._position is None:
            return None
        fraction = self._position.return_fraction(price)
        profit = round_half_up(self._capital * fraction)
        self._capital += profit

        trade = self._position.close(exit_date=on, exit_price=price, profit=profit)
        self._trades.append(trade)
        self._log.append(
            LogEntry(
                side=Side.SELL,
                date=on,
                price=price,
                reason=reason,
                pnl_pct=fraction * HUNDRED,
            )
        )
        self._position = None
        return trade
