"""Core data models shared across the signal scanner.

Define the immutable value objects (Candle, Trade, LogEntry, BacktestResult,
SignalAnalysis, Quote, Fundamentals) and the mutable ``Position`` that flow
between the data providers, indicator library, backtest engine, signal
classifier, and scanner.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

ZERO = Decimal(0)
ONE = Decimal(1)
TWO = Decimal(2)
HUNDRED = Decimal(100)


class Side(Enum):
    """Direction of a signal or log entry: BUY (open long) or SELL (close long)."""

    BUY = "BUY"
    SELL = "SELL"


class Prediction(Enum):
    """Graduated "approaching" state reported when no confirmed signal fired."""

    APPROACHING_BUY = "APPROACHING_BUY"
    APPROACHING_SELL = "APPROACHING_SELL"


class StrategyId(Enum):
    """Identifiers of the six rule-based strategies."""

    MA = "MA"
    RSI = "RSI"
    BREAKOUT = "BREAKOUT"
    BOLLINGER = "BOLLINGER"
    MACD = "MACD"
    SUPERTREND = "SUPERTREND"


class StrategyStyle(Enum):
    """Broad family a strategy belongs to, used when presenting daily picks."""

    REVERSAL = "reversal"
    TREND = "trend"


class HistoryRange(Enum):
    """Supported lookback ranges for daily history requests."""

    Y1 = "1y"
    Y2 = "2y"
    Y5 = "5y"


class Interval(Enum):
    """Candle interval. Only daily candles are analysed."""

    D1 = "1d"


class ScanScope(Enum):
    """Universe selection for market scans."""

    POPULAR = "popular"
    ALL = "all"


@dataclass(frozen=True)
class Instrument:
    """A listed instrument identified by its exchange code."""

    code: str
    name: str


@dataclass(frozen=True)
class Candle:
    """Immutable daily OHLCV candle.

    Prices are ``Decimal`` for exact arithmetic; volume is a whole number
    of shares. Sequences of candles are ordered ascending by ``date``.
    """

    symbol: str
    date: date
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int


@dataclass(frozen=True)
class Trade:
    """Immutable record of a completed round-trip trade.

    ``return_pct`` is the percentage price change from entry to exit and
    ``profit`` the whole-unit capital gain (or loss) booked when the trade
    was closed under full reinvestment.
    """

    entry_date: date
    exit_date: date
    entry_price: Decimal
    exit_price: Decimal
    return_pct: Decimal
    profit: Decimal


@dataclass(frozen=True)
class LogEntry:
    """Append-only narration of a BUY or SELL action during a backtest."""

    side: Side
    date: date
    price: Decimal
    reason: str
    pnl_pct: Decimal | None = None


@dataclass
class Position:
    """Mutable open long position awaiting an exit.

    Call ``close()`` with the exit date, price and booked profit to produce
    an immutable ``Trade`` record.
    """

    entry_date: date
    entry_price: Decimal

    def return_fraction(self, exit_price: Decimal) -> Decimal:
        """Return the fractional price change from entry to ``exit_price``."""
        return (exit_price - self.entry_price) / self.entry_price

    def close(self, exit_date: date, exit_price: Decimal, profit: Decimal) -> Trade:
        """Close this position and return the resulting ``Trade``.

        Args:
            exit_date: Date of the exit candle.
            exit_price: Closing price at which the position is exited.
            profit: Whole-unit capital change booked for this trade.

        Returns:
            An immutable ``Trade`` recording the round-trip.

        """
        return Trade(
            entry_date=self.entry_date,
            exit_date=exit_date,
            entry_price=self.entry_price,
            exit_price=exit_price,
            return_pct=self.return_fraction(exit_price) * HUNDRED,
            profit=profit,
        )


@dataclass(frozen=True)
class BacktestResult:
    """Immutable summary of a completed backtest run.

    ``win_rate``, ``total_return`` and ``avg_trade_return`` are percentages.
    ``total_return`` is derived from the compounded final capital, not from
    the sum of the individual trade returns.
    """

    strategy_name: str
    symbol: str
    initial_capital: Decimal
    final_capital: Decimal
    trades: tuple[Trade, ...] = ()
    log: tuple[LogEntry, ...] = ()
    win_rate: Decimal = ZERO
    total_return: Decimal = ZERO
    avg_trade_return: Decimal = ZERO


@dataclass(frozen=True)
class SignalAnalysis:
    """As-of-today classification of a single instrument under one strategy.

    ``signal`` is set when the entry/exit rule fired between the last two
    candles; otherwise ``prediction`` may report that a signal is near.
    The suggested levels are advisory prices for display and ranking.
    """

    signal: Side | None = None
    prediction: Prediction | None = None
    details: str = ""
    suggested_entry: Decimal | None = None
    suggested_target: Decimal | None = None
    suggested_stop_loss: Decimal | None = None


@dataclass(frozen=True)
class Quote:
    """Current quote snapshot for an instrument."""

    code: str
    name: str
    price: Decimal
    prior_close: Decimal
    volume: int

    @property
    def change(self) -> Decimal:
        """Return the absolute change against the prior close."""
        return self.price - self.prior_close

    @property
    def change_pct(self) -> Decimal:
        """Return the percentage change against the prior close."""
        if self.prior_close == ZERO:
            return ZERO
        return self.change / self.prior_close * HUNDRED


@dataclass(frozen=True)
class Fundamentals:
    """Scalar financial ratios for an instrument, as decimal fractions.

    Any ratio the provider does not report is ``None``.
    """

    roe: Decimal | None = None
    profit_margin: Decimal | None = None
    revenue_growth: Decimal | None = None
    earnings_growth: Decimal | None = None
    pe_trailing: Decimal | None = None


@dataclass(frozen=True)
class FundamentalScore:
    """Outcome of the fundamentals scoring table."""

    score: int
    reasons: tuple[str, ...] = ()


def _empty_reasons() -> list[str]:
    """Create an empty reasons list."""
    return []


@dataclass(frozen=True)
class HealthReport:
    """Heuristic health check for holding or entering a single instrument."""

    score: int
    trend: str
    stop_loss: Decimal
    stop_loss_reason: str
    take_profit: Decimal
    take_profit_reason: str
    reasons: list[str] = field(default_factory=_empty_reasons)
    sma5: Decimal = ZERO
    sma20: Decimal = ZERO
    sma60: Decimal = ZERO
    atr: Decimal = ZERO
    rsi: Decimal = ZERO
    support: Decimal = ZERO
    resistance: Decimal = ZERO
    fundamental: FundamentalScore | None = None


@dataclass(frozen=True)
class ScreenResult:
    """One instrument's row in a single-strategy screen."""

    instrument: Instrument
    win_rate: Decimal
    total_return: Decimal
    trade_count: int
    signal: Side | None
    prediction: Prediction | None
    details: str


@dataclass(frozen=True)
class DailyPick:
    """A confirmed BUY candidate ranked by its historical edge."""

    instrument: Instrument
    strategy: StrategyId
    style: StrategyStyle
    details: str
    entry: Decimal | None
    target: Decimal | None
    stop_loss: Decimal | None
    win_rate: Decimal
    expected_return: Decimal
    score: Decimal
