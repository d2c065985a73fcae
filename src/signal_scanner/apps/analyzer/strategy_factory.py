"""Strategy registry and factory for the analyzer.

Map every ``StrategyId`` to its display label, style, and a builder that
creates a fresh strategy instance. The backtest engine, signal classifier,
scanner, and CLI all dispatch through this registry instead of branching
on strategy names.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from signal_scanner.apps.analyzer.engine import run_backtest
from signal_scanner.apps.analyzer.portfolio import DEFAULT_INITIAL_CAPITAL
from signal_scanner.apps.analyzer.strategies.bollinger import BollingerStrategy
from signal_scanner.apps.analyzer.strategies.breakout import BreakoutStrategy
from signal_scanner.apps.analyzer.strategies.ma_cross import MaCrossStrategy
from signal_scanner.apps.analyzer.strategies.macd import MacdStrategy
from signal_scanner.apps.analyzer.strategies.rsi import RsiStrategy
from signal_scanner.apps.analyzer.strategies.supertrend import SupertrendStrategy
from signal_scanner.core.models import (
    TWO,
    BacktestResult,
    Candle,
    SignalAnalysis,
    StrategyId,
    StrategyStyle,
)
from signal_scanner.core.protocols import Strategy


@dataclass(frozen=True)
class StrategyParams:
    """Tunable parameters for every strategy, defaulting to the standard settings."""

    short_period: int = 5
    long_period: int = 20
    rsi_period: int = 14
    oversold: int = 30
    overbought: int = 70
    breakout_lookback: int = 500
    breakout_exit_period: int = 20
    bollinger_period: int = 20
    num_std: Decimal = TWO
    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9
    supertrend_period: int = 10
    supertrend_multiplier: Decimal = Decimal(3)


@dataclass(frozen=True)
class StrategyEntry:
    """Registry entry describing one strategy."""

    strategy_id: StrategyId
    label: str
    style: StrategyStyle
    build: Callable[[StrategyParams], Strategy]


STRATEGIES: dict[StrategyId, StrategyEntry] = {
    StrategyId.MA: StrategyEntry(
        StrategyId.MA,
        "Golden Cross",
        StrategyStyle.REVERSAL,
        lambda p: MaCrossStrategy(p.short_period, p.long_period),
    ),
    StrategyId.RSI: StrategyEntry(
        StrategyId.RSI,
        "RSI Reversal",
        StrategyStyle.REVERSAL,
        lambda p: RsiStrategy(p.rsi_period, p.oversold, p.overbought),
    ),
    StrategyId.BREAKOUT: StrategyEntry(
        StrategyId.BREAKOUT,
        "New High Breakout",
        StrategyStyle.TREND,
        lambda p: BreakoutStrategy(p.breakout_lookback, p.breakout_exit_period),
    ),
    StrategyId.BOLLINGER: StrategyEntry(
        StrategyId.BOLLINGER,
        "Bollinger Bands",
        StrategyStyle.REVERSAL,
        lambda p: BollingerStrategy(p.bollinger_period, p.num_std),
    ),
    StrategyId.MACD: StrategyEntry(
        StrategyId.MACD,
        "MACD Trend",
        StrategyStyle.TREND,
        lambda p: MacdStrategy(p.fast_period, p.slow_period, p.signal_period),
    ),
    StrategyId.SUPERTREND: StrategyEntry(
        StrategyId.SUPERTREND,
        "Supertrend",
        StrategyStyle.TREND,
        lambda p: SupertrendStrategy(p.supertrend_period, p.supertrend_multiplier),
    ),
}

STRATEGY_NAMES = tuple(s.value for s in StrategyId)


def build_strategy(strategy_id: StrategyId, params: StrategyParams | None = None) -> Strategy:
    """Build a fresh strategy instance for ``strategy_id``.

    Args:
        strategy_id: Which strategy to build.
        params: Optional parameter overrides; defaults apply otherwise.

    Returns:
        A configured ``Strategy`` instance.

    """
    return STRATEGIES[strategy_id].build(params or StrategyParams())


def backtest_strategy(
    strategy_id: StrategyId,
    candles: Sequence[Candle],
    params: StrategyParams | None = None,
    initial_capital: Decimal = DEFAULT_INITIAL_CAPITAL,
) -> BacktestResult:
    """Run the backtest for ``strategy_id`` over ``candles``."""
    return run_backtest(build_strategy(strategy_id, params), candles, initial_capital)


def analyze_signal(
    strategy_id: StrategyId,
    candles: Sequence[Candle],
    params: StrategyParams | None = None,
) -> SignalAnalysis:
    """Classify the latest candle under ``strategy_id``."""
    return build_strategy(strategy_id, params).analyze(candles)
