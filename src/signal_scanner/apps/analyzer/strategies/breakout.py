"""Long-horizon high breakout strategy.

How it works:
    Find the highest high of roughly the last two years (500 trading days,
    not counting today). When today closes above it the stock has made a
    new multi-year high, which often marks the start of a sustained move.

    - BUY when the close breaks above the trailing high.
    - SELL when the close falls back below its 20-day average. This is a
      trend-reversal exit rather than a fixed stop.

    The backtest starts scanning at bar 250 (or 10 bars before the end for
    short histories) so the trailing high rests on real history. The
    classifier suggests entering at the breakout level itself, targets
    +20% and places the stop 7% below it; within 3% below the level it
    reports an approaching buy.

Params:
    lookback: Trailing window for the breakout high (default 500).
    exit_period: SMA period used for the exit (default 20).
"""

from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from signal_scanner.apps.analyzer.indicators import Series, highest_high, sma
from signal_scanner.apps.analyzer.strategies.base import has_enough_history
from signal_scanner.core.models import HUNDRED, Candle, Prediction, Side, SignalAnalysis

_WARMUP_BARS = 250
_WARMUP_TAIL = 10
_TARGET_MULTIPLIER = Decimal("1.20")
_STOP_MULTIPLIER = Decimal("0.93")
_APPROACH_DISTANCE = Decimal("0.03")


class BreakoutStrategy:
    """Buy on a close above the trailing high, sell on a close below SMA(exit_period)."""

    def __init__(self, lookback: int = 500, exit_period: int = 20) -> None:
        """Initialize the breakout strategy."""
        if lookback < 1:
            msg = f"lookback must be >= 1, got {lookback}"
            raise ValueError(msg)
        if exit_period < 1:
            msg = f"exit_period must be >= 1, got {exit_period}"
            raise ValueError(msg)
        self._lookback = lookback
        self._exit_period = exit_period
        self._candles: Sequence[Candle] = ()
        self._exit_sma: Series = []

    @property
    def name(self) -> str:
        """Return the strategy name including parameters."""
        return f"breakout_{self._lookback}_{self._exit_period}"

    def prepare(self, candles: Sequence[Candle]) -> None:
        """Keep the candles for window lookups and compute the exit average."""
        self._candles = candles
        self._exit_sma = sma(candles, self._exit_period)

    def start_index(self, count: int) -> int:
        """Start late enough that the trailing high has history behind it."""
        return max(1, min(_WARMUP_BARS, count - _WARMUP_TAIL))

    def _breakout_level(self, i: int) -> Decimal | None:
        """Return the highest high over the lookback window ending before ``i``."""
        return highest_high(self._candles, i - self._lookback, i)

    def entry_reason(self, i: int) -> str | None:
        """Return a reason when the close breaks above the trailing high."""
        level = self._breakout_level(i)
        if level is not None and self._candles[i].close > level:
            return f"Breakout High {level}"
        return None

    def exit_reason(self, i: int) -> str | None:
        """Return a reason when the close falls below the exit average."""
        average = self._exit_sma[i]
        if average is not None and self._candles[i].close < average:
            return f"Below MA{self._exit_period}"
        return None

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:
        """Classify the latest candle against the trailing high."""
        if not has_enough_history(candles):
            return SignalAnalysis()

        last = len(candles) - 1
        level = highest_high(candles, last - self._lookback, last)
        if level is None:
            return SignalAnalysis()

        today = candles[-1]
        levels = SignalAnalysis(
            suggested_entry=level,
            suggested_target=level * _TARGET_MULTIPLIER,
            suggested_stop_loss=level * _STOP_MULTIPLIER,
        )

        if today.close > level and candles[-2].close <= level:
            return replace(levels, signal=Side.BUY, details=f"New High! > {level}")
        if today.close <= level:
            distance = (level - today.close) / level
            if distance < _APPROACH_DISTANCE:
                return replace(
                    levels,
                    prediction=Prediction.APPROACHING_BUY,
                    details=f"Near High (-{distance * HUNDRED:.1f}%)",
                )
        return levels
