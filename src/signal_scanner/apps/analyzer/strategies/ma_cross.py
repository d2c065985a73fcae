"""Moving average crossover strategy (Golden Cross / Death Cross).

How it works:
    Two simple moving averages of the closing price are tracked: a short
    one (5 days) that reacts quickly and a long one (20 days) that moves
    slowly.

    - BUY when the short average crosses above the long one (a "Golden
      Cross"): recent prices have started to outrun the longer trend.
    - SELL when the short average crosses back below (a "Death Cross").

    When no cross happened today the classifier looks for a cross that is
    about to happen: the short average is still below the long one, the
    gap is under 2% of the long average, and the gap is narrower than it
    was yesterday.

Params:
    short_period: Fast SMA period (default 5).
    long_period: Slow SMA period (default 20).
"""

from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from signal_scanner.apps.analyzer.indicators import Series, sma
from signal_scanner.apps.analyzer.strategies.base import (
    crossed_above,
    crossed_below,
    has_enough_history,
    recent_high,
    recent_low,
)
from signal_scanner.core.models import HUNDRED, Candle, Prediction, Side, SignalAnalysis

_APPROACH_GAP = Decimal("0.02")


class MaCrossStrategy:
    """Buy on a Golden Cross of SMA(short) over SMA(long), sell on a Death Cross."""

    def __init__(self, short_period: int = 5, long_period: int = 20) -> None:
        """Initialize the crossover strategy."""
        if short_period < 1:
            msg = f"short_period must be >= 1, got {short_period}"
            raise ValueError(msg)
        if long_period <= short_period:
            msg = f"long_period ({long_period}) must be greater than short_period ({short_period})"
            raise ValueError(msg)
        self._short_period = short_period
        self._long_period = long_period
        self._short: Series = []
        self._long: Series = []

    @property
    def name(self) -> str:
        """Return the strategy name including parameters."""
        return f"ma_cross_{self._short_period}_{self._long_period}"

    def prepare(self, candles: Sequence[Candle]) -> None:
        """Compute both moving averages over the full sequence."""
        self._short = sma(candles, self._short_period)
        self._long = sma(candles, self._long_period)

    def start_index(self, count: int) -> int:  # noqa: ARG002
        """Start once the long average has a defined previous value."""
        return self._long_period

    def entry_reason(self, i: int) -> str | None:
        """Return ``"Golden Cross"`` when the short SMA crosses above the long SMA."""
        if crossed_above(self._short[i - 1], self._long[i - 1], self._short[i], self._long[i]):
            return "Golden Cross"
        return None

    def exit_reason(self, i: int) -> str | None:
        """Return ``"Death Cross"`` when the short SMA crosses below the long SMA."""
        if crossed_below(self._short[i - 1], self._long[i - 1], self._short[i], self._long[i]):
            return "Death Cross"
        return None

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:
        """Classify the latest candle and suggest entry, target, and stop levels."""
        if not has_enough_history(candles):
            return SignalAnalysis()

        short = sma(candles, self._short_period)
        long = sma(candles, self._long_period)
        prev_short, prev_long = short[-2], long[-2]
        curr_short, curr_long = short[-1], long[-1]
        levels = SignalAnalysis(
            suggested_entry=candles[-1].close,
            suggested_target=recent_high(candles),
            suggested_stop_loss=recent_low(candles),
        )

        if crossed_above(prev_short, prev_long, curr_short, curr_long):
            return replace(levels, signal=Side.BUY, details="Golden Cross Today")
        if crossed_below(prev_short, prev_long, curr_short, curr_long):
            return replace(levels, signal=Side.SELL, details="Death Cross Today")

        if (
            curr_short is not None
            and curr_long is not None
            and prev_short is not None
            and prev_long is not None
            and curr_short < curr_long
        ):
            gap = (curr_long - curr_short) / curr_long
            prev_gap = (prev_long - prev_short) / prev_long
            if gap < _APPROACH_GAP and gap < prev_gap:
                return replace(
                    levels,
                    prediction=Prediction.APPROACHING_BUY,
                    details=f"MA Gap: {gap * HUNDRED:.2f}%",
                )
        return levels
