"""Supertrend trend-following strategy.

How it works:
    Supertrend draws a line a few ATRs away from the candle midpoint. In
    an uptrend the line sits below the price and only ever ratchets up; in
    a downtrend it sits above and only ratchets down. A close through the
    line flips the trend.

    - BUY when the trend flips from down to up.
    - SELL when the trend flips from up to down.

    The classifier uses the current Supertrend line as the stop, enters at
    today's close and targets twice the entry-to-stop distance (1:2
    reward:risk). During an uptrend, a close within 2% above the line is
    reported as an approaching buy: a pull-back to support.

Params:
    period: ATR period (default 10).
    multiplier: ATR multiple for the band offset (default 3).
"""

from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from signal_scanner.apps.analyzer.indicators import supertrend
from signal_scanner.apps.analyzer.strategies.base import has_enough_history
from signal_scanner.core.models import HUNDRED, TWO, ZERO, Candle, Prediction, Side, SignalAnalysis

_APPROACH_DISTANCE = Decimal("0.02")
_UP = 1
_DOWN = -1


class SupertrendStrategy:
    """Buy on a flip to uptrend, sell on a flip to downtrend."""

    def __init__(self, period: int = 10, multiplier: Decimal = Decimal(3)) -> None:
        """Initialize the Supertrend strategy."""
        if period < 1:
            msg = f"period must be >= 1, got {period}"
            raise ValueError(msg)
        if multiplier <= ZERO:
            msg = f"multiplier must be > 0, got {multiplier}"
            raise ValueError(msg)
        self._period = period
        self._multiplier = multiplier
        self._direction: list[int] = []

    @property
    def name(self) -> str:
        """Return the strategy name including parameters."""
        return f"supertrend_{self._period}_{self._multiplier}"

    def prepare(self, candles: Sequence[Candle]) -> None:
        """Compute the trend direction series."""
        self._direction = supertrend(candles, self._period, self._multiplier).direction

    def start_index(self, count: int) -> int:  # noqa: ARG002
        """Start once the ATR has had a full period to settle."""
        return self._period

    def entry_reason(self, i: int) -> str | None:
        """Return a reason when the trend flips up."""
        if self._direction[i - 1] == _DOWN and self._direction[i] == _UP:
            return "Supertrend flipped bullish"
        return None

    def exit_reason(self, i: int) -> str | None:
        """Return a reason when the trend flips down."""
        if self._direction[i - 1] == _UP and self._direction[i] == _DOWN:
            return "Supertrend flipped bearish"
        return None

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:
        """Classify the latest candle by the Supertrend direction."""
        if not has_enough_history(candles):
            return SignalAnalysis()

        series = supertrend(candles, self._period, self._multiplier)
        prev_dir, curr_dir = series.direction[-2], series.direction[-1]
        line = series.value[-1]
        entry = candles[-1].close
        levels = SignalAnalysis(
            suggested_entry=entry,
            suggested_target=entry + TWO * abs(entry - line),
            suggested_stop_loss=line,
        )

        if prev_dir == _DOWN and curr_dir == _UP:
            return replace(levels, signal=Side.BUY, details=f"Supertrend Buy (stop {line:.1f})")
        if prev_dir == _UP and curr_dir == _DOWN:
            return replace(levels, signal=Side.SELL, details=f"Supertrend Sell ({line:.1f})")

        if curr_dir == _UP and line > ZERO:
            distance = (entry - line) / line
            if ZERO <= distance < _APPROACH_DISTANCE:
                return replace(
                    levels,
                    prediction=Prediction.APPROACHING_BUY,
                    details=f"Near Support ({distance * HUNDRED:.1f}%)",
                )
        return levels
