"""MACD crossover strategy.

How it works:
    MACD subtracts a slow EMA (26) of the closing price from a fast EMA
    (12). A 9-period EMA of that difference, the "signal line", smooths
    it further. When MACD rises through its signal line, momentum has
    turned up; when it falls through, momentum has turned down.

    - BUY when the MACD line crosses above the signal line.
    - SELL when the MACD line crosses below the signal line.

    Both EMAs are seeded at the first candle, so the earliest MACD values
    rest on immature averages. The backtest starts at the slow period.
    The classifier reports an approaching buy when MACD is still below the
    signal line by less than 0.05 and the gap is shrinking.

Params:
    fast_period: Fast EMA period (default 12).
    slow_period: Slow EMA period (default 26).
    signal_period: Signal EMA period (default 9).
"""

from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from signal_scanner.apps.analyzer.indicators import macd
from signal_scanner.apps.analyzer.strategies.base import (
    crossed_above,
    crossed_below,
    has_enough_history,
    recent_high,
    recent_low,
)
from signal_scanner.core.models import Candle, Prediction, Side, SignalAnalysis

_APPROACH_GAP = Decimal("0.05")


class MacdStrategy:
    """Generate BUY/SELL on MACD line crossing its signal line."""

    def __init__(self, fast_period: int = 12, slow_period: int = 26, signal_period: int = 9) -> None:
        """Initialize the MACD strategy."""
        if fast_period < 1 or signal_period < 1:
            msg = f"periods must be >= 1, got fast={fast_period}, signal={signal_period}"
            raise ValueError(msg)
        if slow_period <= fast_period:
            msg = f"slow_period ({slow_period}) must be greater than fast_period ({fast_period})"
            raise ValueError(msg)
        self._fast_period = fast_period
        self._slow_period = slow_period
        self._signal_period = signal_period
        self._macd: list[Decimal] = []
        self._signal: list[Decimal] = []

    @property
    def name(self) -> str:
        """Return the strategy name including parameters."""
        return f"macd_{self._fast_period}_{self._slow_period}_{self._signal_period}"

    def prepare(self, candles: Sequence[Candle]) -> None:
        """Compute the MACD and signal lines."""
        series = macd(candles, self._fast_period, self._slow_period, self._signal_period)
        self._macd = series.macd
        self._signal = series.signal

    def start_index(self, count: int) -> int:  # noqa: ARG002
        """Start at the slow period."""
        return self._slow_period

    def entry_reason(self, i: int) -> str | None:
        """Return a reason when MACD crosses above its signal line."""
        if crossed_above(self._macd[i - 1], self._signal[i - 1], self._macd[i], self._signal[i]):
            return (
                f"MACD({self._fast_period},{self._slow_period}) "
                f"crossed above signal({self._signal_period})"
            )
        return None

    def exit_reason(self, i: int) -> str | None:
        """Return a reason when MACD crosses below its signal line."""
        if crossed_below(self._macd[i - 1], self._signal[i - 1], self._macd[i], self._signal[i]):
            return (
                f"MACD({self._fast_period},{self._slow_period}) "
                f"crossed below signal({self._signal_period})"
            )
        return None

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:
        """Classify the latest candle by the MACD/signal relationship."""
        if not has_enough_history(candles):
            return SignalAnalysis()

        series = macd(candles, self._fast_period, self._slow_period, self._signal_period)
        prev_macd, curr_macd = series.macd[-2], series.macd[-1]
        prev_signal, curr_signal = series.signal[-2], series.signal[-1]
        levels = SignalAnalysis(
            suggested_entry=candles[-1].close,
            suggested_target=recent_high(candles),
            suggested_stop_loss=recent_low(candles),
        )

        if crossed_above(prev_macd, prev_signal, curr_macd, curr_signal):
            return replace(levels, signal=Side.BUY, details="MACD Golden Cross Today")
        if crossed_below(prev_macd, prev_signal, curr_macd, curr_signal):
            return replace(levels, signal=Side.SELL, details="MACD Death Cross Today")

        if curr_macd < curr_signal:
            gap = curr_signal - curr_macd
            prev_gap = prev_signal - prev_macd
            if gap < _APPROACH_GAP and gap < prev_gap:
                return replace(
                    levels,
                    prediction=Prediction.APPROACHING_BUY,
                    details=f"MACD Gap: {gap:.3f}",
                )
        return levels
