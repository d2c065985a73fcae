"""Bollinger Band reversion strategy.

How it works:
    Bollinger Bands wrap a 20-day moving average with an upper and lower
    band two standard deviations away. In a calm market the price spends
    most of its time between them, so touching a band suggests the move
    has stretched too far.

    - BUY when the close drops below the lower band.
    - SELL when the close rises above the upper band.

    The backtest compares closing prices only. The signal classifier
    instead checks intrabar extremes: today's low touching the lower band
    is a BUY and today's high touching the upper band is a SELL. The two
    rule sets are deliberately kept separate.

Params:
    period: Window for the mean and standard deviation (default 20).
    num_std: Band width in standard deviations (default 2).
"""

from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from signal_scanner.apps.analyzer.indicators import Series, bollinger_bands
from signal_scanner.apps.analyzer.strategies.base import has_enough_history
from signal_scanner.core.models import HUNDRED, TWO, ZERO, Candle, Prediction, Side, SignalAnalysis

_STOP_MULTIPLIER = Decimal("0.97")
_APPROACH_DISTANCE = Decimal("0.015")


class BollingerStrategy:
    """Buy below the lower band, sell above the upper band."""

    def __init__(self, period: int = 20, num_std: Decimal = TWO) -> None:
        """Initialize the Bollinger strategy."""
        if period < 1:
            msg = f"period must be >= 1, got {period}"
            raise ValueError(msg)
        if num_std <= ZERO:
            msg = f"num_std must be > 0, got {num_std}"
            raise ValueError(msg)
        self._period = period
        self._num_std = num_std
        self._closes: list[Decimal] = []
        self._upper: Series = []
        self._lower: Series = []

    @property
    def name(self) -> str:
        """Return the strategy name including parameters."""
        return f"bollinger_{self._period}_{self._num_std}"

    def prepare(self, candles: Sequence[Candle]) -> None:
        """Compute the bands and keep the closes."""
        bands = bollinger_bands(candles, self._period, self._num_std)
        self._closes = [c.close for c in candles]
        self._upper = bands.upper
        self._lower = bands.lower

    def start_index(self, count: int) -> int:  # noqa: ARG002
        """Start one bar after the first defined band."""
        return self._period

    def entry_reason(self, i: int) -> str | None:
        """Return a reason when the close is below the lower band."""
        lower = self._lower[i]
        if lower is not None and self._closes[i] < lower:
            return f"Lower Band Touch {lower:.1f}"
        return None

    def exit_reason(self, i: int) -> str | None:
        """Return a reason when the close is above the upper band."""
        upper = self._upper[i]
        if upper is not None and self._closes[i] > upper:
            return f"Upper Band Touch {upper:.1f}"
        return None

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:
        """Classify the latest candle against today's bands using intrabar extremes."""
        if not has_enough_history(candles):
            return SignalAnalysis()

        bands = bollinger_bands(candles, self._period, self._num_std)
        upper, lower = bands.upper[-1], bands.lower[-1]
        if upper is None or lower is None:
            return SignalAnalysis()

        today = candles[-1]
        levels = SignalAnalysis(
            suggested_entry=lower,
            suggested_target=upper,
            suggested_stop_loss=lower * _STOP_MULTIPLIER,
        )

        if today.low <= lower:
            return replace(levels, signal=Side.BUY, details=f"Lower Band {lower:.1f}")
        if today.high >= upper:
            return replace(levels, signal=Side.SELL, details=f"Upper Band {upper:.1f}")

        if lower > ZERO:
            distance = (today.close - lower) / lower
            if ZERO < distance < _APPROACH_DISTANCE:
                return replace(
                    levels,
                    prediction=Prediction.APPROACHING_BUY,
                    details=f"Near Lower ({distance * HUNDRED:.1f}%)",
                )
        return levels
