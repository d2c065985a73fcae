"""RSI reversal strategy.

How it works:
    RSI (Relative Strength Index) measures how strongly the price has been
    rising versus falling on a 0-100 scale. Readings below 30 suggest the
    stock has been sold too hard ("oversold"); readings above 70 suggest it
    has been bought too eagerly ("overbought").

    - BUY when RSI is below the oversold threshold.
    - SELL when RSI is above the overbought threshold.

    The classifier reports a confirmed signal only when RSI crossed a
    threshold between yesterday and today. Otherwise RSI sitting in
    30-38 is reported as approaching a buy, and 62-70 as approaching a
    sell. The suggested target is the 60-day average, the price a
    reversion would return to.

Params:
    period: RSI lookback (default 14).
    oversold: Buy threshold (default 30).
    overbought: Sell threshold (default 70).
"""

from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal

from signal_scanner.apps.analyzer.indicators import Series, rsi, sma
from signal_scanner.apps.analyzer.strategies.base import (
    TARGET_LOOKBACK,
    has_enough_history,
    recent_low,
)
from signal_scanner.core.models import Candle, Prediction, Side, SignalAnalysis

_APPROACH_BAND = Decimal(8)
_MAX_RSI = 100


class RsiStrategy:
    """Buy when RSI drops below oversold, sell when it rises above overbought."""

    def __init__(self, period: int = 14, oversold: int = 30, overbought: int = 70) -> None:
        """Initialize the RSI strategy."""
        if period < 1:
            msg = f"period must be >= 1, got {period}"
            raise ValueError(msg)
        if not 0 < oversold < overbought < _MAX_RSI:
            msg = f"Need 0 < oversold < overbought < 100, got oversold={oversold}, overbought={overbought}"
            raise ValueError(msg)
        self._period = period
        self._oversold = Decimal(oversold)
        self._overbought = Decimal(overbought)
        self._rsi: Series = []

    @property
    def name(self) -> str:
        """Return the strategy name including parameters."""
        return f"rsi_{self._period}_{self._oversold}_{self._overbought}"

    def prepare(self, candles: Sequence[Candle]) -> None:
        """Compute the RSI series."""
        self._rsi = rsi(candles, self._period)

    def start_index(self, count: int) -> int:  # noqa: ARG002
        """Start at the first defined RSI value."""
        return self._period

    def entry_reason(self, i: int) -> str | None:
        """Return a reason when RSI is oversold."""
        value = self._rsi[i]
        if value is not None and value < self._oversold:
            return f"RSI {value:.1f} < {self._oversold}"
        return None

    def exit_reason(self, i: int) -> str | None:
        """Return a reason when RSI is overbought."""
        value = self._rsi[i]
        if value is not None and value > self._overbought:
            return f"RSI {value:.1f} > {self._overbought}"
        return None

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:
        """Classify the latest candle by its RSI reading."""
        if not has_enough_history(candles):
            return SignalAnalysis()

        series = rsi(candles, self._period)
        prev, curr = series[-2], series[-1]
        levels = SignalAnalysis(
            suggested_entry=candles[-1].close,
            suggested_target=sma(candles, TARGET_LOOKBACK)[-1],
            suggested_stop_loss=recent_low(candles),
        )
        if prev is None or curr is None:
            return levels

        if prev >= self._oversold and curr < self._oversold:
            return replace(
                levels, signal=Side.BUY, details=f"RSI < {self._oversold} ({curr:.1f})"
            )
        if prev <= self._overbought and curr > self._overbought:
            return replace(
                levels, signal=Side.SELL, details=f"RSI > {self._overbought} ({curr:.1f})"
            )

        if self._oversold <= curr <= self._oversold + _APPROACH_BAND:
            return replace(
                levels, prediction=Prediction.APPROACHING_BUY, details=f"RSI: {curr:.1f}"
            )
        if self._overbought - _APPROACH_BAND <= curr <= self._overbought:
            return replace(
                levels, prediction=Prediction.APPROACHING_SELL, details=f"RSI: {curr:.1f}"
            )
        return levels
