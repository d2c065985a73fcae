"""Helpers shared by the strategy implementations.

Hold the crossover predicates, trailing-window price levels and the
minimum-history rule that every signal classifier applies.
"""

from collections.abc import Sequence
from decimal import Decimal

from signal_scanner.apps.analyzer.indicators import highest_high, lowest_low
from signal_scanner.core.models import Candle

MIN_ANALYSIS_CANDLES = 60
TARGET_LOOKBACK = 60
STOP_LOOKBACK = 10


def has_enough_history(candles: Sequence[Candle]) -> bool:
    """Return whether the classifier has enough candles to say anything."""
    return len(candles) >= MIN_ANALYSIS_CANDLES


def crossed_above(
    prev_fast: Decimal | None,
    prev_slow: Decimal | None,
    fast: Decimal | None,
    slow: Decimal | None,
) -> bool:
    """Return whether ``fast`` moved from at-or-below ``slow`` to above it."""
    if prev_fast is None or prev_slow is None or fast is None or slow is None:
        return False
    return prev_fast <= prev_slow and fast > slow


def crossed_below(
    prev_fast: Decimal | None,
    prev_slow: Decimal | None,
    fast: Decimal | None,
    slow: Decimal | None,
) -> bool:
    """Return whether ``fast`` moved from at-or-above ``slow`` to below it."""
    if prev_fast is None or prev_slow is None or fast is None or slow is None:
        return False
    return prev_fast >= prev_slow and fast < slow


def recent_high(candles: Sequence[Candle], lookback: int = TARGET_LOOKBACK) -> Decimal | None:
    """Return the highest high over the last ``lookback`` candles, today included."""
    return highest_high(candles, len(candles) - lookback, len(candles))


def recent_low(candles: Sequence[Candle], lookback: int = STOP_LOOKBACK) -> Decimal | None:
    """Return the lowest low over the last ``lookback`` candles, today included."""
    return lowest_low(candles, len(candles) - lookback, len(candles))
