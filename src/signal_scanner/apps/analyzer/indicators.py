"""Technical indicator series for the analyzer.

Provide pure functions that compute common technical indicators from
sequences of ``Candle`` objects. Every function returns a full-length
series aligned index-for-index with the input, so strategies can look up
any historical position. Positions before an indicator's lookback is
available hold ``None``; callers must treat those as absent, not zero.
All arithmetic uses ``Decimal``.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from signal_scanner.core.models import HUNDRED, ONE, TWO, ZERO, Candle

Series = list[Decimal | None]


@dataclass(frozen=True)
class MacdSeries:
    """MACD line and its signal line, aligned with the candles."""

    macd: list[Decimal]
    signal: list[Decimal]


@dataclass(frozen=True)
class BollingerSeries:
    """Bollinger middle, upper and lower bands, aligned with the candles."""

    middle: Series
    upper: Series
    lower: Series


@dataclass(frozen=True)
class SupertrendSeries:
    """Supertrend line, trend direction, and the ratcheted final bands.

    ``direction`` is ``1`` in an uptrend (the line is support below price)
    and ``-1`` in a downtrend (the line is resistance above price).
    """

    value: list[Decimal]
    direction: list[int]
    final_upper: list[Decimal]
    final_lower: list[Decimal]


def _check_period(period: int, name: str) -> None:
    """Raise ``ValueError`` for a non-positive lookback period."""
    if period < 1:
        msg = f"{name} period must be >= 1, got {period}"
        raise ValueError(msg)


def sma(candles: Sequence[Candle], period: int) -> Series:
    """Compute the simple moving average of close prices.

    Each value is the arithmetic mean of the trailing ``period`` closes,
    inclusive of the current candle.

    Args:
        candles: Candle sequence ordered by date.
        period: Number of candles to average over.

    Returns:
        A series with ``None`` for every index below ``period - 1``.

    """
    _check_period(period, "SMA")
    result: Series = []
    dec_period = Decimal(period)
    for i in range(len(candles)):
        if i < period - 1:
            result.append(None)
            continue
        window = candles[i - period + 1 : i + 1]
        result.append(sum((c.close for c in window), ZERO) / dec_period)
    return result


def ema_from_values(values: Sequence[Decimal], period: int) -> list[Decimal]:
    """Compute an exponential moving average over raw values.

    The EMA is seeded with the first value and updated with
    ``ema = value * k + prev * (1 - k)`` where ``k = 2 / (period + 1)``.
    Early values therefore reflect an immature average.

    Args:
        values: Input values ordered by time.
        period: Smoothing period.

    Returns:
        A series of the same length as ``values`` with no undefined slots.

    """
    _check_period(period, "EMA")
    if not values:
        return []
    k = TWO / Decimal(period + 1)
    result = [values[0]]
    for value in values[1:]:
        result.append(value * k + result[-1] * (ONE - k))
    return result


def ema(candles: Sequence[Candle], period: int) -> list[Decimal]:
    """Compute the exponential moving average of close prices, seeded at index 0."""
    return ema_from_values([c.close for c in candles], period)


def rsi(candles: Sequence[Candle], period: int = 14) -> Series:
    """Compute the Relative Strength Index using Wilder's smoothing.

    Seed the average gain and loss with the simple mean of the first
    ``period`` deltas, then smooth each subsequent delta with
    ``avg = (avg * (period - 1) + value) / period``. A zero average loss is
    treated as ``1`` when forming the ratio, which pushes RSI toward 100
    instead of leaving it undefined. The smoothing state itself keeps the
    true zero.

    Args:
        candles: Candle sequence ordered by date.
        period: Lookback window for the RSI calculation.

    Returns:
        A series with ``None`` for every index below ``period``. Sequences
        of ``period`` candles or fewer yield an all-``None`` series.

    """
    _check_period(period, "RSI")
    result: Series = [None] * len(candles)
    if len(candles) <= period:
        return result

    dec_period = Decimal(period)
    gains = ZERO
    losses = ZERO
    for i in range(1, period + 1):
        change = candles[i].close - candles[i - 1].close
        if change > ZERO:
            gains += change
        else:
            losses += -change

    avg_gain = gains / dec_period
    avg_loss = losses / dec_period
    result[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period + 1, len(candles)):
        change = candles[i].close - candles[i - 1].close
        gain = change if change > ZERO else ZERO
        loss = -change if change < ZERO else ZERO
        avg_gain = (avg_gain * (dec_period - ONE) + gain) / dec_period
        avg_loss = (avg_loss * (dec_period - ONE) + loss) / dec_period
        result[i] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: Decimal, avg_loss: Decimal) -> Decimal:
    """Convert smoothed gain/loss averages into an RSI reading."""
    divisor = avg_loss if avg_loss != ZERO else ONE
    return HUNDRED - HUNDRED / (ONE + avg_gain / divisor)


def true_range(candles: Sequence[Candle]) -> list[Decimal]:
    """Compute the true range of every candle.

    True range is the largest of ``high - low``, ``|high - prev_close|``
    and ``|low - prev_close|``. The first candle has no previous close, so
    its true range is defined as zero.
    """
    result: list[Decimal] = []
    for i, candle in enumerate(candles):
        if i == 0:
            result.append(ZERO)
            continue
        prev_close = candles[i - 1].close
        result.append(
            max(
                candle.high - candle.low,
                abs(candle.high - prev_close),
                abs(candle.low - prev_close),
            )
        )
    return result


def atr(candles: Sequence[Candle], period: int = 14) -> list[Decimal]:
    """Compute the Average True Range with Wilder's smoothing.

    Seed ``atr[0]`` with the first true range (zero) and smooth with
    ``atr[i] = (atr[i-1] * (period - 1) + tr[i]) / period``.

    Args:
        candles: Candle sequence ordered by date.
        period: Smoothing period.

    Returns:
        A fully defined series of the same length as ``candles``.

    """
    _check_period(period, "ATR")
    ranges = true_range(candles)
    if not ranges:
        return []
    dec_period = Decimal(period)
    result = [ranges[0]]
    for tr in ranges[1:]:
        result.append((result[-1] * (dec_period - ONE) + tr) / dec_period)
    return result


def macd(
    candles: Sequence[Candle],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MacdSeries:
    """Compute the MACD line and signal line.

    The MACD line is ``EMA(fast) - EMA(slow)`` with both EMAs seeded at
    index 0, so values before roughly ``slow + signal`` candles rest on
    immature averages. The signal line is the EMA of the MACD line,
    seeded with its first value.

    Args:
        candles: Candle sequence ordered by date.
        fast_period: Fast EMA period.
        slow_period: Slow EMA period.
        signal_period: Signal-line EMA period.

    Returns:
        A ``MacdSeries`` with both lines fully defined.

    """
    fast = ema(candles, fast_period)
    slow = ema(candles, slow_period)
    line = [f - s for f, s in zip(fast, slow, strict=True)]
    return MacdSeries(macd=line, signal=ema_from_values(line, signal_period))


def bollinger_bands(
    candles: Sequence[Candle],
    period: int = 20,
    num_std: Decimal = TWO,
) -> BollingerSeries:
    """Compute Bollinger Bands around the simple moving average.

    Use the population standard deviation (divide by N) of the same
    trailing window as the mean.

    Args:
        candles: Candle sequence ordered by date.
        period: Window length for the mean and standard deviation.
        num_std: Band width in standard deviations.

    Returns:
        A ``BollingerSeries`` with ``None`` below index ``period - 1``.

    """
    middle = sma(candles, period)
    upper: Series = []
    lower: Series = []
    dec_period = Decimal(period)
    for i, mean in enumerate(middle):
        if mean is None:
            upper.append(None)
            lower.append(None)
            continue
        window = candles[i - period + 1 : i + 1]
        variance = sum(((c.close - mean) ** 2 for c in window), ZERO) / dec_period
        std = variance.sqrt()
        upper.append(mean + std * num_std)
        lower.append(mean - std * num_std)
    return BollingerSeries(middle=middle, upper=upper, lower=lower)


def supertrend(
    candles: Sequence[Candle],
    period: int = 10,
    multiplier: Decimal = Decimal(3),
) -> SupertrendSeries:
    """Compute the Supertrend line and its trend direction.

    Basic bands sit ``multiplier * ATR`` above and below the candle
    midpoint. The final upper band only moves down (the final lower band
    only moves up) unless the previous close broke through it. The trend
    starts up at index 0 and flips down when a close falls below the final
    lower band, or back up when a close rises above the final upper band.
    Each step depends on the previous direction, so the whole series must
    be walked in order.

    Args:
        candles: Candle sequence ordered by date.
        period: ATR period.
        multiplier: ATR multiple used for the band offset.

    Returns:
        A fully defined ``SupertrendSeries``.

    """
    atr_values = atr(candles, period)
    final_upper: list[Decimal] = []
    final_lower: list[Decimal] = []
    value: list[Decimal] = []
    direction: list[int] = []

    for i, candle in enumerate(candles):
        hl2 = (candle.high + candle.low) / TWO
        basic_upper = hl2 + multiplier * atr_values[i]
        basic_lower = hl2 - multiplier * atr_values[i]

        if i == 0:
            final_upper.append(basic_upper)
            final_lower.append(basic_lower)
            direction.append(1)
            value.append(basic_lower)
            continue

        prev_close = candles[i - 1].close
        prev_upper = final_upper[-1]
        prev_lower = final_lower[-1]
        upper = basic_upper if basic_upper < prev_upper or prev_close > prev_upper else prev_upper
        lower = basic_lower if basic_lower > prev_lower or prev_close < prev_lower else prev_lower
        final_upper.append(upper)
        final_lower.append(lower)

        if direction[-1] == 1:
            if candle.close < lower:
                direction.append(-1)
                value.append(upper)
            else:
                direction.append(1)
                value.append(lower)
        elif candle.close > upper:
            direction.append(1)
            value.append(lower)
        else:
            direction.append(-1)
            value.append(upper)

    return SupertrendSeries(
        value=value,
        direction=direction,
        final_upper=final_upper,
        final_lower=final_lower,
    )


def highest_high(candles: Sequence[Candle], start: int, end: int) -> Decimal | None:
    """Return the highest high in ``candles[start:end]``, or ``None`` when empty."""
    window = candles[max(0, start) : end]
    if not window:
        return None
    return max(c.high for c in window)


def lowest_low(candles: Sequence[Candle], start: int, end: int) -> Decimal | None:
    """Return the lowest low in ``candles[start:end]``, or ``None`` when empty."""
    window = candles[max(0, start) : end]
    if not window:
        return None
    return min(c.low for c in window)
