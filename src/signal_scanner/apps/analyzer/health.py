"""Position health check for a single instrument.

Combine a few point-in-time readings (moving-average alignment, RSI zone,
volume surge, and an optional fundamentals overlay) into a 5-95 heuristic
score, and derive one stop-loss and one take-profit level for a planned or
existing long entry. Unlike the strategy indicators these readings are
scalars computed from the latest candles only.
"""

from collections.abc import Sequence
from decimal import Decimal

from signal_scanner.apps.analyzer.fundamentals import score_fundamentals
from signal_scanner.core.exceptions import InsufficientHistoryError
from signal_scanner.core.models import (
    HUNDRED,
    ONE,
    TWO,
    ZERO,
    Candle,
    Fundamentals,
    FundamentalScore,
    HealthReport,
)

MIN_HEALTH_CANDLES = 60

_BASE_SCORE = 50
_MIN_SCORE = 5
_MAX_SCORE = 95
_BULLISH_ABOVE = 60
_BEARISH_BELOW = 40
_RSI_HOT = 70
_RSI_COLD = 30
_RSI_STRONG = 50
_VOLUME_SURGE = Decimal("1.5")
_VOLUME_WINDOW = 5
_LEVEL_WINDOW = 20
_SUPPORT_BUFFER = Decimal("0.98")
_FUNDAMENTAL_STRONG = 70
_FUNDAMENTAL_WEAK = 30


def _last_sma(candles: Sequence[Candle], period: int) -> Decimal:
    """Return the mean close of the last ``period`` candles."""
    closes = [c.close for c in candles[-period:]]
    return sum(closes, ZERO) / Decimal(period)


def _average_true_range(candles: Sequence[Candle], period: int = 14) -> Decimal:
    """Return the simple average of the last ``period`` true ranges."""
    ranges: list[Decimal] = []
    for i in range(len(candles) - period, len(candles)):
        high = candles[i].high
        low = candles[i].low
        prev_close = candles[i - 1].close
        ranges.append(max(high - low, abs(high - prev_close), abs(low - prev_close)))
    return sum(ranges, ZERO) / Decimal(period)


def _simple_rsi(candles: Sequence[Candle], period: int = 14) -> Decimal:
    """Return an unsmoothed RSI over the last ``period`` deltas.

    A zero average loss is treated as ``1``.
    """
    gains = ZERO
    losses = ZERO
    for i in range(len(candles) - period, len(candles)):
        change = candles[i].close - candles[i - 1].close
        if change > ZERO:
            gains += change
        else:
            losses += -change
    avg_gain = gains / Decimal(period)
    avg_loss = losses / Decimal(period)
    divisor = avg_loss if avg_loss != ZERO else ONE
    return HUNDRED - HUNDRED / (ONE + avg_gain / divisor)


def support_resistance(
    candles: Sequence[Candle], period: int = _LEVEL_WINDOW
) -> tuple[Decimal, Decimal]:
    """Return the lowest low and highest high over the last ``period`` candles."""
    if len(candles) < period:
        return ZERO, ZERO
    recent = candles[-period:]
    return min(c.low for c in recent), max(c.high for c in recent)


def _trend_label(score: int) -> str:
    """Map a health score to a trend label."""
    if score > _BULLISH_ABOVE:
        return "Bullish"
    if score < _BEARISH_BELOW:
        return "Bearish"
    return "Neutral"


def analyze_health(  # noqa: PLR0912, PLR0915
    candles: Sequence[Candle],
    entry_price: Decimal | None = None,
    fundamentals: Fundamentals | None = None,
) -> HealthReport:
    """Score a long position and suggest stop-loss and take-profit levels.

    Args:
        candles: Daily candles ordered by date (at least 60).
        entry_price: Planned or actual entry price. Without one the stop is
            derived from the current close and no take-profit is given.
        fundamentals: Optional ratios blended into the score.

    Returns:
        The ``HealthReport``.

    Raises:
        InsufficientHistoryError: If fewer than 60 candles are supplied.

    """
    if len(candles) < MIN_HEALTH_CANDLES:
        raise InsufficientHistoryError(MIN_HEALTH_CANDLES, len(candles))

    last = candles[-1]
    price = last.close
    sma5 = _last_sma(candles, 5)
    sma20 = _last_sma(candles, 20)
    sma60 = _last_sma(candles, 60)
    atr = _average_true_range(candles, 14)
    rsi = _simple_rsi(candles, 14)
    support, resistance = support_resistance(candles)

    score = _BASE_SCORE
    reasons: list[str] = []

    if sma5 > sma20 > sma60:
        score += 20
        reasons.append("Moving averages stacked bullishly (5 > 20 > 60), trend is up")
    elif price > sma20:
        score += 10
        reasons.append("Price holds above the 20-day average, short-term strength")
    elif price < sma20 and price < sma60:
        score -= 20
        reasons.append("Price below the 20- and 60-day averages, trend is weak")

    if rsi > _RSI_HOT:
        score -= 5
        reasons.append("RSI overheated (>70), watch for a pullback")
    elif rsi < _RSI_COLD:
        score += 5
        reasons.append("RSI oversold (<30), a rebound is possible")
    elif rsi > _RSI_STRONG:
        reasons.append("RSI in the strong zone (>50)")

    recent = candles[-_VOLUME_WINDOW:]
    avg_volume = Decimal(sum(c.volume for c in recent)) / Decimal(_VOLUME_WINDOW)
    if Decimal(last.volume) > avg_volume * _VOLUME_SURGE and price > candles[-2].close:
        score += 10
        reasons.append("Rising on heavy volume, buyers are in control")

    fundamental: FundamentalScore | None = None
    if fundamentals is not None:
        fundamental = score_fundamentals(fundamentals)
        if fundamental.score > _FUNDAMENTAL_STRONG:
            score += 5
            reasons.append("Solid fundamentals support a longer hold")
        elif fundamental.score < _FUNDAMENTAL_WEAK:
            score -= 5
            reasons.append("Weak fundamentals, prefer short-term trades")

    score = min(_MAX_SCORE, max(_MIN_SCORE, score))

    stop_buffer = TWO * atr
    if entry_price is not None:
        if entry_price - support > stop_buffer:
            stop_loss = entry_price - stop_buffer
            stop_reason = (
                f"Entry is far above support, use a 2x ATR ({stop_buffer:.2f}) volatility stop"
            )
        else:
            stop_loss = support * _SUPPORT_BUFFER
            stop_reason = f"Just below the recent swing low support ({support})"
    else:
        stop_loss = price - stop_buffer
        stop_reason = "2x ATR volatility stop from the current price"

    take_profit = ZERO
    take_profit_reason = ""
    if entry_price is not None:
        reward = (entry_price - stop_loss) * TWO
        if entry_price < resistance < entry_price + reward:
            take_profit = resistance
            take_profit_reason = (
                f"Resistance at {resistance} comes before the 1:2 target, watch for a breakout"
            )
        else:
            take_profit = entry_price + reward
            take_profit_reason = "Projected from a 1:2 risk:reward ratio"

    return HealthReport(
        score=score,
        trend=_trend_label(score),
        stop_loss=stop_loss,
        stop_loss_reason=stop_reason,
        take_profit=take_profit,
        take_profit_reason=take_profit_reason,
        reasons=reasons,
        sma5=sma5,
        sma20=sma20,
        sma60=sma60,
        atr=atr,
        rsi=rsi,
        support=support,
        resistance=resistance,
        fundamental=fundamental,
    )
