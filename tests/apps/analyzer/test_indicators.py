"""Tests for technical indicator series."""

import random
from datetime import date, timedelta
from decimal import Decimal

import pytest

from signal_scanner.apps.analyzer.indicators import (
    atr,
    bollinger_bands,
    ema_from_values,
    highest_high,
    lowest_low,
    macd,
    rsi,
    sma,
    supertrend,
    true_range,
)
from signal_scanner.core.models import HUNDRED, ZERO, Candle

RSI_PERIOD = 14
START = date(2024, 1, 1)
RISE_STEPS = 29


def _candle(day: int, close: float, high: float | None = None, low: float | None = None) -> Candle:
    c = Decimal(str(close))
    return Candle(
        symbol="2330",
        date=START + timedelta(days=day),
        open=c,
        high=Decimal(str(high)) if high is not None else c + 1,
        low=Decimal(str(low)) if low is not None else c - 1,
        close=c,
        volume=1000,
    )


def _series(closes: list[float]) -> list[Candle]:
    return [_candle(i, close) for i, close in enumerate(closes)]


RISE_100_TO_130 = [
    _candle(i, float(Decimal(100) + Decimal(30) * i / RISE_STEPS)) for i in range(RISE_STEPS + 1)
]


def _random_walk(seed: int, count: int) -> list[Candle]:
    """Build a seeded random walk with uneven intrabar ranges."""
    rng = random.Random(seed)
    candles: list[Candle] = []
    close = 100.0
    for i in range(count):
        close = max(1.0, round(close + rng.uniform(-4, 4), 2))
        high = round(close + rng.uniform(0, 3), 2)
        low = round(max(0.5, close - rng.uniform(0, 3)), 2)
        candles.append(_candle(i, close, high, low))
    return candles


class TestSma:
    """Tests for the simple moving average."""

    def test_trailing_mean(self) -> None:
        """Average the trailing window inclusive of the current candle."""
        assert sma(_series([1, 2, 3, 4, 5]), 3) == [None, None, 2, 3, 4]

    def test_invalid_period(self) -> None:
        """Reject a non-positive period."""
        with pytest.raises(ValueError, match="SMA period"):
            sma(_series([1, 2]), 0)


class TestEma:
    """Tests for the exponential moving average."""

    def test_seeded_with_first_value(self) -> None:
        """Seed with the first value and smooth with k = 2 / (period + 1)."""
        values = [Decimal(1), Decimal(2), Decimal(3)]
        assert ema_from_values(values, 3) == [Decimal(1), Decimal("1.5"), Decimal("2.25")]

    def test_empty(self) -> None:
        """Return an empty series for empty input."""
        assert ema_from_values([], 5) == []


class TestRsi:
    """Tests for Wilder's RSI."""

    def test_undefined_before_period(self) -> None:
        """Leave the first ``period`` slots empty."""
        result = rsi(_series([100 + i for i in range(20)]), RSI_PERIOD)
        assert result[:RSI_PERIOD] == [None] * RSI_PERIOD
        assert result[RSI_PERIOD] is not None

    def test_short_series_all_none(self) -> None:
        """A series no longer than the period has no defined value."""
        assert rsi(_series([100 + i for i in range(RSI_PERIOD)]), RSI_PERIOD) == [
            None
        ] * RSI_PERIOD

    def test_zero_loss_uses_unit_divisor(self) -> None:
        """With no losses the ratio divides by one, so +1 steps read 50."""
        result = rsi(_series([100 + i for i in range(16)]), RSI_PERIOD)
        assert result[RSI_PERIOD] == Decimal(50)
        assert result[15] == Decimal(50)

    def test_larger_gains_read_higher(self) -> None:
        """Steps of +2 give 100 - 100 / 3."""
        result = rsi(_series([100 + 2 * i for i in range(15)]), RSI_PERIOD)
        assert result[RSI_PERIOD] == HUNDRED - HUNDRED / Decimal(3)

    def test_all_losses_read_zero(self) -> None:
        """A steadily falling series reads zero."""
        result = rsi(_series([200 - i for i in range(15)]), RSI_PERIOD)
        assert result[RSI_PERIOD] == ZERO

    def test_steady_rise_reads_above_fifty(self) -> None:
        """A 30-bar climb from 100 to 130 settles just above 50 and below 70."""
        result = rsi(RISE_100_TO_130, RSI_PERIOD)
        defined = [value for value in result if value is not None]
        assert len(defined) == len(RISE_100_TO_130) - RSI_PERIOD
        assert result[20] is not None
        assert result[20] > Decimal(50)
        assert all(Decimal(50) < value < Decimal(70) for value in defined)


class TestTrueRangeAndAtr:
    """Tests for true range and Wilder's ATR."""

    def test_first_true_range_is_zero(self) -> None:
        """The first candle has no previous close."""
        assert true_range([_candle(0, 100)]) == [ZERO]

    def test_gap_up(self) -> None:
        """A gap up is measured from the previous close to the high."""
        candles = [_candle(0, 100), _candle(1, 102, high=103, low=101)]
        assert true_range(candles)[1] == Decimal(3)

    def test_gap_down(self) -> None:
        """A gap down is measured from the previous close to the low."""
        candles = [_candle(0, 100), _candle(1, 97, high=99, low=95)]
        assert true_range(candles)[1] == Decimal(5)

    def test_wilder_smoothing(self) -> None:
        """Seed with the zero first range and smooth each subsequent range."""
        candles = [
            _candle(0, 100),
            _candle(1, 102, high=104, low=100),
            _candle(2, 102, high=103, low=101),
        ]
        assert atr(candles, 2) == [ZERO, Decimal(2), Decimal(2)]

    def test_empty(self) -> None:
        """Return an empty series for no candles."""
        assert atr([], 14) == []


class TestMacd:
    """Tests for the MACD line and signal line."""

    def test_flat_prices_are_zero(self) -> None:
        """Constant closes leave both lines at zero."""
        series = macd(_series([100] * 40))
        assert all(v == ZERO for v in series.macd)
        assert all(v == ZERO for v in series.signal)

    def test_jump_lifts_macd_above_signal(self) -> None:
        """A sudden rise puts MACD above its lagging signal line."""
        series = macd(_series([100] * 39 + [110]))
        assert series.macd[-1] > series.signal[-1] > ZERO


class TestBollingerBands:
    """Tests for Bollinger Bands."""

    def test_population_std(self) -> None:
        """Use the population standard deviation around the mean."""
        bands = bollinger_bands(_series([1, 2, 3]), period=3)
        std = (Decimal(2) / Decimal(3)).sqrt()
        assert bands.middle == [None, None, Decimal(2)]
        assert bands.upper[2] == Decimal(2) + std * Decimal(2)
        assert bands.lower[2] == Decimal(2) - std * Decimal(2)
        assert bands.upper[:2] == [None, None]

    def test_flat_prices_collapse_bands(self) -> None:
        """Constant closes give zero width."""
        bands = bollinger_bands(_series([100] * 20))
        assert bands.upper[-1] == bands.lower[-1] == Decimal(100)


class TestSupertrend:
    """Tests for the Supertrend direction series."""

    def test_flips_down_then_up(self) -> None:
        """A collapse flips the trend down and a surge flips it back up."""
        candles = _series([100] * 5 + [50, 200])
        result = supertrend(candles)
        assert result.direction == [1, 1, 1, 1, 1, -1, 1]
        assert result.value[5] == result.final_upper[5]
        assert result.value[6] == result.final_lower[6]

    def test_flat_prices_stay_up(self) -> None:
        """Flat prices never break the lower band."""
        result = supertrend(_series([100] * 30))
        assert set(result.direction) == {1}
        assert result.value[-1] == Decimal(100)

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_bands_only_loosen_after_a_break(self, seed: int) -> None:
        """Final bands only loosen after the prior close broke through them."""
        candles = _random_walk(seed, 250)
        result = supertrend(candles)
        for i in range(1, len(candles)):
            prev_close = candles[i - 1].close
            upper, prev_upper = result.final_upper[i], result.final_upper[i - 1]
            lower, prev_lower = result.final_lower[i], result.final_lower[i - 1]
            assert upper <= prev_upper or prev_close > prev_upper
            assert lower >= prev_lower or prev_close < prev_lower
        assert len(result.direction) == len(candles)


class TestWindowExtremes:
    """Tests for highest high and lowest low."""

    def test_window(self) -> None:
        """Scan the half-open window, clamping a negative start."""
        candles = _series([10, 30, 20])
        assert highest_high(candles, -5, 2) == Decimal(31)
        assert lowest_low(candles, 1, 3) == Decimal(19)

    def test_empty_window(self) -> None:
        """An empty window has no extreme."""
        candles = _series([10, 30, 20])
        assert highest_high(candles, 2, 2) is None
        assert lowest_low(candles, 3, 3) is None
