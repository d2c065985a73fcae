"""Tests for the backtest engine."""

from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

from signal_scanner.apps.analyzer.engine import BacktestEngine, run_backtest
from signal_scanner.core.models import Candle, Side, SignalAnalysis

CAPITAL = Decimal(100_000)
START = date(2024, 1, 1)


def _candle(day: int, close: int) -> Candle:
    c = Decimal(close)
    return Candle(
        symbol="2330",
        date=START + timedelta(days=day),
        open=c,
        high=c + 1,
        low=c - 1,
        close=c,
        volume=1000,
    )


CANDLES = [_candle(i, c) for i, c in enumerate([100, 100, 110, 120, 130])]


class ScriptedStrategy:
    """Strategy that enters and exits at pre-set indices."""

    def __init__(self, entries: set[int], exits: set[int], start: int = 1) -> None:
        """Initialize with the indices that fire."""
        self.entries = entries
        self.exits = exits
        self.start = start
        self.prepared = False
        self.consulted_exit: list[int] = []

    @property
    def name(self) -> str:
        """Return the strategy name."""
        return "scripted"

    def prepare(self, candles: Sequence[Candle]) -> None:  # noqa: ARG002
        """Record that preparation ran."""
        self.prepared = True

    def start_index(self, count: int) -> int:  # noqa: ARG002
        """Return the configured start index."""
        return self.start

    def entry_reason(self, i: int) -> str | None:
        """Enter at scripted indices."""
        return "in" if i in self.entries else None

    def exit_reason(self, i: int) -> str | None:
        """Exit at scripted indices."""
        self.consulted_exit.append(i)
        return "out" if i in self.exits else None

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:  # noqa: ARG002
        """Return an empty analysis."""
        return SignalAnalysis()


class TestBacktestEngine:
    """Tests for BacktestEngine."""

    def test_round_trip(self) -> None:
        """Enter and exit at the candle closes."""
        result = BacktestEngine(ScriptedStrategy({1}, {3}), CAPITAL).run(CANDLES)
        assert result.strategy_name == "scripted"
        assert result.symbol == "2330"
        assert len(result.trades) == 1
        trade = result.trades[0]
        assert (trade.entry_price, trade.exit_price) == (Decimal(100), Decimal(120))
        assert trade.entry_date == CANDLES[1].date
        assert result.final_capital == Decimal(120_000)
        assert result.total_return == Decimal(20)
        assert result.win_rate == Decimal(100)

    def test_exit_rule_only_consulted_while_holding(self) -> None:
        """Indices before the entry never reach the exit rule."""
        strategy = ScriptedStrategy({2}, {1, 4})
        result = run_backtest(strategy, CANDLES, CAPITAL)
        assert strategy.consulted_exit == [3, 4]
        assert [e.side for e in result.log] == [Side.BUY, Side.SELL]

    def test_open_position_not_force_closed(self) -> None:
        """A position open at the end is not a trade."""
        result = run_backtest(ScriptedStrategy({1}, set()), CANDLES, CAPITAL)
        assert result.trades == ()
        assert result.final_capital == CAPITAL
        assert [e.side for e in result.log] == [Side.BUY]

    def test_start_index_skips_early_candles(self) -> None:
        """Entries before the start index are never evaluated."""
        result = run_backtest(ScriptedStrategy({0, 1}, set(), start=2), CANDLES, CAPITAL)
        assert result.log == ()

    def test_empty_candles(self) -> None:
        """No candles yield an empty result without preparing the strategy."""
        strategy = ScriptedStrategy({1}, {2})
        result = run_backtest(strategy, [], CAPITAL)
        assert not strategy.prepared
        assert result.symbol == ""
        assert result.trades == ()
        assert result.final_capital == CAPITAL
