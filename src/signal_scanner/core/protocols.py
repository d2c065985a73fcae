"""Structural protocols for pluggable data sources and strategies.

Define the provider interfaces that decouple the analyzer from concrete
market-data sources, and the ``Strategy`` shape the backtest engine and
signal classifier rely on. Any class whose shape matches these protocols
can be used without explicit inheritance.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from signal_scanner.core.models import (
    Candle,
    Fundamentals,
    HistoryRange,
    Interval,
    Quote,
    SignalAnalysis,
)


@runtime_checkable
class HistoryProvider(Protocol):
    """Async provider of daily candle history.

    Implementors return candles sorted ascending by date, or raise
    ``DataUnavailableError`` when the instrument cannot be resolved.
    """

    async def get_history(
        self,
        code: str,
        history_range: HistoryRange,
        interval: Interval,
    ) -> list[Candle]:
        """Return candles for the instrument over the requested range."""
        ...


@runtime_checkable
class QuoteProvider(Protocol):
    """Async provider of current quote snapshots."""

    async def get_quote(self, code: str) -> Quote:
        """Return the latest quote for the instrument."""
        ...


@runtime_checkable
class FundamentalsProvider(Protocol):
    """Async provider of scalar financial ratios."""

    async def get_fundamentals(self, code: str) -> Fundamentals | None:
        """Return the instrument's ratios, or ``None`` when unavailable."""
        ...


@runtime_checkable
class Strategy(Protocol):
    """Rule-based long-only strategy over a fixed candle sequence.

    ``prepare`` computes the indicator series once for a run. The engine
    then walks indices from ``start_index`` and asks for an entry reason
    while flat or an exit reason while holding; ``None`` means hold.
    ``analyze`` classifies the latest candle independently of any run.
    """

    @property
    def name(self) -> str:
        """Return the strategy name."""
        ...

    def prepare(self, candles: Sequence[Candle]) -> None:
        """Compute the indicator series for ``candles``."""
        ...

    def start_index(self, count: int) -> int:
        """Return the first index the engine should evaluate."""
        ...

    def entry_reason(self, i: int) -> str | None:
        """Return why a position should be opened at index ``i``, if at all."""
        ...

    def exit_reason(self, i: int) -> str | None:
        """Return why the open position should be closed at index ``i``, if at all."""
        ...

    def analyze(self, candles: Sequence[Candle]) -> SignalAnalysis:
        """Classify the latest candle into a signal, prediction, and levels."""
        ...
