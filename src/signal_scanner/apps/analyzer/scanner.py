"""Market scanner that screens and ranks instruments across strategies.

Process a universe in fixed-size batches. Every instrument's history is
fetched concurrently within a batch, then the synchronous backtest and
classifier run on it. A short pause between batches throttles requests
to the data provider. A failure for one instrument is logged and the
instrument is skipped; it never aborts the scan.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TypeVar

from signal_scanner.apps.analyzer.portfolio import DEFAULT_INITIAL_CAPITAL, round_half_up
from signal_scanner.apps.analyzer.strategy_factory import (
    STRATEGIES,
    StrategyParams,
    backtest_strategy,
    build_strategy,
)
from signal_scanner.core.config import get_config
from signal_scanner.core.models import (
    HUNDRED,
    Candle,
    DailyPick,
    HistoryRange,
    Instrument,
    Interval,
    ScreenResult,
    Side,
    StrategyId,
)
from signal_scanner.core.protocols import HistoryProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_PICK_WIN_RATE = Decimal(40)
MIN_PICK_AVG_RETURN = Decimal("0.5")
WIN_RATE_WEIGHT = Decimal("0.6")
AVG_RETURN_WEIGHT = Decimal(10)


@dataclass(frozen=True)
class ScanConfig:
    """Batching and throttling settings for a scan."""

    batch_size: int = 5
    screen_pause_seconds: float = 0.2
    picks_pause_seconds: float = 0.1
    preload_batch_size: int = 3
    preload_pause_seconds: float = 0.2
    history_range: HistoryRange = HistoryRange.Y2

    def __post_init__(self) -> None:
        """Validate batch sizes."""
        if self.batch_size < 1 or self.preload_batch_size < 1:
            msg = "batch sizes must be >= 1"
            raise ValueError(msg)

    @classmethod
    def from_config(cls) -> "ScanConfig":
        """Build settings from the ``scanner`` configuration section."""
        section = get_config().get_section("scanner")
        defaults = cls()
        return cls(
            batch_size=int(section.get("batch_size", defaults.batch_size)),
            screen_pause_seconds=float(
                section.get("screen_pause_seconds", defaults.screen_pause_seconds)
            ),
            picks_pause_seconds=float(
                section.get("picks_pause_seconds", defaults.picks_pause_seconds)
            ),
            preload_batch_size=int(
                section.get("preload_batch_size", defaults.preload_batch_size)
            ),
            preload_pause_seconds=float(
                section.get("preload_pause_seconds", defaults.preload_pause_seconds)
            ),
            history_range=HistoryRange(
                section.get("history_range", defaults.history_range.value)
            ),
        )


def score_pick(win_rate: Decimal, avg_trade_return: Decimal) -> Decimal:
    """Return the daily-pick ranking score for a strategy's backtest stats."""
    return win_rate * WIN_RATE_WEIGHT + avg_trade_return * AVG_RETURN_WEIGHT


def _screen_sort_key(result: ScreenResult) -> tuple[bool, bool, Decimal]:
    """Order confirmed signals first, then predictions, then by total return."""
    return (result.signal is None, result.prediction is None, -result.total_return)


class Scanner:
    """Screen a universe with one strategy or rank BUY signals across all.

    Call ``stop()`` (for example from the progress callback) to end a scan
    at the next batch boundary; the batch in flight always completes.
    """

    def __init__(
        self,
        provider: HistoryProvider,
        config: ScanConfig | None = None,
        on_progress: Callable[[int], None] | None = None,
        params: StrategyParams | None = None,
        initial_capital: Decimal = DEFAULT_INITIAL_CAPITAL,
    ) -> None:
        """Initialize the scanner.

        Args:
            provider: Source of daily history, typically cache-wrapped.
            config: Batch and pause settings.
            on_progress: Called with a 0-100 percentage after every batch.
            params: Strategy parameters; defaults apply otherwise.
            initial_capital: Notional capital for the backtests.

        """
        self._provider = provider
        self._config = config or ScanConfig()
        self._on_progress = on_progress
        self._params = params
        self._initial_capital = initial_capital
        self._stopped = False

    @property
    def stopped(self) -> bool:
        """Return whether a stop was requested during the current scan."""
        return self._stopped

    def stop(self) -> None:
        """Request the running scan to end at the next batch boundary."""
        logger.info("Scan stop requested")
        self._stopped = True

    async def screen(
        self,
        universe: Sequence[Instrument],
        strategy_id: StrategyId,
        history_range: HistoryRange | None = None,
    ) -> list[ScreenResult]:
        """Backtest and classify every instrument under one strategy.

        Args:
            universe: Instruments to scan.
            strategy_id: Strategy to evaluate.
            history_range: Lookback range; defaults to the configured range.

        Returns:
            Results ordered with confirmed signals first, then predictions,
            then by descending total return.

        """
        history_range = history_range or self._config.history_range

        async def _screen_one(instrument: Instrument) -> list[ScreenResult]:
            """Screen a single instrument, returning an empty list on failure."""
            try:
                candles = await self._fetch(instrument, history_range)
                stats = backtest_strategy(
                    strategy_id, candles, self._params, self._initial_capital
                )
                analysis = build_strategy(strategy_id, self._params).analyze(candles)
            except Exception:
                logger.warning("Skipping %s: screening failed", instrument.code, exc_info=True)
                return []
            return [
                ScreenResult(
                    instrument=instrument,
                    win_rate=stats.win_rate,
                    total_return=stats.total_return,
                    trade_count=len(stats.trades),
                    signal=analysis.signal,
                    prediction=analysis.prediction,
                    details=analysis.details,
                )
            ]

        logger.info(
            "Screening %d instruments with %s over %s",
            len(universe),
            strategy_id.value,
            history_range.value,
        )
        results = await self._run_batches(
            universe, self._config.batch_size, self._config.screen_pause_seconds, _screen_one
        )
        return sorted(results, key=_screen_sort_key)

    async def daily_picks(self, universe: Sequence[Instrument]) -> list[DailyPick]:
        """Rank today's confirmed BUY signals across every strategy.

        A candidate is kept only when its strategy's backtest on the same
        instrument shows a win rate of at least 40% and an average trade
        return of at least 0.5%.

        Args:
            universe: Instruments to scan.

        Returns:
            Picks sorted by descending score.

        """

        async def _picks_for(instrument: Instrument) -> list[DailyPick]:
            """Collect the qualifying picks for a single instrument."""
            try:
                candles = await self._fetch(instrument, self._config.history_range)
                return self._rank_candidates(instrument, candles)
            except Exception:
                logger.warning("Skipping %s: pick scan failed", instrument.code, exc_info=True)
                return []

        logger.info("Scanning %d instruments for daily picks", len(universe))
        picks = await self._run_batches(
            universe, self._config.batch_size, self._config.picks_pause_seconds, _picks_for
        )
        return sorted(picks, key=lambda p: p.score, reverse=True)

    async def preload(self, universe: Sequence[Instrument]) -> int:
        """Warm the provider's cache for ``universe``, ignoring failures.

        Returns:
            The number of instruments fetched successfully.

        """

        async def _load(instrument: Instrument) -> list[Instrument]:
            """Fetch one instrument's history, reporting success."""
            try:
                await self._fetch(instrument, self._config.history_range)
            except Exception:  # noqa: BLE001
                logger.debug("Preload of %s failed", instrument.code)
                return []
            return [instrument]

        loaded = await self._run_batches(
            universe,
            self._config.preload_batch_size,
            self._config.preload_pause_seconds,
            _load,
        )
        logger.info("Preloaded %d of %d instruments", len(loaded), len(universe))
        return len(loaded)

    def _rank_candidates(self, instrument: Instrument, candles: list[Candle]) -> list[DailyPick]:
        """Return the qualifying BUY picks for one instrument's candles."""
        picks: list[DailyPick] = []
        for strategy_id, entry in STRATEGIES.items():
            analysis = build_strategy(strategy_id, self._params).analyze(candles)
            if analysis.signal is not Side.BUY:
                continue
            stats = backtest_strategy(strategy_id, candles, self._params, self._initial_capital)
            if stats.win_rate < MIN_PICK_WIN_RATE or stats.avg_trade_return < MIN_PICK_AVG_RETURN:
                logger.debug(
                    "Rejected %s/%s: win rate %s, avg return %s",
                    instrument.code,
                    strategy_id.value,
                    stats.win_rate,
                    stats.avg_trade_return,
                )
                continue
            picks.append(
                DailyPick(
                    instrument=instrument,
                    strategy=strategy_id,
                    style=entry.style,
                    details=analysis.details,
                    entry=analysis.suggested_entry,
                    target=analysis.suggested_target,
                    stop_loss=analysis.suggested_stop_loss,
                    win_rate=stats.win_rate,
                    expected_return=stats.avg_trade_return,
                    score=score_pick(stats.win_rate, stats.avg_trade_return),
                )
            )
        return picks

    async def _fetch(self, instrument: Instrument, history_range: HistoryRange) -> list[Candle]:
        """Fetch daily candles for ``instrument``."""
        return await self._provider.get_history(instrument.code, history_range, Interval.D1)

    async def _run_batches(
        self,
        universe: Sequence[Instrument],
        batch_size: int,
        pause_seconds: float,
        work: Callable[[Instrument], Awaitable[list[T]]],
    ) -> list[T]:
        """Apply ``work`` to ``universe`` in concurrent batches.

        Reset the stop flag, then check it before every batch. Report
        progress after each batch and pause before the next one.
        """
        self._stopped = False
        results: list[T] = []
        total = len(universe)
        for start in range(0, total, batch_size):
            if self._stopped:
                logger.info("Scan stopped after %d of %d instruments", start, total)
                break
            batch = universe[start : start + batch_size]
            for batch_result in await asyncio.gather(*(work(inst) for inst in batch)):
                results.extend(batch_result)
            done = start + len(batch)
            self._report_progress(done, total)
            if done < total:
                await asyncio.sleep(pause_seconds)
        return results

    def _report_progress(self, done: int, total: int) -> None:
        """Send the completed percentage to the progress callback."""
        percent = int(round_half_up(Decimal(done) * HUNDRED / Decimal(total)))
        logger.info("Scan progress: %d%% (%d/%d)", percent, done, total)
        if self._on_progress is not None:
            self._on_progress(percent)
