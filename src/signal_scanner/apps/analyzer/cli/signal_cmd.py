"""CLI command for classifying today's candle under one or all strategies."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from signal_scanner.apps.analyzer.cli._helpers import (
    build_history_provider,
    fail,
    resolve_range,
    validate_source,
)
from signal_scanner.apps.analyzer.cli._output import print_signal
from signal_scanner.apps.analyzer.strategies.base import MIN_ANALYSIS_CANDLES
from signal_scanner.apps.analyzer.strategy_factory import STRATEGIES, STRATEGY_NAMES, analyze_signal
from signal_scanner.core.exceptions import InsufficientHistoryError, SignalScannerError
from signal_scanner.core.models import Interval, SignalAnalysis, StrategyId


def _validate_strategies(value: str | None) -> str | None:
    """Validate a comma-separated list of strategy identifiers."""
    if value is None:
        return None
    names = [v.strip().upper() for v in value.split(",") if v.strip()]
    unknown = [n for n in names if n not in STRATEGY_NAMES]
    if unknown or not names:
        raise typer.BadParameter(f"Must be one or more of: {', '.join(STRATEGY_NAMES)}")
    return ",".join(names)


def signal(
    code: Annotated[str, typer.Argument(help="Instrument code, e.g. 2330")],
    strategy: Annotated[
        str | None,
        typer.Option(
            help="Comma-separated strategies (default: all six)",
            callback=_validate_strategies,
        ),
    ] = None,
    source: Annotated[
        str, typer.Option(help="Data source: yahoo or csv", callback=validate_source)
    ] = "yahoo",
    csv: Annotated[Path | None, typer.Option(help="Path to CSV candle data file")] = None,
) -> None:
    """Show today's signal, prediction, and suggested levels."""
    asyncio.run(_signal(code=code, strategy=strategy, source=source, csv=csv))


async def _signal(
    *,
    code: str,
    strategy: str | None,
    source: str,
    csv: Path | None,
) -> dict[StrategyId, SignalAnalysis]:
    """Fetch history and classify it under each requested strategy.

    Unlike a scan, a single lookup with too little history is an error.
    """
    ids = [StrategyId(s) for s in strategy.split(",")] if strategy else list(STRATEGIES)
    provider, client = build_history_provider(source, csv)
    try:
        candles = await provider.get_history(code, resolve_range(None), Interval.D1)
    except SignalScannerError as exc:
        fail(exc)
    finally:
        if client is not None:
            await client.close()

    if len(candles) < MIN_ANALYSIS_CANDLES:
        fail(InsufficientHistoryError(MIN_ANALYSIS_CANDLES, len(candles)))

    analyses: dict[StrategyId, SignalAnalysis] = {}
    for sid in ids:
        analyses[sid] = analyze_signal(sid, candles)
        print_signal(code, STRATEGIES[sid].label, analyses[sid])
    return analyses
