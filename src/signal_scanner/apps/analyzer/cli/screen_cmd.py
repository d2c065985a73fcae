"""CLI command for screening a universe with one strategy."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from signal_scanner.apps.analyzer.cli._helpers import (
    build_history_provider,
    configure_verbose_logging,
    fail,
    resolve_range,
    strategy_id,
    validate_range,
    validate_scope,
    validate_source,
    validate_strategy,
)
from signal_scanner.apps.analyzer.cli._output import print_screen
from signal_scanner.apps.analyzer.scanner import ScanConfig, Scanner
from signal_scanner.core.exceptions import SignalScannerError
from signal_scanner.core.models import ScanScope, ScreenResult
from signal_scanner.data.universe import load_universe


def screen(  # noqa: PLR0913
    strategy: Annotated[
        str,
        typer.Option(
            help="Strategy: MA, RSI, BREAKOUT, BOLLINGER, MACD, SUPERTREND",
            callback=validate_strategy,
        ),
    ] = "MA",
    history_range: Annotated[
        str | None,
        typer.Option("--range", help="History range (1y, 2y, 5y)", callback=validate_range),
    ] = None,
    scope: Annotated[
        str, typer.Option(help="Universe: popular or all", callback=validate_scope)
    ] = "popular",
    universe_file: Annotated[
        Path | None, typer.Option(help="CSV of code,name rows for --scope all")
    ] = None,
    signals_only: Annotated[
        bool, typer.Option(help="Only show instruments with a signal or prediction")
    ] = False,  # noqa: FBT002
    source: Annotated[
        str, typer.Option(help="Data source: yahoo or csv", callback=validate_source)
    ] = "yahoo",
    csv: Annotated[Path | None, typer.Option(help="Path to CSV candle data file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log scan progress")] = False,  # noqa: FBT002
) -> None:
    """Backtest and classify every instrument in the universe under one strategy."""
    if verbose:
        configure_verbose_logging()
    asyncio.run(
        _screen(
            strategy=strategy,
            history_range=history_range,
            scope=scope,
            universe_file=universe_file,
            signals_only=signals_only,
            source=source,
            csv=csv,
        )
    )


async def _screen(  # noqa: PLR0913
    *,
    strategy: str,
    history_range: str | None,
    scope: str,
    universe_file: Path | None,
    signals_only: bool,
    source: str,
    csv: Path | None,
) -> list[ScreenResult]:
    """Run the screen and print the table."""
    try:
        universe = load_universe(ScanScope(scope), universe_file)
    except SignalScannerError as exc:
        fail(exc)
    provider, client = build_history_provider(source, csv)
    try:
        scanner = Scanner(provider, ScanConfig.from_config())
        results = await scanner.screen(
            universe, strategy_id(strategy), resolve_range(history_range)
        )
    finally:
        if client is not None:
            await client.close()

    if signals_only:
        results = [r for r in results if r.signal is not None or r.prediction is not None]
    print_screen(results)
    return results
