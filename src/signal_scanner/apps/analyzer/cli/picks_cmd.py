"""CLI command for ranking today's BUY signals across all strategies."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from signal_scanner.apps.analyzer.cli._helpers import (
    build_history_provider,
    configure_verbose_logging,
    fail,
    validate_scope,
    validate_source,
)
from signal_scanner.apps.analyzer.cli._output import print_picks
from signal_scanner.apps.analyzer.scanner import ScanConfig, Scanner
from signal_scanner.core.exceptions import SignalScannerError
from signal_scanner.core.models import DailyPick, ScanScope
from signal_scanner.data.universe import load_universe


def picks(  # noqa: PLR0913
    scope: Annotated[
        str, typer.Option(help="Universe: popular or all", callback=validate_scope)
    ] = "popular",
    universe_file: Annotated[
        Path | None, typer.Option(help="CSV of code,name rows for --scope all")
    ] = None,
    limit: Annotated[int, typer.Option(help="Maximum picks to print (0 for all)", min=0)] = 20,
    source: Annotated[
        str, typer.Option(help="Data source: yahoo or csv", callback=validate_source)
    ] = "yahoo",
    csv: Annotated[Path | None, typer.Option(help="Path to CSV candle data file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log scan progress")] = False,  # noqa: FBT002
) -> None:
    """Scan the universe and rank confirmed BUY signals by historical edge."""
    if verbose:
        configure_verbose_logging()
    asyncio.run(
        _picks(scope=scope, universe_file=universe_file, limit=limit, source=source, csv=csv)
    )


async def _picks(
    *,
    scope: str,
    universe_file: Path | None,
    limit: int,
    source: str,
    csv: Path | None,
) -> list[DailyPick]:
    """Run the daily-picks scan and print the ranking."""
    try:
        universe = load_universe(ScanScope(scope), universe_file)
    except SignalScannerError as exc:
        fail(exc)
    provider, client = build_history_provider(source, csv)
    try:
        ranked = await Scanner(provider, ScanConfig.from_config()).daily_picks(universe)
    finally:
        if client is not None:
            await client.close()

    print_picks(ranked[:limit] if limit else ranked)
    return ranked
