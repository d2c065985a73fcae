"""CLI command for the single-instrument health check.

Combine one year of daily history, an entry price (given, or the live
quote when omitted), and Yahoo fundamentals into a ``HealthReport``.
"""

import asyncio
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated

import typer

from signal_scanner.apps.analyzer.cli._helpers import (
    build_fundamentals_provider,
    build_history_provider,
    fail,
    validate_source,
)
from signal_scanner.apps.analyzer.cli._output import print_health
from signal_scanner.apps.analyzer.health import analyze_health
from signal_scanner.clients.twse.client import TwseClient
from signal_scanner.core.exceptions import SignalScannerError
from signal_scanner.core.models import ZERO, Fundamentals, HealthReport, HistoryRange, Interval
from signal_scanner.data.providers.twse import TwseQuoteProvider


def _parse_price(value: str | None) -> Decimal | None:
    """Parse the optional entry price, rejecting non-positive values."""
    if value is None:
        return None
    try:
        price = Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"Invalid price '{value}'") from None
    if not price.is_finite() or price <= 0:
        raise typer.BadParameter("Entry price must be positive")
    return price


def health(
    code: Annotated[str, typer.Argument(help="Instrument code, e.g. 2330")],
    entry_price: Annotated[
        str | None, typer.Option(help="Planned or actual entry price (default: live price)")
    ] = None,
    source: Annotated[
        str, typer.Option(help="Data source: yahoo or csv", callback=validate_source)
    ] = "yahoo",
    csv: Annotated[Path | None, typer.Option(help="Path to CSV candle data file")] = None,
) -> None:
    """Score an instrument for holding or entering and suggest exits."""
    asyncio.run(
        _health(code=code, entry_price=_parse_price(entry_price), source=source, csv=csv)
    )


async def _health(
    *,
    code: str,
    entry_price: Decimal | None,
    source: str,
    csv: Path | None,
) -> HealthReport:
    """Gather inputs, run the health check, and print the report.

    Live inputs (quote and fundamentals) are only fetched for the Yahoo
    source; an offline CSV run relies on ``entry_price`` alone.
    """
    provider, client = build_history_provider(source, csv)
    fundamentals: Fundamentals | None = None
    try:
        candles = await provider.get_history(code, HistoryRange.Y1, Interval.D1)
        if client is not None:
            fundamentals = await build_fundamentals_provider(client).get_fundamentals(code)
            if entry_price is None:
                async with TwseClient.from_config() as twse:
                    live = (await TwseQuoteProvider(twse).get_quote(code)).price
                # a quote with neither a trade nor a prior close has a zero price
                entry_price = live if live > ZERO else None
        report = analyze_health(candles, entry_price, fundamentals)
    except SignalScannerError as exc:
        fail(exc)
    finally:
        if client is not None:
            await client.close()

    print_health(code, report, entry_price)
    return report
