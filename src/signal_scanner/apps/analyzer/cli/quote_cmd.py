"""CLI command for the live TWSE quote snapshot."""

import asyncio
from typing import Annotated

import typer

from signal_scanner.apps.analyzer.cli._helpers import fail
from signal_scanner.apps.analyzer.cli._output import print_quote
from signal_scanner.clients.twse.client import TwseClient
from signal_scanner.core.exceptions import SignalScannerError
from signal_scanner.core.models import Quote
from signal_scanner.data.providers.twse import TwseQuoteProvider


def quote(code: Annotated[str, typer.Argument(help="Instrument code, e.g. 2330")]) -> None:
    """Show the current price, change, and volume."""
    asyncio.run(_quote(code=code))


async def _quote(*, code: str) -> Quote:
    """Fetch and print the quote for ``code``."""
    try:
        async with TwseClient.from_config() as client:
            snapshot = await TwseQuoteProvider(client).get_quote(code)
    except SignalScannerError as exc:
        fail(exc)
    print_quote(snapshot)
    return snapshot
