"""CLI command for backtesting one strategy on one instrument."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from signal_scanner.apps.analyzer.cli._helpers import (
    build_history_provider,
    fail,
    resolve_capital,
    resolve_range,
    strategy_id,
    validate_range,
    validate_source,
    validate_strategy,
)
from signal_scanner.apps.analyzer.cli._output import print_backtest
from signal_scanner.apps.analyzer.strategy_factory import backtest_strategy
from signal_scanner.core.exceptions import SignalScannerError
from signal_scanner.core.models import BacktestResult, Interval


def backtest(  # noqa: PLR0913
    code: Annotated[str, typer.Argument(help="Instrument code, e.g. 2330")],
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
    capital: Annotated[float | None, typer.Option(help="Initial capital")] = None,
    source: Annotated[
        str, typer.Option(help="Data source: yahoo or csv", callback=validate_source)
    ] = "yahoo",
    csv: Annotated[Path | None, typer.Option(help="Path to CSV candle data file")] = None,
    show_log: Annotated[bool, typer.Option("--log", help="Print the BUY/SELL log")] = False,  # noqa: FBT002
) -> None:
    """Backtest a strategy over an instrument's daily history."""
    asyncio.run(
        run_backtest(
            code=code,
            strategy=strategy,
            history_range=history_range,
            capital=capital,
            source=source,
            csv=csv,
            show_log=show_log,
        )
    )


async def run_backtest(  # noqa: PLR0913
    *,
    code: str,
    strategy: str,
    history_range: str | None,
    capital: float | None,
    source: str,
    csv: Path | None,
    show_log: bool,
) -> BacktestResult:
    """Fetch history, run the backtest, and print the result."""
    provider, client = build_history_provider(source, csv)
    try:
        candles = await provider.get_history(code, resolve_range(history_range), Interval.D1)
        result = backtest_strategy(
            strategy_id(strategy), candles, initial_capital=resolve_capital(capital)
        )
    except SignalScannerError as exc:
        fail(exc)
    finally:
        if client is not None:
            await client.close()
    print_backtest(result, show_log=show_log)
    return result
