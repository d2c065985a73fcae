"""Terminal output formatters for the analyzer CLI.

Centralise all printing so that the individual command modules remain
focused on orchestration.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from signal_scanner.core.models import (
        BacktestResult,
        DailyPick,
        HealthReport,
        Quote,
        ScreenResult,
        SignalAnalysis,
    )

_WIDTH = 50


def _price(value: Decimal | None) -> str:
    """Format an optional price with two decimals."""
    return "-" if value is None else f"{value:.2f}"


def print_backtest(result: BacktestResult, *, show_log: bool = False) -> None:
    """Print a formatted summary of the backtest result to the terminal."""
    typer.echo(f"\n{'=' * _WIDTH}")
    typer.echo(f"Strategy:        {result.strategy_name}")
    typer.echo(f"Symbol:          {result.symbol}")
    typer.echo(f"Initial Capital: {result.initial_capital}")
    typer.echo(f"Final Capital:   {result.final_capital}")
    typer.echo(f"Trades:          {len(result.trades)}")
    typer.echo(f"Win Rate:        {result.win_rate:.2f}%")
    typer.echo(f"Total Return:    {result.total_return:.2f}%")
    typer.echo(f"Avg Trade:       {result.avg_trade_return:.2f}%")
    if show_log and result.log:
        typer.echo(f"\n{'--- Log ---':^{_WIDTH}}")
        for entry in result.log:
            pnl = f"  ({entry.pnl_pct:+.2f}%)" if entry.pnl_pct is not None else ""
            typer.echo(
                f"  {entry.date}  {entry.side.value:<4} {entry.price:>10.2f}  {entry.reason}{pnl}"
            )
    typer.echo(f"{'=' * _WIDTH}\n")


def print_signal(code: str, strategy: str, analysis: SignalAnalysis) -> None:
    """Print today's classification and suggested levels."""
    if analysis.signal is not None:
        state = analysis.signal.value
    elif analysis.prediction is not None:
        state = analysis.prediction.value
    else:
        state = "NONE"
    typer.echo(f"{code} [{strategy}]: {state}")
    if analysis.details:
        typer.echo(f"  {analysis.details}")
    typer.echo(
        f"  Entry {_price(analysis.suggested_entry)}"
        f"  Target {_price(analysis.suggested_target)}"
        f"  Stop {_price(analysis.suggested_stop_loss)}"
    )


def print_screen(results: Sequence[ScreenResult]) -> None:
    """Print a screening table."""
    header = f"{'Code':<6} {'Name':<12} {'Win%':>7} {'Return%':>9} {'Trades':>6}  Signal"
    typer.echo(header)
    typer.echo("-" * len(header))
    for r in results:
        state = ""
        if r.signal is not None:
            state = r.signal.value
        elif r.prediction is not None:
            state = r.prediction.value
        typer.echo(
            f"{r.instrument.code:<6} {r.instrument.name:<12} {r.win_rate:>7.1f} "
            f"{r.total_return:>9.1f} {r.trade_count:>6}  {state} {r.details}".rstrip()
        )
    typer.echo(f"\n{len(results)} instruments screened")


def print_picks(picks: Sequence[DailyPick]) -> None:
    """Print the ranked daily picks."""
    if not picks:
        typer.echo("No qualifying BUY signals today")
        return
    header = (
        f"{'Code':<6} {'Name':<12} {'Strategy':<11} {'Score':>7} {'Win%':>6} "
        f"{'Exp%':>6} {'Entry':>9} {'Target':>9} {'Stop':>9}"
    )
    typer.echo(header)
    typer.echo("-" * len(header))
    for p in picks:
        typer.echo(
            f"{p.instrument.code:<6} {p.instrument.name:<12} {p.strategy.value:<11} "
            f"{p.score:>7.1f} {p.win_rate:>6.1f} {p.expected_return:>6.2f} "
            f"{_price(p.entry):>9} {_price(p.target):>9} {_price(p.stop_loss):>9}"
        )
        typer.echo(f"       {p.style.value}: {p.details}")


def print_health(code: str, report: HealthReport, entry_price: Decimal | None) -> None:
    """Print a health-check report."""
    typer.echo(f"\n{'=' * _WIDTH}")
    typer.echo(f"Health Check:    {code}")
    if entry_price is not None:
        typer.echo(f"Entry Price:     {entry_price:.2f}")
    typer.echo(f"Score:           {report.score} ({report.trend})")
    typer.echo(f"Stop Loss:       {report.stop_loss:.2f}  {report.stop_loss_reason}")
    typer.echo(f"Take Profit:     {report.take_profit:.2f}  {report.take_profit_reason}")
    typer.echo(f"SMA 5/20/60:     {report.sma5:.2f} / {report.sma20:.2f} / {report.sma60:.2f}")
    typer.echo(f"ATR / RSI:       {report.atr:.2f} / {report.rsi:.1f}")
    typer.echo(f"Support/Resist:  {report.support:.2f} / {report.resistance:.2f}")
    if report.fundamental is not None:
        typer.echo(f"Fundamentals:    {report.fundamental.score}")
    for reason in report.reasons:
        typer.echo(f"  - {reason}")
    typer.echo(f"{'=' * _WIDTH}\n")


def print_quote(quote: Quote) -> None:
    """Print a quote snapshot."""
    typer.echo(
        f"{quote.code} {quote.name}  {quote.price:.2f}  "
        f"{quote.change:+.2f} ({quote.change_pct:+.2f}%)  vol {quote.volume}"
    )
