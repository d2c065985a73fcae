"""CLI subpackage for the analyzer.

Create the Typer application and register every command module.
"""

import typer

from signal_scanner.apps.analyzer.cli.backtest_cmd import backtest
from signal_scanner.apps.analyzer.cli.health_cmd import health
from signal_scanner.apps.analyzer.cli.picks_cmd import picks
from signal_scanner.apps.analyzer.cli.quote_cmd import quote
from signal_scanner.apps.analyzer.cli.screen_cmd import screen
from signal_scanner.apps.analyzer.cli.signal_cmd import signal

app = typer.Typer(help="Backtest, screen, and rank Taiwan stock signals")

app.command()(backtest)
app.command()(signal)
app.command()(screen)
app.command()(picks)
app.command()(health)
app.command()(quote)

__all__ = ["app"]
