"""Shared helpers for the analyzer CLI commands.

Provide option validation, config-backed defaults, provider construction,
and error reporting used by every command module. Keep these separate
from the command modules to avoid circular imports and duplication.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import NoReturn

import typer

from signal_scanner.apps.analyzer.strategy_factory import STRATEGY_NAMES
from signal_scanner.clients.yahoo.client import YahooClient
from signal_scanner.core.config import get_config
from signal_scanner.core.models import HistoryRange, ScanScope, StrategyId
from signal_scanner.core.protocols import HistoryProvider
from signal_scanner.data.cache import CachedHistoryProvider
from signal_scanner.data.providers.csv_provider import CsvHistoryProvider
from signal_scanner.data.providers.yahoo import (
    FALLBACK_SUFFIX,
    PRIMARY_SUFFIX,
    YahooFundamentalsProvider,
    YahooHistoryProvider,
)

VALID_SOURCES = ("yahoo", "csv")
VALID_RANGES = tuple(r.value for r in HistoryRange)
VALID_SCOPES = tuple(s.value for s in ScanScope)


def validate_source(value: str) -> str:
    """Validate that the data source is one of the supported providers.

    Raise ``typer.BadParameter`` if the source is not recognised.
    """
    if value not in VALID_SOURCES:
        raise typer.BadParameter(f"Must be one of: {', '.join(VALID_SOURCES)}")
    return value


def validate_strategy(value: str) -> str:
    """Validate the strategy identifier case-insensitively and normalise it to upper case."""
    normalised = value.upper()
    if normalised not in STRATEGY_NAMES:
        raise typer.BadParameter(f"Must be one of: {', '.join(STRATEGY_NAMES)}")
    return normalised


def validate_range(value: str | None) -> str | None:
    """Validate that the history range, when given, is supported."""
    if value is not None and value not in VALID_RANGES:
        raise typer.BadParameter(f"Must be one of: {', '.join(VALID_RANGES)}")
    return value


def validate_scope(value: str) -> str:
    """Validate the universe scope."""
    if value not in VALID_SCOPES:
        raise typer.BadParameter(f"Must be one of: {', '.join(VALID_SCOPES)}")
    return value


def configure_verbose_logging() -> None:
    """Enable INFO-level logging for scan progress output."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(message)s",
        datefmt="%H:%M:%S",
    )


def resolve_capital(capital: float | None) -> Decimal:
    """Resolve the initial capital from the CLI option or YAML config default.

    Fall back to ``100000`` when neither the CLI option nor the config key
    ``backtest.initial_capital`` is set.
    """
    if capital is not None:
        return Decimal(str(capital))
    raw: object = get_config().get("backtest.initial_capital", 100000)
    return Decimal(str(raw))


def resolve_range(raw: str | None) -> HistoryRange:
    """Resolve the history range from the CLI option or ``scanner.history_range``."""
    value = raw or get_config().get("scanner.history_range", HistoryRange.Y2.value)
    return HistoryRange(str(value))


def build_yahoo_client() -> YahooClient:
    """Create a Yahoo client from configuration."""
    return YahooClient.from_config()


def yahoo_suffixes() -> tuple[str, str]:
    """Return the configured primary and fallback listing suffixes."""
    config = get_config()
    return (
        str(config.get("yahoo.primary_suffix", PRIMARY_SUFFIX)),
        str(config.get("yahoo.fallback_suffix", FALLBACK_SUFFIX)),
    )


def build_history_provider(
    source: str,
    csv_path: Path | None,
) -> tuple[HistoryProvider, YahooClient | None]:
    """Build a cache-wrapped history provider based on the selected source.

    Return the provider and an optional client that must be closed after use.
    """
    if source == "yahoo":
        client = build_yahoo_client()
        provider = YahooHistoryProvider(client, suffixes=yahoo_suffixes())
        return CachedHistoryProvider(provider), client

    if csv_path is None:
        raise typer.BadParameter("--csv is required when --source is csv", param_hint="'--csv'")
    return CachedHistoryProvider(CsvHistoryProvider(csv_path)), None


def build_fundamentals_provider(client: YahooClient) -> YahooFundamentalsProvider:
    """Create a fundamentals provider sharing ``client``."""
    return YahooFundamentalsProvider(client, suffixes=yahoo_suffixes())


def strategy_id(value: str) -> StrategyId:
    """Convert a validated strategy option into its ``StrategyId``."""
    return StrategyId(value)


def fail(exc: Exception) -> NoReturn:
    """Report ``exc`` on stderr and exit with status 1."""
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from exc
