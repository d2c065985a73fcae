"""Yahoo Finance public API client."""

from signal_scanner.clients.yahoo.client import YahooClient
from signal_scanner.clients.yahoo.exceptions import YahooAPIError, YahooError

__all__ = [
    "YahooAPIError",
    "YahooClient",
    "YahooError",
]
