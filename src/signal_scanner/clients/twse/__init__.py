"""TWSE market information quote client."""

from signal_scanner.clients.twse.client import TwseClient
from signal_scanner.clients.twse.exceptions import TwseAPIError, TwseError

__all__ = [
    "TwseAPIError",
    "TwseClient",
    "TwseError",
]
