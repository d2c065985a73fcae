"""Exceptions for the Yahoo Finance client."""


class YahooError(Exception):
    """Base exception for Yahoo Finance errors."""


class YahooAPIError(YahooError):
    """API error with the HTTP status and Yahoo's error description."""

    def __init__(self, status: int, msg: str) -> None:
        """Initialize Yahoo API error.

        Args:
            status: HTTP status code of the failed response.
            msg: Human-readable error message from the API.

        """
        super().__init__(f"[{status}] {msg}")
        self.status = status
        self.msg = msg
