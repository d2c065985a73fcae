"""Exceptions for the TWSE quote client."""


class TwseError(Exception):
    """Base exception for TWSE errors."""


class TwseAPIError(TwseError):
    """HTTP-level failure from the TWSE MIS service."""

    def __init__(self, status: int, msg: str) -> None:
        """Initialize TWSE API error.

        Args:
            status: HTTP status code of the failed response.
            msg: Human-readable error message.

        """
        super().__init__(f"[{status}] {msg}")
        self.status = status
        self.msg = msg
