"""Domain exceptions for the signal scanner."""


class SignalScannerError(Exception):
    """Base exception for signal scanner errors."""


class DataUnavailableError(SignalScannerError):
    """No usable market data could be obtained for an instrument.

    Raised when every listing venue fails or the provider returns an empty
    series.
    """

    def __init__(self, code: str, msg: str = "No data available") -> None:
        """Initialize the error.

        Args:
            code: Instrument code that could not be resolved.
            msg: Human-readable explanation.

        """
        super().__init__(f"{code}: {msg}")
        self.code = code
        self.msg = msg


class InsufficientHistoryError(SignalScannerError):
    """Fewer candles are available than an analysis requires."""

    def __init__(self, required: int, actual: int) -> None:
        """Initialize the error.

        Args:
            required: Minimum number of candles needed.
            actual: Number of candles supplied.

        """
        super().__init__(f"Need at least {required} candles, got {actual}")
        self.required = required
        self.actual = actual
