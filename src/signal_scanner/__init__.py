"""Technical-analysis signal scanner for Taiwan-listed stocks."""

__version__ = "0.1.0"
