"""Rule-based strategies implementing the ``Strategy`` protocol.

Each strategy owns both its backtest entry/exit rules and its as-of-today
classifier, so the two stay consistent.
"""
