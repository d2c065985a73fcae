"""Stock signal analyzer.

Compute indicators over daily candles, backtest six rule-based long-only
strategies, classify today's candle into signals and predictions, and
rank instruments across a universe.
"""
