"""History, quote, and fundamentals providers implementing the core protocols."""
