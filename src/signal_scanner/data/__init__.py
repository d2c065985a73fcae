"""Market-data access: providers, history cache, and instrument universes."""
