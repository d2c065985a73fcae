"""HTTP clients for market-data services."""
