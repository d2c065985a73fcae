"""Core models, protocols, configuration, and domain errors."""
