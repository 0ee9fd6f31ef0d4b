"""Core domain: models, errors, configuration and the sync engine."""
