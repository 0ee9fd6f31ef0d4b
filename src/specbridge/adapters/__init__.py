"""Source and target adapters."""
