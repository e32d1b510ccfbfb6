"""Infrastructure adapters: key-value store, logging and metrics."""
