"""CopyTrading use cases (application layer)."""
