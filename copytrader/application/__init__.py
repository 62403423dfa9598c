"""Application layer - use cases that orchestrate the domain."""
