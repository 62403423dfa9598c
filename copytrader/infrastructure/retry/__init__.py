from .exponential_backoff import retry_with_backoff

__all__ = ["retry_with_backoff"]
