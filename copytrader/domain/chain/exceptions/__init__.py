"""Exceptions для Chain bounded context."""

from .chain_exceptions import (
    ChainDataError,
    ChainError,
    ChainReadError,
    ChainResourceNotFoundError,
    QuoteError,
    TransactionConfirmationError,
    TransactionSubmissionError,
)

__all__ = [
    "ChainError",
    "ChainReadError",
    "ChainDataError",
    "ChainResourceNotFoundError",
    "QuoteError",
    "TransactionSubmissionError",
    "TransactionConfirmationError",
]
