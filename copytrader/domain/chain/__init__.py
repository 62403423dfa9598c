"""Chain Bounded Context - Aptos fullnode, DEX router and submission ports.

Exports:
    Value Objects: TransactionRecord, EntryFunctionPayload
    Ports: ChainReader, DexRouter, TransactionSigner, CredentialProvider, TransactionSubmitter
    Exceptions: ChainError, ChainReadError, QuoteError, TransactionSubmissionError, ...
"""

from .exceptions import (
    ChainDataError,
    ChainError,
    ChainReadError,
    ChainResourceNotFoundError,
    QuoteError,
    TransactionConfirmationError,
    TransactionSubmissionError,
)
from .ports import (
    ChainReader,
    CredentialProvider,
    DexRouter,
    TransactionSigner,
    TransactionSubmitter,
)
from .value_objects import EntryFunctionPayload, TransactionRecord

__all__ = [
    # Value Objects
    "TransactionRecord",
    "EntryFunctionPayload",
    # Ports
    "ChainReader",
    "DexRouter",
    "TransactionSigner",
    "CredentialProvider",
    "TransactionSubmitter",
    # Exceptions
    "ChainError",
    "ChainReadError",
    "ChainDataError",
    "ChainResourceNotFoundError",
    "QuoteError",
    "TransactionSubmissionError",
    "TransactionConfirmationError",
]
