"""Ports (interfaces) для Chain bounded context."""

from .chain_reader import ChainReader
from .dex_router import DexRouter
from .transaction_signer import CredentialProvider, TransactionSigner
from .transaction_submitter import TransactionSubmitter

__all__ = [
    "ChainReader",
    "DexRouter",
    "TransactionSigner",
    "CredentialProvider",
    "TransactionSubmitter",
]
