"""Aptos adapters: REST client, Liquidswap router, signer, submitter."""

from .credential_provider import WalletCredentialProvider
from .liquidswap_router import LiquidswapRouter, amount_out, min_amount_out
from .rest_client import AptosRestClient
from .signer import Ed25519Signer, derive_address, parse_private_key
from .transaction_submitter import AptosTransactionSubmitter

__all__ = [
    "AptosRestClient",
    "LiquidswapRouter",
    "AptosTransactionSubmitter",
    "Ed25519Signer",
    "WalletCredentialProvider",
    "parse_private_key",
    "derive_address",
    "amount_out",
    "min_amount_out",
]
