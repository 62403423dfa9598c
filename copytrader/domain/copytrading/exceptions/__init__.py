"""Exceptions для CopyTrading bounded context."""

from .copy_trading_exceptions import (
    CopyTradingError,
    InvalidCredentialError,
    InvalidMasterAddressError,
    SessionAlreadyActiveError,
    SessionNotFoundError,
    TradeExecutionError,
    WalletNotFoundError,
)

__all__ = [
    "CopyTradingError",
    "SessionNotFoundError",
    "SessionAlreadyActiveError",
    "InvalidMasterAddressError",
    "WalletNotFoundError",
    "InvalidCredentialError",
    "TradeExecutionError",
]
