"""Repository interfaces для CopyTrading bounded context."""

from .copy_trade_session_repository import CopyTradeSessionRepository
from .wallet_repository import WalletRecord, WalletRepository

__all__ = ["CopyTradeSessionRepository", "WalletRepository", "WalletRecord"]
