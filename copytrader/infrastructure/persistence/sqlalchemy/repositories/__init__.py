from .copy_trade_session_repository import SQLAlchemyCopyTradeSessionRepository
from .wallet_repository import SQLAlchemyWalletRepository

__all__ = ["SQLAlchemyCopyTradeSessionRepository", "SQLAlchemyWalletRepository"]
