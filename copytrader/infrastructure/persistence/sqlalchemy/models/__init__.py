"""SQLAlchemy ORM models."""

from .base import Base
from .copy_trading_model import CopyTradingModel
from .wallet_model import WalletModel

__all__ = ["Base", "CopyTradingModel", "WalletModel"]
