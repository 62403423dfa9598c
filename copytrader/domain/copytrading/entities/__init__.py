"""Entities для CopyTrading bounded context."""

from .copy_trade_session import CopyTradeSession

__all__ = ["CopyTradeSession"]
