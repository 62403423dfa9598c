"""Data Transfer Objects for copy trading."""

from .copy_trade_session_dto import CopyTradeSessionDTO

__all__ = ["CopyTradeSessionDTO"]
