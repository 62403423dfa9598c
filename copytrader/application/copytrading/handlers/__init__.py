"""Command / query handlers для copy trading."""

from .list_copy_trading_handler import GetCopyTradingHandler, ListCopyTradingHandler
from .start_copy_trading_handler import StartCopyTradingHandler
from .stop_copy_trading_handler import StopCopyTradingHandler

__all__ = [
    "StartCopyTradingHandler",
    "StopCopyTradingHandler",
    "ListCopyTradingHandler",
    "GetCopyTradingHandler",
]
