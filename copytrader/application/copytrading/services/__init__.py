"""Application services для copy trading."""

from .session_registry import SessionRegistry
from .session_runner import SessionRunner
from .session_store import SessionStore
from .trade_executor import TradeExecutor

__all__ = ["SessionStore", "SessionRunner", "SessionRegistry", "TradeExecutor"]
