"""Domain Events для CopyTrading bounded context."""

from .copy_trade_events import (
    SessionStartedEvent,
    SessionStoppedEvent,
    TradeDetectedEvent,
    TradeExecutedEvent,
    TradeFailedEvent,
)

__all__ = [
    "SessionStartedEvent",
    "SessionStoppedEvent",
    "TradeDetectedEvent",
    "TradeExecutedEvent",
    "TradeFailedEvent",
]
