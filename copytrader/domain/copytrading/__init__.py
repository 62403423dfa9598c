"""CopyTrading Bounded Context - Domain Layer.

Exports:
    Entities: CopyTradeSession
    Value Objects: SessionState, StopReason, SwapIntent, NotASwap, MalformedSwap
    Services: SwapDecoder, DecimalsCache
    Events: TradeDetectedEvent, TradeExecutedEvent, TradeFailedEvent,
            SessionStartedEvent, SessionStoppedEvent
    Repositories: CopyTradeSessionRepository, WalletRepository (interfaces)
"""

from .entities import CopyTradeSession
from .events import (
    SessionStartedEvent,
    SessionStoppedEvent,
    TradeDetectedEvent,
    TradeExecutedEvent,
    TradeFailedEvent,
)
from .exceptions import (
    CopyTradingError,
    InvalidCredentialError,
    InvalidMasterAddressError,
    SessionAlreadyActiveError,
    SessionNotFoundError,
    TradeExecutionError,
    WalletNotFoundError,
)
from .repositories import CopyTradeSessionRepository, WalletRecord, WalletRepository
from .services import DecimalsCache, SwapDecoder
from .value_objects import (
    DecodeResult,
    MalformedSwap,
    NotASwap,
    SessionState,
    StopReason,
    SwapIntent,
    normalize_account_address,
)

__all__ = [
    # Entities
    "CopyTradeSession",
    # Value Objects
    "SessionState",
    "StopReason",
    "SwapIntent",
    "NotASwap",
    "MalformedSwap",
    "DecodeResult",
    "normalize_account_address",
    # Services
    "SwapDecoder",
    "DecimalsCache",
    # Events
    "SessionStartedEvent",
    "SessionStoppedEvent",
    "TradeDetectedEvent",
    "TradeExecutedEvent",
    "TradeFailedEvent",
    # Exceptions
    "CopyTradingError",
    "SessionNotFoundError",
    "SessionAlreadyActiveError",
    "InvalidMasterAddressError",
    "WalletNotFoundError",
    "InvalidCredentialError",
    "TradeExecutionError",
    # Repositories
    "CopyTradeSessionRepository",
    "WalletRepository",
    "WalletRecord",
]
