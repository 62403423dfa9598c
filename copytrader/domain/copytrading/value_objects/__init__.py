"""Value Objects для CopyTrading bounded context."""

from .address import normalize_account_address
from .enums import SessionState, StopReason
from .swap_intent import DecodeResult, MalformedSwap, NotASwap, SwapIntent

__all__ = [
    "SessionState",
    "StopReason",
    "SwapIntent",
    "NotASwap",
    "MalformedSwap",
    "DecodeResult",
    "normalize_account_address",
]
