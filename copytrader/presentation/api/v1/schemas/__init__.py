from .copy_trading_schemas import (
    CopyTradeSessionListResponse,
    CopyTradeSessionResponse,
    ErrorResponse,
    StartCopyTradingRequest,
)

__all__ = [
    "StartCopyTradingRequest",
    "CopyTradeSessionResponse",
    "CopyTradeSessionListResponse",
    "ErrorResponse",
]
