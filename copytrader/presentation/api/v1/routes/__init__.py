"""API v1 routes."""

from .copy_trading import router as copy_trading_router

__all__ = ["copy_trading_router"]
