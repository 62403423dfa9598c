"""Application Configuration.

Uses pydantic-settings for type-safe configuration from environment variables.

Usage:
    from copytrader.config import get_settings, setup_logging, get_logger
    settings = get_settings()
    setup_logging()  # Call once at startup
    logger = get_logger(__name__)
"""

from .settings import Settings, get_settings
from .logging import (
    bind_request_context,
    bind_session_context,
    clear_request_context,
    get_logger,
    setup_logging,
)

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "bind_request_context",
    "bind_session_context",
    "clear_request_context",
]
