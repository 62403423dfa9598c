"""Enums для CopyTrading bounded context."""

from enum import Enum


class SessionState(str, Enum):
    """Session runner lifecycle.

    State machine:
        STARTING → POLLING
        POLLING → DISPATCHING → POLLING
        STARTING | POLLING | DISPATCHING → STOPPED
    """

    STARTING = "starting"
    """Runner baseline-ить watermark і перевіряє credential."""

    POLLING = "polling"
    """Чекаємо нових transactions master account."""

    DISPATCHING = "dispatching"
    """Swap знайдено, watermark збережено, intent передається executor."""

    STOPPED = "stopped"
    """Terminal: timer не запланований, нових executions не буде."""


class StopReason(str, Enum):
    """Чому runner зупинився (для notifications і логів)."""

    USER_REQUEST = "user_request"
    SESSION_INACTIVE = "session_inactive"
    SESSION_MISSING = "session_missing"
    INVALID_CREDENTIAL = "invalid_credential"
    WALLET_MISSING = "wallet_missing"
    SHUTDOWN = "shutdown"
