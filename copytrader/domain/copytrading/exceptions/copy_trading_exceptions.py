"""Exceptions для CopyTrading bounded context."""

from typing import Any

from copytrader.domain.shared import EntityNotFound, BusinessRuleViolation, DomainException


class CopyTradingError(DomainException):
    """Base exception для copy trading errors."""

    pass


class SessionNotFoundError(EntityNotFound):
    """Raised коли session не існує або належить іншому follower."""

    def __init__(self, session_id: int, **context: Any) -> None:
        super().__init__("Copy trade session not found", session_id=session_id, **context)
        self.session_id = session_id


class SessionAlreadyActiveError(BusinessRuleViolation):
    """Raised при спробі створити другу active session для тієї ж пари.

    `session_id` - ID вже існуючої active session.
    """

    def __init__(self, session_id: int, follower_id: int, master_address: str) -> None:
        super().__init__(
            "Copy trading already active for this master account",
            session_id=session_id,
            follower_id=follower_id,
            master_address=master_address,
        )
        self.session_id = session_id


class InvalidMasterAddressError(CopyTradingError):
    """Raised коли master address не є валідною Aptos адресою."""

    pass


class WalletNotFoundError(CopyTradingError):
    """Raised коли follower не має default wallet."""

    def __init__(self, follower_id: int) -> None:
        super().__init__("Follower has no default wallet", follower_id=follower_id)
        self.follower_id = follower_id


class InvalidCredentialError(CopyTradingError):
    """Raised коли private key не вдається розшифрувати або розпарсити.

    Unrecoverable для session: без credential копіювати неможливо.
    """

    pass


class TradeExecutionError(CopyTradingError):
    """Raised коли replication swap не вдався на будь-якому кроці.

    `reason` - human-readable причина для notification.
    """

    def __init__(self, reason: str, **context: Any) -> None:
        super().__init__(reason, **context)
        self.reason = reason
