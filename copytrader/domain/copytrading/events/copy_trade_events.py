"""Domain Events для CopyTrading bounded context.

Всі events несуть session_id, follower_id і master_address, щоб
subscribers (Telegram notifier) не ходили в DB.
"""

from dataclasses import dataclass
from decimal import Decimal

from copytrader.domain.shared import DomainEvent


@dataclass(frozen=True)
class SessionStartedEvent(DomainEvent):
    """Event: runner baseline-нув watermark і почав polling."""

    session_id: int
    follower_id: int
    master_address: str
    watermark: int


@dataclass(frozen=True)
class SessionStoppedEvent(DomainEvent):
    """Event: runner досяг STOPPED.

    `terminal=True` означає що session зупинена через помилку
    (наприклад invalid credential), а не на прохання користувача.
    """

    session_id: int
    follower_id: int
    master_address: str
    reason: str
    terminal: bool = False


@dataclass(frozen=True)
class TradeDetectedEvent(DomainEvent):
    """Event: знайдено новий swap master account.

    Публікується після того як watermark вже збережено.
    """

    session_id: int
    follower_id: int
    master_address: str
    version: int
    tx_hash: str
    function: str
    input_asset: str
    output_asset: str
    input_amount_raw: int
    input_amount: Decimal


@dataclass(frozen=True)
class TradeExecutedEvent(DomainEvent):
    """Event: follower swap committed on-chain."""

    session_id: int
    follower_id: int
    master_address: str
    version: int
    tx_hash: str
    input_asset: str
    output_asset: str
    amount: Decimal


@dataclass(frozen=True)
class TradeFailedEvent(DomainEvent):
    """Event: replication не вдалась. Session продовжує polling."""

    session_id: int
    follower_id: int
    master_address: str
    version: int
    input_asset: str
    output_asset: str
    reason: str
