"""Base DomainEvent class for event-driven architecture.

DomainEvent - щось важливе що сталось в domain, про що треба повідомити інші
частини системи (наприклад, Telegram notifier). Domain logic не знає хто і як
обробляє events.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Base class for all domain events.

    Events іменуються в минулому часі (TradeDetected, TradeExecuted) і не
    змінюються після створення.

    Example:
        >>> @dataclass(frozen=True)
        ... class TradeDetectedEvent(DomainEvent):
        ...     session_id: int
        ...     version: int

        >>> event_bus.subscribe(TradeDetectedEvent, notify_follower)
    """

    event_id: UUID = field(default_factory=uuid4, init=False)
    """Унікальний ID події (auto-generated)."""

    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), init=False
    )
    """Час коли подія сталась (auto-generated, UTC)."""

    @property
    def event_name(self) -> str:
        return self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.event_name}(event_id={self.event_id}, occurred_at={self.occurred_at})"
