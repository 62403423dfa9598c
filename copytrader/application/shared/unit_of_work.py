"""Unit of Work pattern - manages transactions.

UnitOfWork забезпечує:
- Atomic operations (all or nothing)
- Transaction boundary
- Single commit per use case
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from copytrader.domain.copytrading.repositories import (
    CopyTradeSessionRepository,
    WalletRepository,
)


class UnitOfWork(ABC):
    """Abstract Unit of Work interface.

    Example:
        >>> async with uow:
        ...     await uow.copy_sessions.advance_watermark(session_id, version)
        ...     await uow.commit()
    """

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Rollback якщо exception, інакше нічого (commit явний)."""
        if exc_type is not None:
            await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass

    @property
    @abstractmethod
    def copy_sessions(self) -> CopyTradeSessionRepository:
        pass

    @property
    @abstractmethod
    def wallets(self) -> WalletRepository:
        pass
