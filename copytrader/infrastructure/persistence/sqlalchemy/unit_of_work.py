"""SQLAlchemy Unit of Work implementation."""

from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from copytrader.application.shared import UnitOfWork
from copytrader.config import get_logger
from copytrader.domain.copytrading.repositories import (
    CopyTradeSessionRepository,
    WalletRepository,
)
from copytrader.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyCopyTradeSessionRepository,
    SQLAlchemyWalletRepository,
)

logger = get_logger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of Unit of Work pattern.

    Відповідальності:
    - Керування SQLAlchemy async session
    - Transaction management (commit/rollback)
    - Automatic rollback при exceptions
    - Lazy initialization of repositories

    Example:
        >>> uow = SQLAlchemyUnitOfWork(session_factory)
        >>> async with uow:
        ...     session = await uow.copy_sessions.add(CopyTradeSession.create(42, "0xabc"))
        ...     await uow.commit()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

        # Repository instances (lazy initialized)
        self._copy_sessions: Optional[CopyTradeSessionRepository] = None
        self._wallets: Optional[WalletRepository] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        try:
            if exc_type is not None:
                await self.rollback()
                logger.debug("unit_of_work.rolled_back", exception_type=exc_type.__name__)
        finally:
            if self._session:
                await self._session.close()
                self._session = None
                self._copy_sessions = None
                self._wallets = None

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of Work not started (use async with)")
        return self._session

    async def commit(self) -> None:
        """Commit transaction.

        Raises:
            Exception: If commit failed (DB error, constraint violation, etc.).
        """
        session = self._require_session()
        try:
            await session.commit()
        except Exception as e:
            logger.error("unit_of_work.commit_failed", error=str(e))
            await self.rollback()
            raise

    async def rollback(self) -> None:
        await self._require_session().rollback()

    @property
    def copy_sessions(self) -> CopyTradeSessionRepository:
        session = self._require_session()
        if self._copy_sessions is None:
            self._copy_sessions = SQLAlchemyCopyTradeSessionRepository(session)
        return self._copy_sessions

    @property
    def wallets(self) -> WalletRepository:
        session = self._require_session()
        if self._wallets is None:
            self._wallets = SQLAlchemyWalletRepository(session)
        return self._wallets


def create_unit_of_work(
    session_factory: async_sessionmaker[AsyncSession],
) -> SQLAlchemyUnitOfWork:
    """Factory для створення Unit of Work."""
    return SQLAlchemyUnitOfWork(session_factory)
