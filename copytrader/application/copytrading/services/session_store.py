"""SessionStore - narrow, durable interface over copy_trading sessions.

Кожен виклик - окремий unit of work (окрема транзакція), тому runner,
API і registry можуть викликати його конкурентно.
"""

from typing import Callable

from copytrader.application.shared import UnitOfWork
from copytrader.config import get_logger
from copytrader.domain.copytrading import (
    CopyTradeSession,
    SessionNotFoundError,
)
from copytrader.domain.shared import BusinessRuleViolation

logger = get_logger(__name__)


class SessionStore:
    """Durable session records.

    Example:
        >>> store = SessionStore(lambda: SQLAlchemyUnitOfWork(session_factory))
        >>> session = await store.create_session(follower_id=42, master_address="0xabc")
        >>> await store.set_watermark(session.id, 1200)
        True
        >>> await store.set_active(session.id, False)
    """

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create_session(self, follower_id: int, master_address: str) -> CopyTradeSession:
        """Create an active session with an empty watermark.

        Raises:
            SessionAlreadyActiveError: Active session for the pair exists.
            InvalidMasterAddressError: Address is malformed.
        """
        session = CopyTradeSession.create(follower_id, master_address)
        async with self._uow_factory() as uow:
            created = await uow.copy_sessions.add(session)
            await uow.commit()

        logger.info(
            "session_store.created",
            session_id=created.id,
            follower_id=follower_id,
            master_address=created.master_address,
        )
        return created

    async def get_session(self, session_id: int) -> CopyTradeSession | None:
        async with self._uow_factory() as uow:
            return await uow.copy_sessions.get_by_id(session_id)

    async def list_active_sessions(self, follower_id: int) -> list[CopyTradeSession]:
        async with self._uow_factory() as uow:
            return await uow.copy_sessions.list_active_for_follower(follower_id)

    async def list_all_active_sessions(self) -> list[CopyTradeSession]:
        async with self._uow_factory() as uow:
            return await uow.copy_sessions.list_all_active()

    async def set_active(self, session_id: int, active: bool) -> None:
        """Stop a session (active=False).

        Stopped session ніколи не активується знову; для відновлення
        копіювання створюється нова session.

        Raises:
            SessionNotFoundError: No such session.
            BusinessRuleViolation: Attempt to reactivate a stopped session.
        """
        async with self._uow_factory() as uow:
            if active:
                session = await uow.copy_sessions.get_by_id(session_id)
                if session is None:
                    raise SessionNotFoundError(session_id)
                if not session.active:
                    raise BusinessRuleViolation(
                        "Stopped session cannot be reactivated", session_id=session_id
                    )
                return

            found = await uow.copy_sessions.deactivate(session_id)
            if not found:
                raise SessionNotFoundError(session_id)
            await uow.commit()

        logger.info("session_store.deactivated", session_id=session_id)

    async def set_watermark(self, session_id: int, version: int) -> bool:
        """Advance watermark; returns False if stored value is already >= version."""
        async with self._uow_factory() as uow:
            advanced = await uow.copy_sessions.advance_watermark(session_id, version)
            await uow.commit()
        return advanced
