"""SQLAlchemy implementation of CopyTradeSessionRepository."""

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from copytrader.domain.copytrading import (
    CopyTradeSession,
    CopyTradeSessionRepository,
    SessionAlreadyActiveError,
)
from copytrader.infrastructure.persistence.sqlalchemy.mappers import CopyTradeSessionMapper
from copytrader.infrastructure.persistence.sqlalchemy.models import CopyTradingModel


class SQLAlchemyCopyTradeSessionRepository(CopyTradeSessionRepository):
    """SQLAlchemy implementation of CopyTradeSessionRepository port.

    Watermark і is_active оновлюються точковими UPDATE statements,
    ніколи через load-modify-save всього рядка.

    Example:
        >>> async with session_factory() as db:
        ...     repo = SQLAlchemyCopyTradeSessionRepository(db)
        ...     advanced = await repo.advance_watermark(session_id=1, version=1200)
        ...     await db.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._mapper = CopyTradeSessionMapper()

    async def add(self, session: CopyTradeSession) -> CopyTradeSession:
        existing = await self.get_active_for_pair(session.follower_id, session.master_address)
        if existing is not None:
            raise SessionAlreadyActiveError(
                session_id=existing.id,
                follower_id=session.follower_id,
                master_address=session.master_address,
            )

        model = self._mapper.to_model(session)
        self._session.add(model)
        try:
            await self._session.flush()  # Get generated ID
        except IntegrityError as e:
            # Конкурентний INSERT для тієї ж пари впав на partial unique index
            await self._session.rollback()
            winner = await self.get_active_for_pair(session.follower_id, session.master_address)
            raise SessionAlreadyActiveError(
                session_id=winner.id if winner else 0,
                follower_id=session.follower_id,
                master_address=session.master_address,
            ) from e
        return self._mapper.to_entity(model)

    async def get_by_id(self, session_id: int) -> CopyTradeSession | None:
        stmt = select(CopyTradingModel).where(CopyTradingModel.id == session_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._mapper.to_entity(model) if model else None

    async def get_active_for_pair(
        self, follower_id: int, master_address: str
    ) -> CopyTradeSession | None:
        stmt = select(CopyTradingModel).where(
            CopyTradingModel.telegram_id == follower_id,
            CopyTradingModel.master_wallet_address == master_address.lower(),
            CopyTradingModel.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        model = result.scalars().first()
        return self._mapper.to_entity(model) if model else None

    async def list_active_for_follower(self, follower_id: int) -> list[CopyTradeSession]:
        stmt = (
            select(CopyTradingModel)
            .where(
                CopyTradingModel.telegram_id == follower_id,
                CopyTradingModel.is_active.is_(True),
            )
            .order_by(CopyTradingModel.created_at.desc(), CopyTradingModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def list_all_active(self) -> list[CopyTradeSession]:
        stmt = (
            select(CopyTradingModel)
            .where(CopyTradingModel.is_active.is_(True))
            .order_by(CopyTradingModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._mapper.to_entity(m) for m in result.scalars().all()]

    async def deactivate(self, session_id: int) -> bool:
        stmt = (
            update(CopyTradingModel)
            .where(CopyTradingModel.id == session_id)
            .values(is_active=False, updated_at=func.now())
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def advance_watermark(self, session_id: int, version: int) -> bool:
        # is_active тут не чіпаємо: stop з іншого writer-а не може бути перезаписаний
        stmt = (
            update(CopyTradingModel)
            .where(
                CopyTradingModel.id == session_id,
                or_(
                    CopyTradingModel.last_tx_version.is_(None),
                    CopyTradingModel.last_tx_version < version,
                ),
            )
            .values(last_tx_version=version, updated_at=func.now())
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0
