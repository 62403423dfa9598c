"""SQLAlchemy implementation of WalletRepository (read-only)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from copytrader.domain.copytrading import WalletRecord, WalletRepository
from copytrader.infrastructure.persistence.sqlalchemy.mappers import WalletMapper
from copytrader.infrastructure.persistence.sqlalchemy.models import WalletModel


class SQLAlchemyWalletRepository(WalletRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._mapper = WalletMapper()

    async def get_default_wallet(self, follower_id: int) -> WalletRecord | None:
        stmt = (
            select(WalletModel)
            .where(
                WalletModel.telegram_id == follower_id,
                WalletModel.is_default.is_(True),
                WalletModel.is_deleted.is_(False),
            )
            .order_by(WalletModel.created_at.desc(), WalletModel.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._mapper.to_record(model) if model else None
