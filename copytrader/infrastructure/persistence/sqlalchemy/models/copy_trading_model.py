"""CopyTrading ORM Model - таблиця copy_trading.

Один рядок = одна copy-trade session (follower → master).
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, String, func, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, BigIntPK


class CopyTradingModel(Base):
    """Copy trading session row.

    Partial unique index гарантує максимум одну active session на пару
    (telegram_id, master_wallet_address) навіть при конкурентних INSERT.
    """

    __tablename__ = "copy_trading"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    master_wallet_address: Mapped[str] = mapped_column(String(66), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    last_tx_version: Mapped[int | None] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        Index(
            "uq_copy_trading_active_pair",
            "telegram_id",
            "master_wallet_address",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        Index("ix_copy_trading_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return (
            f"<CopyTradingModel(id={self.id}, telegram_id={self.telegram_id}, "
            f"master={self.master_wallet_address}, active={self.is_active})>"
        )
