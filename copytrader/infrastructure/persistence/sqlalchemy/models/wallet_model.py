"""Wallet ORM Model - таблиця wallets.

Wallets створює Telegram бот; engine тільки читає default wallet
follower-а. `private_key` зберігається Fernet-encrypted.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, BigIntPK


class WalletModel(Base):
    __tablename__ = "wallets"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(66), nullable=False)
    private_key: Mapped[str] = mapped_column(Text, nullable=False)
    is_default: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<WalletModel(id={self.id}, telegram_id={self.telegram_id}, address={self.address})>"
