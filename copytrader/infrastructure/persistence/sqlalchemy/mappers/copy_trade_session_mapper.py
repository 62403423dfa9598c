"""CopyTradeSession Mapper - converts between entity and CopyTradingModel ORM."""

from datetime import datetime, timezone

from copytrader.domain.copytrading import CopyTradeSession, WalletRecord
from copytrader.infrastructure.persistence.sqlalchemy.models import (
    CopyTradingModel,
    WalletModel,
)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite повертає naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CopyTradeSessionMapper:
    """Mapper для CopyTradeSession entity ↔ CopyTradingModel ORM.

    Example:
        >>> mapper = CopyTradeSessionMapper()
        >>> model = mapper.to_model(CopyTradeSession.create(42, "0xabc"))
        >>> session = mapper.to_entity(model)
    """

    def to_entity(self, model: CopyTradingModel) -> CopyTradeSession:
        return CopyTradeSession(
            id=model.id,
            follower_id=model.telegram_id,
            master_address=model.master_wallet_address,
            active=model.is_active,
            last_seen_version=model.last_tx_version,
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def to_model(self, entity: CopyTradeSession) -> CopyTradingModel:
        return CopyTradingModel(
            id=entity.id,
            telegram_id=entity.follower_id,
            master_wallet_address=entity.master_address,
            is_active=entity.active,
            last_tx_version=entity.last_seen_version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class WalletMapper:
    def to_record(self, model: WalletModel) -> WalletRecord:
        return WalletRecord(
            id=model.id,
            follower_id=model.telegram_id,
            address=model.address.lower(),
            encrypted_private_key=model.private_key,
        )
