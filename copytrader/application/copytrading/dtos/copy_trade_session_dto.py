"""CopyTradeSession DTO - data transfer object for API responses."""

from dataclasses import dataclass
from datetime import datetime

from copytrader.domain.copytrading import CopyTradeSession, SessionState


@dataclass
class CopyTradeSessionDTO:
    """Session data transfer object.

    `runner_state` - стан live runner-а в цьому процесі (None якщо
    runner не запущений).
    """

    id: int
    follower_id: int
    master_address: str
    active: bool
    last_seen_version: int | None
    created_at: datetime
    updated_at: datetime
    runner_state: str | None = None

    @classmethod
    def from_entity(
        cls, session: CopyTradeSession, runner_state: SessionState | None = None
    ) -> "CopyTradeSessionDTO":
        return cls(
            id=session.id,
            follower_id=session.follower_id,
            master_address=session.master_address,
            active=session.active,
            last_seen_version=session.last_seen_version,
            created_at=session.created_at,
            updated_at=session.updated_at,
            runner_state=runner_state.value if runner_state else None,
        )
