"""CopyTradeSession entity.

Одна session = один follower копіює один master account.
"""

from datetime import datetime, timezone

from copytrader.domain.shared import BusinessRuleViolation, Entity

from ..value_objects import normalize_account_address


class CopyTradeSession(Entity):
    """CopyTradeSession entity.

    Invariants:
    - master_address завжди lower-case
    - last_seen_version ніколи не зменшується
    - stopped session не може бути знову активована (тільки нова session)
    - signing credential тут НЕ зберігається

    Example:
        >>> session = CopyTradeSession.create(follower_id=42, master_address="0xABC")
        >>> session.advance_watermark(100)
        True
        >>> session.advance_watermark(90)
        False
        >>> session.last_seen_version
        100
    """

    def __init__(
        self,
        id: int | None,
        follower_id: int,
        master_address: str,
        active: bool = True,
        last_seen_version: int | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> None:
        super().__init__(id)
        self.follower_id = follower_id
        self.master_address = master_address.lower()
        self.active = active
        self.last_seen_version = last_seen_version
        now = datetime.now(timezone.utc)
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create(cls, follower_id: int, master_address: str) -> "CopyTradeSession":
        """Factory для нової session (ще не збереженої).

        Raises:
            InvalidMasterAddressError: Address is not a valid account address.
        """
        if follower_id <= 0:
            raise BusinessRuleViolation("Follower id must be positive", follower_id=follower_id)
        return cls(
            id=None,
            follower_id=follower_id,
            master_address=normalize_account_address(master_address),
        )

    @property
    def pair_key(self) -> tuple[int, str]:
        """Registry key: at most one live runner per pair."""
        return (self.follower_id, self.master_address)

    def advance_watermark(self, version: int) -> bool:
        """Move watermark forward; returns False if `version` is not newer."""
        if self.last_seen_version is not None and version <= self.last_seen_version:
            return False
        self.last_seen_version = version
        self.updated_at = datetime.now(timezone.utc)
        return True

    def baseline_version(self, latest_version: int | None) -> int:
        """Watermark to use when a runner starts.

        Skips history: max(stored watermark, master's latest version),
        0 when the master has no transactions yet.
        """
        return max(self.last_seen_version or 0, latest_version or 0)

    def deactivate(self) -> bool:
        """Mark session stopped; idempotent."""
        if not self.active:
            return False
        self.active = False
        self.updated_at = datetime.now(timezone.utc)
        return True

    def __repr__(self) -> str:
        return (
            f"CopyTradeSession(id={self.id}, follower_id={self.follower_id}, "
            f"master={self.master_address}, active={self.active}, "
            f"watermark={self.last_seen_version})"
        )
