"""CopyTradeSessionRepository Port - interface для persistence sessions.

Це PORT в Hexagonal Architecture (domain визначає interface).
Infrastructure layer має implement цей interface.
"""

from abc import ABC, abstractmethod

from ..entities import CopyTradeSession


class CopyTradeSessionRepository(ABC):
    """Abstract interface для session persistence.

    Watermark і active flag оновлюються окремими точковими UPDATE-ами,
    щоб writer одного поля ніколи не перезаписав інше.
    """

    @abstractmethod
    async def add(self, session: CopyTradeSession) -> CopyTradeSession:
        """INSERT new session; returns it with the assigned id.

        Raises:
            SessionAlreadyActiveError: Active session for the pair already exists.
        """
        pass

    @abstractmethod
    async def get_by_id(self, session_id: int) -> CopyTradeSession | None:
        pass

    @abstractmethod
    async def get_active_for_pair(
        self, follower_id: int, master_address: str
    ) -> CopyTradeSession | None:
        pass

    @abstractmethod
    async def list_active_for_follower(self, follower_id: int) -> list[CopyTradeSession]:
        pass

    @abstractmethod
    async def list_all_active(self) -> list[CopyTradeSession]:
        """All active sessions (used to resume runners on startup)."""
        pass

    @abstractmethod
    async def deactivate(self, session_id: int) -> bool:
        """Set is_active = false.

        Returns:
            False якщо session не знайдена.
        """
        pass

    @abstractmethod
    async def advance_watermark(self, session_id: int, version: int) -> bool:
        """Conditional update: only if stored watermark is NULL or lower.

        Returns:
            True якщо рядок оновлено.
        """
        pass
