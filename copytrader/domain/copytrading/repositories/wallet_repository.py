"""WalletRepository Port - read access to follower wallets.

Wallets створюються поза цим сервісом (Telegram бот), тут тільки читаємо.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class WalletRecord:
    """Stored follower wallet; private key still encrypted."""

    id: int
    follower_id: int
    address: str
    encrypted_private_key: str

    def __repr__(self) -> str:
        return f"WalletRecord(id={self.id}, follower_id={self.follower_id}, address={self.address})"


class WalletRepository(ABC):
    @abstractmethod
    async def get_default_wallet(self, follower_id: int) -> WalletRecord | None:
        """Default, non-deleted wallet of the follower."""
        pass
