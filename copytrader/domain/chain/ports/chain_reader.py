"""ChainReader - read-only PORT до Aptos fullnode.

Domain layer визначає ЩО потрібно, infrastructure (`AptosRestClient`)
імплементує ЯК. Всі методи без side effects, тому їх можна retry.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..value_objects import TransactionRecord


class ChainReader(ABC):
    """Abstract interface для читання стану chain.

    Example (Domain uses):
        >>> tx = await chain_reader.get_latest_transaction("0xmaster")
        >>> if tx and tx.version > session.last_seen_version:
        ...     intent = await decoder.decode(tx)
    """

    @abstractmethod
    async def get_latest_transaction(self, address: str) -> TransactionRecord | None:
        """Most recent committed transaction sent by `address`.

        Returns:
            TransactionRecord або None якщо account ще не має transactions.

        Raises:
            ChainReadError: Transient failure (retry next tick).
        """
        pass

    @abstractmethod
    async def get_coin_decimals(self, asset_type: str) -> int:
        """Decimals from `0x1::coin::CoinInfo<asset_type>` at the issuer.

        Raises:
            ChainReadError: Transient failure.
            ChainResourceNotFoundError: Asset has no CoinInfo.
        """
        pass

    @abstractmethod
    async def get_coin_balance(self, address: str, asset_type: str) -> int:
        """Raw balance from `0x1::coin::CoinStore<asset_type>`; 0 if unregistered."""
        pass

    @abstractmethod
    async def get_account_resource(self, address: str, resource_type: str) -> dict[str, Any]:
        """Raw `data` of an account resource.

        Raises:
            ChainResourceNotFoundError: Resource does not exist.
        """
        pass
