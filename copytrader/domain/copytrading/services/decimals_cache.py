"""Read-through cache of asset decimals.

Decimals монеті не змінюються, тому кеш живе весь час процесу.
"""

from copytrader.config import get_logger
from copytrader.domain.chain import ChainReader

logger = get_logger(__name__)


class DecimalsCache:
    """Asset type → decimals, fetched from CoinInfo on first miss.

    Example:
        >>> cache = DecimalsCache(chain_reader)
        >>> await cache.get("0x1::aptos_coin::AptosCoin")
        8
    """

    def __init__(self, chain_reader: ChainReader) -> None:
        self._chain_reader = chain_reader
        self._decimals: dict[str, int] = {}

    async def get(self, asset_type: str) -> int:
        cached = self._decimals.get(asset_type)
        if cached is not None:
            return cached

        # Помилки читання не кешуються
        decimals = await self._chain_reader.get_coin_decimals(asset_type)
        self._decimals[asset_type] = decimals
        logger.debug("decimals_cache.filled", asset_type=asset_type, decimals=decimals)
        return decimals

    def __contains__(self, asset_type: str) -> bool:
        return asset_type in self._decimals

    def __len__(self) -> int:
        return len(self._decimals)
