"""SwapDecoder - domain service що розпізнає swap у transaction master-а.

Правило розпізнавання навмисно широке: будь-яка entry function, чиє
ім'я містить "swap" (без урахування регістру), в будь-якому модулі.
"""

from decimal import ROUND_FLOOR, Decimal
from typing import Any

from copytrader.config import get_logger
from copytrader.domain.chain import ChainResourceNotFoundError, TransactionRecord

from ..value_objects import DecodeResult, MalformedSwap, NotASwap, SwapIntent
from .decimals_cache import DecimalsCache

logger = get_logger(__name__)

DEFAULT_MIN_OUT_FACTOR = Decimal("0.95")


def _parse_raw_amount(value: Any) -> int | None:
    """u64 argument as int; None if absent or not a non-negative integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        value = value.strip()
        # ASCII only: str.isdigit() also accepts "²" and other Unicode digits
        if value.isascii() and value.isdigit():
            return int(value)
    return None


class SwapDecoder:
    """Decode a TransactionRecord into SwapIntent | NotASwap | MalformedSwap.

    Ніколи не кидає exception через некоректний payload - тільки
    ChainReadError від decimals lookup (transient, watermark не рухається).

    Example:
        >>> decoder = SwapDecoder(DecimalsCache(chain_reader))
        >>> result = await decoder.decode(tx)
        >>> if isinstance(result, SwapIntent):
        ...     print(result.input_amount_human)
    """

    def __init__(
        self,
        decimals_cache: DecimalsCache,
        min_out_factor: Decimal | float = DEFAULT_MIN_OUT_FACTOR,
    ) -> None:
        self._decimals = decimals_cache
        self._min_out_factor = Decimal(str(min_out_factor))

    @staticmethod
    def is_swap(function: str | None) -> bool:
        return bool(function) and "swap" in function.lower()

    async def decode(self, tx: TransactionRecord) -> DecodeResult:
        if not self.is_swap(tx.function):
            return NotASwap(version=tx.version, function=tx.function)

        function = tx.function
        if len(tx.type_arguments) < 2:
            return self._malformed(tx, "swap call has fewer than 2 type arguments")

        input_amount = _parse_raw_amount(tx.arguments[0]) if tx.arguments else None
        if input_amount is None:
            return self._malformed(tx, "first argument is not an integer amount")

        quoted_min_out = None
        if len(tx.arguments) > 1:
            min_out = _parse_raw_amount(tx.arguments[1])
            if min_out is not None:
                quoted_min_out = int(
                    (Decimal(min_out) * self._min_out_factor).to_integral_value(ROUND_FLOOR)
                )

        input_asset, output_asset = tx.type_arguments[0], tx.type_arguments[1]
        try:
            decimals = await self._decimals.get(input_asset)
        except ChainResourceNotFoundError:
            # Asset без CoinInfo: повторна спроба нічого не змінить
            return self._malformed(tx, f"input asset {input_asset} has no CoinInfo")

        return SwapIntent(
            version=tx.version,
            tx_hash=tx.hash,
            function=function,
            input_asset=input_asset,
            output_asset=output_asset,
            input_amount_raw=input_amount,
            input_decimals=decimals,
            quoted_min_out_raw=quoted_min_out,
        )

    @staticmethod
    def _malformed(tx: TransactionRecord, reason: str) -> MalformedSwap:
        logger.warning(
            "swap_decoder.malformed_swap",
            version=tx.version,
            function=tx.function,
            reason=reason,
        )
        return MalformedSwap(version=tx.version, function=tx.function or "", reason=reason)
