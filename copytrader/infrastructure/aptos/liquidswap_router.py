"""Liquidswap (Pontem) DEX router - uncorrelated curve.

Quote рахується локально з reserves pool-а, так само як це робить
Liquidswap SDK: out = in·(S−fee)·R_out / (R_in·S + in·(S−fee)), S = 10000.
"""

from decimal import ROUND_FLOOR, Decimal

from copytrader.config import get_logger, get_settings
from copytrader.domain.chain import (
    ChainDataError,
    ChainReader,
    ChainResourceNotFoundError,
    DexRouter,
    EntryFunctionPayload,
    QuoteError,
)

logger = get_logger(__name__)

FEE_SCALE = 10_000


def min_amount_out(expected_out_raw: int, slippage: float) -> int:
    """floor(expected_out * (1 - slippage))."""
    factor = Decimal(1) - Decimal(str(slippage))
    return int((Decimal(expected_out_raw) * factor).to_integral_value(ROUND_FLOOR))


def amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee: int) -> int:
    """Constant-product output after the pool fee (integer division)."""
    amount_in_after_fee = amount_in * (FEE_SCALE - fee)
    return amount_in_after_fee * reserve_out // (reserve_in * FEE_SCALE + amount_in_after_fee)


class LiquidswapRouter(DexRouter):
    """DexRouter for Liquidswap v0 pools held by the resource account.

    Example:
        >>> router = LiquidswapRouter(chain_reader)
        >>> expected = await router.quote(APT, USDT, 100_000_000)
        >>> payload = router.build_swap_payload(APT, USDT, 100_000_000, expected, 0.005)
        >>> payload.function
        '0x190d...::scripts_v2::swap'
    """

    def __init__(
        self,
        chain_reader: ChainReader,
        resource_account: str | None = None,
        modules_account: str | None = None,
    ) -> None:
        settings = get_settings()
        self._chain_reader = chain_reader
        self.resource_account = resource_account or settings.liquidswap_resource_account
        self.modules_account = modules_account or settings.liquidswap_modules_account

    @property
    def curve_type(self) -> str:
        return f"{self.modules_account}::curves::Uncorrelated"

    def _pool_type(self, coin_x: str, coin_y: str) -> str:
        return (
            f"{self.modules_account}::liquidity_pool::LiquidityPool"
            f"<{coin_x}, {coin_y}, {self.curve_type}>"
        )

    async def _load_pool(self, input_asset: str, output_asset: str) -> tuple[int, int, int]:
        """(reserve_in, reserve_out, fee) for the pair in swap direction."""
        for coin_x, coin_y, reversed_pair in (
            (input_asset, output_asset, False),
            (output_asset, input_asset, True),
        ):
            try:
                pool = await self._chain_reader.get_account_resource(
                    self.resource_account, self._pool_type(coin_x, coin_y)
                )
            except ChainResourceNotFoundError:
                continue

            try:
                reserve_x = int(pool["coin_x_reserve"]["value"])
                reserve_y = int(pool["coin_y_reserve"]["value"])
                fee = int(pool["fee"])
            except (KeyError, TypeError, ValueError) as e:
                raise ChainDataError("Unexpected LiquidityPool layout") from e

            if reversed_pair:
                return reserve_y, reserve_x, fee
            return reserve_x, reserve_y, fee

        raise QuoteError(
            "No Liquidswap pool for pair",
            input_asset=input_asset,
            output_asset=output_asset,
        )

    async def quote(self, input_asset: str, output_asset: str, amount_raw: int) -> int:
        reserve_in, reserve_out, fee = await self._load_pool(input_asset, output_asset)
        if reserve_in <= 0 or reserve_out <= 0:
            raise QuoteError("Liquidswap pool has no liquidity", input_asset=input_asset)

        expected = amount_out(amount_raw, reserve_in, reserve_out, fee)
        if expected <= 0:
            raise QuoteError("Swap amount too small for pool", amount_raw=amount_raw)

        logger.debug(
            "liquidswap.quoted",
            input_asset=input_asset,
            output_asset=output_asset,
            amount_in=amount_raw,
            expected_out=expected,
            fee=fee,
        )
        return expected

    def build_swap_payload(
        self,
        input_asset: str,
        output_asset: str,
        amount_raw: int,
        expected_out_raw: int,
        slippage: float,
    ) -> EntryFunctionPayload:
        return EntryFunctionPayload(
            function=f"{self.modules_account}::scripts_v2::swap",
            type_arguments=(input_asset, output_asset, self.curve_type),
            arguments=(str(amount_raw), str(min_amount_out(expected_out_raw, slippage))),
        )
