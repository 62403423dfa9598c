"""DexRouter - PORT для quote та побудови swap payload."""

from abc import ABC, abstractmethod

from ..value_objects import EntryFunctionPayload


class DexRouter(ABC):
    """Abstract interface для DEX router (Liquidswap в production)."""

    @abstractmethod
    async def quote(self, input_asset: str, output_asset: str, amount_raw: int) -> int:
        """Expected output in raw units of `output_asset` for `amount_raw` input.

        Raises:
            QuoteError: No pool for the pair or empty reserves.
            ChainReadError: Pool state could not be read.
        """
        pass

    @abstractmethod
    def build_swap_payload(
        self,
        input_asset: str,
        output_asset: str,
        amount_raw: int,
        expected_out_raw: int,
        slippage: float,
    ) -> EntryFunctionPayload:
        """Swap entry function with min-out = floor(expected_out * (1 - slippage))."""
        pass
