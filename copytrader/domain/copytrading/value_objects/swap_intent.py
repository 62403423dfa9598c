"""Decoder results: SwapIntent, NotASwap, MalformedSwap."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SwapIntent:
    """Swap of the master account, ready to be replicated.

    Amounts in raw integer units (no decimals applied). Follower replicates
    `input_amount_raw` as is, never scaled.
    """

    version: int
    tx_hash: str
    function: str
    input_asset: str
    output_asset: str
    input_amount_raw: int
    input_decimals: int
    quoted_min_out_raw: int | None = None
    """Master's min-out argument × 0.95; informational only."""

    @property
    def input_amount_human(self) -> Decimal:
        return Decimal(self.input_amount_raw).scaleb(-self.input_decimals)


@dataclass(frozen=True)
class NotASwap:
    """Transaction is not a swap; watermark advances, nothing dispatched."""

    version: int
    function: str | None = None


@dataclass(frozen=True)
class MalformedSwap:
    """Looks like a swap but the call cannot be interpreted."""

    version: int
    function: str
    reason: str


DecodeResult = SwapIntent | NotASwap | MalformedSwap
