"""Domain services для CopyTrading bounded context."""

from .decimals_cache import DecimalsCache
from .swap_decoder import SwapDecoder

__all__ = ["DecimalsCache", "SwapDecoder"]
