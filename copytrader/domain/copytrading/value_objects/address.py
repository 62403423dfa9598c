"""Aptos account address helpers."""

import re

from ..exceptions import InvalidMasterAddressError

_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{1,64}$")


def normalize_account_address(address: str) -> str:
    """Lower-case and validate an account address.

    Example:
        >>> normalize_account_address(" 0xABC ")
        '0xabc'

    Raises:
        InvalidMasterAddressError: Not `0x` followed by 1-64 hex digits.
    """
    normalized = (address or "").strip().lower()
    if not _ADDRESS_RE.match(normalized):
        raise InvalidMasterAddressError("Invalid Aptos account address", address=address)
    return normalized
