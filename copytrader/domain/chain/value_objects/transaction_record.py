"""Value objects for on-chain data returned by the fullnode REST API."""

from dataclasses import dataclass, field
from typing import Any

from copytrader.domain.chain.exceptions import ChainDataError


@dataclass(frozen=True)
class TransactionRecord:
    """Committed transaction of a watched account.

    Тільки поля потрібні для decoding; повний JSON лишається в `raw`
    для логів і діагностики.
    """

    version: int
    hash: str
    sender: str | None
    function: str | None
    type_arguments: tuple[str, ...] = ()
    arguments: tuple[Any, ...] = ()
    success: bool | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TransactionRecord":
        """Build a record from `/accounts/{address}/transactions` JSON.

        Raises:
            ChainDataError: If the version is missing or not an integer.
        """
        try:
            version = int(data["version"])
        except (KeyError, TypeError, ValueError) as e:
            raise ChainDataError(
                "Transaction without a usable version",
                hash=data.get("hash") if isinstance(data, dict) else None,
            ) from e

        payload = data.get("payload") or {}
        return cls(
            version=version,
            hash=data.get("hash", ""),
            sender=data.get("sender"),
            function=payload.get("function"),
            type_arguments=tuple(payload.get("type_arguments") or ()),
            arguments=tuple(payload.get("arguments") or ()),
            success=data.get("success"),
            raw=data,
        )
