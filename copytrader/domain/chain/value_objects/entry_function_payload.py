"""Entry function payload value object."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EntryFunctionPayload:
    """Move entry function call, e.g. `0x1::managed_coin::register<T>`.

    Example:
        >>> payload = EntryFunctionPayload(
        ...     function="0x1::managed_coin::register",
        ...     type_arguments=("0x1::aptos_coin::AptosCoin",),
        ... )
        >>> payload.to_api()["type"]
        'entry_function_payload'
    """

    function: str
    type_arguments: tuple[str, ...] = ()
    arguments: tuple[Any, ...] = ()

    def to_api(self) -> dict[str, Any]:
        return {
            "type": "entry_function_payload",
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": list(self.arguments),
        }
