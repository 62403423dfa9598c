"""Aptos fullnode REST client (httpx).

Implements ChainReader + низькорівневі calls потрібні для submission
(sequence number, gas estimate, encode_submission, submit, by_hash).

Read calls обгорнуті retry_with_backoff; write calls - ні.
"""

from typing import Any
from urllib.parse import quote

import httpx

from copytrader.config import get_logger, get_settings
from copytrader.domain.chain import (
    ChainDataError,
    ChainError,
    ChainReader,
    ChainReadError,
    ChainResourceNotFoundError,
    TransactionRecord,
)
from copytrader.infrastructure.retry import retry_with_backoff

logger = get_logger(__name__)

COIN_INFO = "0x1::coin::CoinInfo"
COIN_STORE = "0x1::coin::CoinStore"


def _error_message(response: httpx.Response) -> str:
    """Extract `message` from an Aptos error body, fall back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        message = body.get("message") or response.reason_phrase
        vm_code = body.get("vm_error_code")
        return f"{message} (vm_error_code={vm_code})" if vm_code is not None else message
    return str(body)[:200]


class AptosRestClient(ChainReader):
    """Async client for the Aptos fullnode REST API.

    Example:
        >>> async with AptosRestClient("https://fullnode.mainnet.aptoslabs.com/v1") as client:
        ...     tx = await client.get_latest_transaction("0xmaster")
        ...     decimals = await client.get_coin_decimals("0x1::aptos_coin::AptosCoin")
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_base_delay: float | None = None,
        retry_max_delay: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.aptos_node_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.aptos_request_timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self._get_json = retry_with_backoff(
            max_retries=settings.chain_max_retries if max_retries is None else max_retries,
            base_delay=(
                settings.chain_retry_base_delay if retry_base_delay is None else retry_base_delay
            ),
            max_delay=settings.chain_retry_max_delay if retry_max_delay is None else retry_max_delay,
        )(self._get_json_once)

    async def __aenter__(self) -> "AptosRestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    # ==================== transport ====================

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method, path, params=params, json=json, content=content, headers=headers
            )
        except httpx.TimeoutException as e:
            raise ChainReadError("Aptos node request timed out", path=path) from e
        except httpx.HTTPError as e:
            raise ChainReadError("Aptos node unreachable", path=path, error=str(e)) from e

        status = response.status_code
        if status == 404:
            raise ChainResourceNotFoundError(_error_message(response), path=path)
        if status == 429 or status >= 500:
            raise ChainReadError(_error_message(response), path=path, status=status)
        if status >= 400:
            raise ChainError(_error_message(response), path=path, status=status)

        try:
            return response.json()
        except ValueError as e:
            raise ChainDataError("Aptos node returned invalid JSON", path=path) from e

    async def _get_json_once(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._send("GET", path, params=params)

    # ==================== ChainReader ====================

    async def get_latest_transaction(self, address: str) -> TransactionRecord | None:
        try:
            transactions = await self._get_json(
                f"/accounts/{address}/transactions", params={"limit": 1}
            )
        except ChainResourceNotFoundError:
            # Account ще не існує on-chain
            return None

        if not isinstance(transactions, list):
            raise ChainDataError("Unexpected transactions response", address=address)
        if not transactions:
            return None
        return TransactionRecord.from_api(transactions[-1])

    async def get_account_resource(self, address: str, resource_type: str) -> dict[str, Any]:
        resource = await self._get_json(
            f"/accounts/{address}/resource/{quote(resource_type, safe=':,')}"
        )
        try:
            return resource["data"]
        except (KeyError, TypeError) as e:
            raise ChainDataError(
                "Resource without data", address=address, resource_type=resource_type
            ) from e

    async def get_coin_decimals(self, asset_type: str) -> int:
        issuer = asset_type.split("::", 1)[0]
        data = await self.get_account_resource(issuer, f"{COIN_INFO}<{asset_type}>")
        try:
            return int(data["decimals"])
        except (KeyError, TypeError, ValueError) as e:
            raise ChainDataError("CoinInfo without decimals", asset_type=asset_type) from e

    async def get_coin_balance(self, address: str, asset_type: str) -> int:
        try:
            data = await self.get_account_resource(address, f"{COIN_STORE}<{asset_type}>")
        except ChainResourceNotFoundError:
            return 0
        try:
            return int(data["coin"]["value"])
        except (KeyError, TypeError, ValueError) as e:
            raise ChainDataError("CoinStore without value", address=address) from e

    # ==================== submission helpers ====================

    async def get_sequence_number(self, address: str) -> int:
        account = await self._get_json(f"/accounts/{address}")
        try:
            return int(account["sequence_number"])
        except (KeyError, TypeError, ValueError) as e:
            raise ChainDataError("Account without sequence_number", address=address) from e

    async def estimate_gas_price(self) -> int:
        estimate = await self._get_json("/estimate_gas_price")
        try:
            return int(estimate["gas_estimate"])
        except (KeyError, TypeError, ValueError) as e:
            raise ChainDataError("Invalid gas estimate response") from e

    async def encode_submission(self, request: dict[str, Any]) -> bytes:
        """Signing message for an unsigned transaction (node-side BCS)."""
        encoded = await self._send("POST", "/transactions/encode_submission", json=request)
        if not isinstance(encoded, str) or not encoded.startswith("0x"):
            raise ChainDataError("Unexpected encode_submission response")
        return bytes.fromhex(encoded[2:])

    async def submit_transaction(self, signed_request: dict[str, Any]) -> dict[str, Any]:
        return await self._send("POST", "/transactions", json=signed_request)

    async def get_transaction_by_hash(self, tx_hash: str) -> dict[str, Any] | None:
        try:
            return await self._get_json_once(f"/transactions/by_hash/{tx_hash}")
        except ChainResourceNotFoundError:
            return None
