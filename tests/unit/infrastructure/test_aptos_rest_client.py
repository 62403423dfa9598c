"""Unit tests for AptosRestClient (httpx.MockTransport)."""

import json
from urllib.parse import unquote

import httpx
import pytest

from copytrader.domain.chain import (
    ChainDataError,
    ChainError,
    ChainReadError,
    ChainResourceNotFoundError,
)
from copytrader.infrastructure.aptos import AptosRestClient

NODE = "https://node.test/v1"
MASTER = "0x" + "ab" * 32
APT = "0x1::aptos_coin::AptosCoin"

SWAP_TX = {
    "type": "user_transaction",
    "version": "1200",
    "hash": "0xabc",
    "sender": MASTER,
    "success": True,
    "payload": {
        "type": "entry_function_payload",
        "function": "0x190d::scripts_v2::swap",
        "type_arguments": [APT, "0x2::usdt::USDT"],
        "arguments": ["100000000", "950000"],
    },
}


def make_client(handler) -> AptosRestClient:
    return AptosRestClient(
        NODE,
        max_retries=2,
        retry_base_delay=0,
        retry_max_delay=0,
        transport=httpx.MockTransport(handler),
    )


def decoded_path(request: httpx.Request) -> str:
    return unquote(request.url.raw_path.decode())


class TestLatestTransaction:
    @pytest.mark.asyncio
    async def test_returns_latest_transaction(self):
        # Arrange
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[SWAP_TX])

        # Act
        async with make_client(handler) as client:
            tx = await client.get_latest_transaction(MASTER)

        # Assert
        assert tx.version == 1200
        assert tx.function == "0x190d::scripts_v2::swap"
        assert seen[0].url.path == f"/v1/accounts/{MASTER}/transactions"
        assert seen[0].url.params["limit"] == "1"

    @pytest.mark.asyncio
    async def test_no_transactions(self):
        async with make_client(lambda r: httpx.Response(200, json=[])) as client:
            assert await client.get_latest_transaction(MASTER) is None

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        def handler(request):
            return httpx.Response(404, json={"message": "Account not found"})

        async with make_client(handler) as client:
            assert await client.get_latest_transaction(MASTER) is None

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self):
        # Arrange
        responses = [
            httpx.Response(503, json={"message": "unavailable"}),
            httpx.Response(429, json={"message": "rate limited"}),
            httpx.Response(200, json=[SWAP_TX]),
        ]

        # Act
        async with make_client(lambda r: responses.pop(0)) as client:
            tx = await client.get_latest_transaction(MASTER)

        # Assert
        assert tx.version == 1200
        assert responses == []

    @pytest.mark.asyncio
    async def test_retries_are_bounded(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(502, text="bad gateway")

        async with make_client(handler) as client:
            with pytest.raises(ChainReadError):
                await client.get_latest_transaction(MASTER)

        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(400, json={"message": "Invalid address"})

        async with make_client(handler) as client:
            with pytest.raises(ChainError) as exc_info:
                await client.get_latest_transaction(MASTER)

        assert not isinstance(exc_info.value, ChainReadError)
        assert len(attempts) == 1

    @pytest.mark.asyncio
    async def test_timeout_is_transient(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(handler) as client:
            with pytest.raises(ChainReadError):
                await client.get_latest_transaction(MASTER)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        async with make_client(lambda r: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(ChainDataError):
                await client.get_latest_transaction(MASTER)


class TestResources:
    @pytest.mark.asyncio
    async def test_coin_decimals_read_from_issuer(self):
        # Arrange
        seen = []

        def handler(request):
            seen.append(decoded_path(request))
            return httpx.Response(200, json={"type": "...", "data": {"decimals": 8}})

        # Act
        async with make_client(handler) as client:
            decimals = await client.get_coin_decimals(APT)

        # Assert
        assert decimals == 8
        assert seen == [f"/v1/accounts/0x1/resource/0x1::coin::CoinInfo<{APT}>"]

    @pytest.mark.asyncio
    async def test_coin_decimals_missing(self):
        async with make_client(lambda r: httpx.Response(404, json={})) as client:
            with pytest.raises(ChainResourceNotFoundError):
                await client.get_coin_decimals("0xdead::x::Y")

    @pytest.mark.asyncio
    async def test_coin_balance(self):
        def handler(request):
            return httpx.Response(200, json={"data": {"coin": {"value": "12345"}}})

        async with make_client(handler) as client:
            assert await client.get_coin_balance(MASTER, APT) == 12345

    @pytest.mark.asyncio
    async def test_coin_balance_without_coin_store(self):
        async with make_client(lambda r: httpx.Response(404, json={})) as client:
            assert await client.get_coin_balance(MASTER, APT) == 0


class TestSubmissionHelpers:
    @pytest.mark.asyncio
    async def test_sequence_number_and_gas_price(self):
        def handler(request):
            if request.url.path.endswith("/estimate_gas_price"):
                return httpx.Response(200, json={"gas_estimate": 100})
            return httpx.Response(200, json={"sequence_number": "7"})

        async with make_client(handler) as client:
            assert await client.get_sequence_number(MASTER) == 7
            assert await client.estimate_gas_price() == 100

    @pytest.mark.asyncio
    async def test_encode_submission_returns_bytes(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json="0x0102ff")

        async with make_client(handler) as client:
            message = await client.encode_submission({"sender": MASTER})

        assert message == b"\x01\x02\xff"
        assert bodies == [{"sender": MASTER}]

    @pytest.mark.asyncio
    async def test_transaction_by_hash_pending(self):
        async with make_client(lambda r: httpx.Response(404, json={})) as client:
            assert await client.get_transaction_by_hash("0xabc") is None
