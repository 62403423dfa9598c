"""Unit tests for Ed25519Signer and AptosTransactionSubmitter."""

import hashlib
import json

import httpx
import pytest
from nacl.signing import SigningKey, VerifyKey

from copytrader.domain.chain import (
    EntryFunctionPayload,
    TransactionConfirmationError,
    TransactionSubmissionError,
)
from copytrader.domain.copytrading import InvalidCredentialError
from copytrader.infrastructure.aptos import AptosRestClient, AptosTransactionSubmitter
from copytrader.infrastructure.aptos.signer import Ed25519Signer, derive_address, parse_private_key

SEED_HEX = "11" * 32
PAYLOAD = EntryFunctionPayload(
    function="0x1::managed_coin::register",
    type_arguments=("0x2::usdt::USDT",),
)


class TestEd25519Signer:
    @pytest.mark.parametrize(
        "raw", [SEED_HEX, "0x" + SEED_HEX, "ed25519-priv-0x" + SEED_HEX, f"  0X{SEED_HEX}\n"]
    )
    def test_parse_private_key_formats(self, raw):
        assert parse_private_key(raw) == bytes.fromhex(SEED_HEX)

    @pytest.mark.parametrize("raw", ["", "0x1234", "zz" * 32, "11" * 33])
    def test_parse_private_key_rejects_garbage(self, raw):
        with pytest.raises(InvalidCredentialError):
            parse_private_key(raw)

    def test_address_derivation(self):
        # Arrange
        public_key = bytes(SigningKey(bytes.fromhex(SEED_HEX)).verify_key)

        # Act
        signer = Ed25519Signer.from_private_key(SEED_HEX)

        # Assert
        expected = "0x" + hashlib.sha3_256(public_key + b"\x00").hexdigest()
        assert signer.address == expected == derive_address(public_key)
        assert signer.public_key_hex == "0x" + public_key.hex()

    def test_explicit_address_wins(self):
        signer = Ed25519Signer.from_private_key(SEED_HEX, address="0xABC")

        assert signer.address == "0xabc"

    def test_signature_verifies(self):
        signer = Ed25519Signer.from_private_key(SEED_HEX)

        signature = signer.sign(b"message")

        verify_key = VerifyKey(bytes.fromhex(signer.public_key_hex[2:]))
        assert verify_key.verify(b"message", signature) == b"message"
        assert len(signature) == 64

    def test_repr_hides_key(self):
        assert SEED_HEX not in repr(Ed25519Signer.from_private_key(SEED_HEX))


class FakeNode:
    """Minimal fullnode: account, gas, encode, submit, by_hash."""

    def __init__(self) -> None:
        self.submitted: list[dict] = []
        self.by_hash: list[httpx.Response] = []
        self.submit_response = httpx.Response(202, json={"hash": "0xtx"})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/estimate_gas_price"):
            return httpx.Response(200, json={"gas_estimate": 100})
        if path.endswith("/transactions/encode_submission"):
            return httpx.Response(200, json="0x" + "aa" * 16)
        if path.endswith("/transactions") and request.method == "POST":
            self.submitted.append(json.loads(request.content))
            return self.submit_response
        if "/transactions/by_hash/" in path:
            return self.by_hash.pop(0) if self.by_hash else httpx.Response(404, json={})
        if "/accounts/" in path:
            return httpx.Response(200, json={"sequence_number": "7"})
        return httpx.Response(500, json={"message": "unexpected"})


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
async def submitter(node):
    client = AptosRestClient(
        "https://node.test/v1",
        max_retries=0,
        retry_base_delay=0,
        retry_max_delay=0,
        transport=httpx.MockTransport(node),
    )
    yield AptosTransactionSubmitter(
        client,
        max_gas_amount=50_000,
        expiration_seconds=600,
        confirmation_timeout=0.2,
        poll_interval=0.01,
    )
    await client.close()


class TestSubmit:
    @pytest.mark.asyncio
    async def test_submit_signs_node_encoded_message(self, submitter, node):
        # Arrange
        signer = Ed25519Signer.from_private_key(SEED_HEX)

        # Act
        tx_hash = await submitter.submit(signer, PAYLOAD)

        # Assert
        assert tx_hash == "0xtx"
        body = node.submitted[0]
        assert body["sender"] == signer.address
        assert body["sequence_number"] == "7"
        assert body["gas_unit_price"] == "100"
        assert body["max_gas_amount"] == "50000"
        assert body["payload"] == PAYLOAD.to_api()
        signature = body["signature"]
        assert signature["type"] == "ed25519_signature"
        assert signature["public_key"] == signer.public_key_hex
        VerifyKey(bytes.fromhex(signer.public_key_hex[2:])).verify(
            b"\xaa" * 16, bytes.fromhex(signature["signature"][2:])
        )

    @pytest.mark.asyncio
    async def test_rejected_submission(self, submitter, node):
        node.submit_response = httpx.Response(
            400, json={"message": "Invalid transaction: SEQUENCE_NUMBER_TOO_OLD"}
        )

        with pytest.raises(TransactionSubmissionError) as exc_info:
            await submitter.submit(Ed25519Signer.from_private_key(SEED_HEX), PAYLOAD)

        assert "SEQUENCE_NUMBER_TOO_OLD" in exc_info.value.message


class TestWaitForTransaction:
    @pytest.mark.asyncio
    async def test_pending_then_success(self, submitter, node):
        node.by_hash = [
            httpx.Response(404, json={}),
            httpx.Response(200, json={"type": "pending_transaction", "hash": "0xtx"}),
            httpx.Response(200, json={"type": "user_transaction", "success": True, "version": "9"}),
        ]

        tx = await submitter.wait_for_transaction("0xtx")

        assert tx["version"] == "9"

    @pytest.mark.asyncio
    async def test_vm_failure(self, submitter, node):
        node.by_hash = [
            httpx.Response(
                200,
                json={
                    "type": "user_transaction",
                    "success": False,
                    "vm_status": "Move abort in 0x1::coin: EINSUFFICIENT_BALANCE(0x10006)",
                },
            )
        ]

        with pytest.raises(TransactionConfirmationError) as exc_info:
            await submitter.wait_for_transaction("0xtx")

        assert "EINSUFFICIENT_BALANCE" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout(self, submitter):
        with pytest.raises(TransactionConfirmationError) as exc_info:
            await submitter.wait_for_transaction("0xnever")

        assert "not confirmed" in exc_info.value.message
