"""AptosTransactionSubmitter - sign, submit and confirm entry function calls.

BCS encoding робить fullnode (`/transactions/encode_submission`), ми тільки
підписуємо отримані bytes ключем follower-а.
"""

import asyncio
import time
from typing import Any

from copytrader.config import get_logger, get_settings
from copytrader.domain.chain import (
    ChainError,
    ChainReadError,
    EntryFunctionPayload,
    TransactionConfirmationError,
    TransactionSigner,
    TransactionSubmissionError,
    TransactionSubmitter,
)

from .rest_client import AptosRestClient

logger = get_logger(__name__)


class AptosTransactionSubmitter(TransactionSubmitter):
    """Submits transactions through a (usually separate) fullnode.

    Example:
        >>> submitter = AptosTransactionSubmitter(AptosRestClient(settings.aptos_submit_node_url))
        >>> tx_hash = await submitter.submit(signer, payload)
        >>> await submitter.wait_for_transaction(tx_hash)
    """

    def __init__(
        self,
        client: AptosRestClient,
        *,
        max_gas_amount: int | None = None,
        expiration_seconds: int | None = None,
        confirmation_timeout: float | None = None,
        poll_interval: float | None = None,
    ) -> None:
        settings = get_settings()
        self._client = client
        self._max_gas_amount = max_gas_amount or settings.max_gas_amount
        self._expiration_seconds = expiration_seconds or settings.transaction_expiration_seconds
        self._confirmation_timeout = confirmation_timeout or settings.confirmation_timeout_seconds
        self._poll_interval = poll_interval or settings.confirmation_poll_interval

    async def submit(self, signer: TransactionSigner, payload: EntryFunctionPayload) -> str:
        try:
            sequence_number = await self._client.get_sequence_number(signer.address)
            gas_unit_price = await self._client.estimate_gas_price()
        except ChainError as e:
            raise TransactionSubmissionError(
                f"Cannot prepare transaction: {e.message}", sender=signer.address
            ) from e

        request: dict[str, Any] = {
            "sender": signer.address,
            "sequence_number": str(sequence_number),
            "max_gas_amount": str(self._max_gas_amount),
            "gas_unit_price": str(gas_unit_price),
            "expiration_timestamp_secs": str(int(time.time()) + self._expiration_seconds),
            "payload": payload.to_api(),
        }

        try:
            signing_message = await self._client.encode_submission(request)
            signed_request = {
                **request,
                "signature": {
                    "type": "ed25519_signature",
                    "public_key": signer.public_key_hex,
                    "signature": "0x" + signer.sign(signing_message).hex(),
                },
            }
            pending = await self._client.submit_transaction(signed_request)
        except ChainError as e:
            raise TransactionSubmissionError(
                e.message, sender=signer.address, function=payload.function
            ) from e

        tx_hash = pending.get("hash") if isinstance(pending, dict) else None
        if not tx_hash:
            raise TransactionSubmissionError("Node response has no transaction hash")

        logger.info(
            "transaction_submitter.submitted",
            tx_hash=tx_hash,
            sender=signer.address,
            function=payload.function,
            sequence_number=sequence_number,
        )
        return tx_hash

    async def wait_for_transaction(self, tx_hash: str) -> dict[str, Any]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._confirmation_timeout

        while True:
            try:
                tx = await self._client.get_transaction_by_hash(tx_hash)
            except ChainReadError as e:
                logger.debug("transaction_submitter.poll_failed", tx_hash=tx_hash, error=str(e))
                tx = None
            except ChainError as e:
                raise TransactionConfirmationError(e.message, tx_hash=tx_hash) from e

            if tx is not None and tx.get("type") != "pending_transaction":
                if tx.get("success"):
                    logger.info(
                        "transaction_submitter.confirmed",
                        tx_hash=tx_hash,
                        version=tx.get("version"),
                        gas_used=tx.get("gas_used"),
                    )
                    return tx
                raise TransactionConfirmationError(
                    tx.get("vm_status") or "Transaction failed", tx_hash=tx_hash
                )

            if loop.time() >= deadline:
                raise TransactionConfirmationError(
                    "Transaction not confirmed in time",
                    tx_hash=tx_hash,
                    timeout_seconds=self._confirmation_timeout,
                )
            await asyncio.sleep(self._poll_interval)
