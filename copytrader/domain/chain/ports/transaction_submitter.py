"""TransactionSubmitter - PORT для sign + submit + confirm.

На відміну від ChainReader, submit має side effects і НЕ retry автоматично.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..value_objects import EntryFunctionPayload
from .transaction_signer import TransactionSigner


class TransactionSubmitter(ABC):
    @abstractmethod
    async def submit(self, signer: TransactionSigner, payload: EntryFunctionPayload) -> str:
        """Sign and submit; returns the transaction hash.

        Raises:
            TransactionSubmissionError: Node rejected the transaction.
        """
        pass

    @abstractmethod
    async def wait_for_transaction(self, tx_hash: str) -> dict[str, Any]:
        """Block until the transaction is committed.

        Raises:
            TransactionConfirmationError: Committed with failure or timed out.
        """
        pass
