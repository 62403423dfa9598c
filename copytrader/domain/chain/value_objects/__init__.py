"""Value Objects для Chain bounded context."""

from .entry_function_payload import EntryFunctionPayload
from .transaction_record import TransactionRecord

__all__ = ["TransactionRecord", "EntryFunctionPayload"]
