"""Exceptions для Chain bounded context (Aptos node, DEX router, submission)."""

from copytrader.domain.shared import DomainException


class ChainError(DomainException):
    """Base exception для всіх chain-related errors."""

    pass


class ChainReadError(ChainError):
    """Raised коли read-only запит до fullnode не вдався.

    Це transient error (network, timeout, 429, 5xx) - безпечно retry,
    бо reads не мають side effects.
    """

    pass


class ChainDataError(ChainReadError):
    """Raised коли node повернув відповідь яку не можна розібрати."""

    pass


class ChainResourceNotFoundError(ChainError):
    """Raised коли account resource не існує (HTTP 404)."""

    pass


class QuoteError(ChainError):
    """Raised коли DEX не може дати quote (немає pool, нульові reserves)."""

    pass


class TransactionSubmissionError(ChainError):
    """Raised коли node відхилив transaction (simulation/mempool).

    НЕ retry автоматично - повторна відправка може виконати swap двічі.
    """

    pass


class TransactionConfirmationError(ChainError):
    """Raised коли transaction committed але failed, або не підтверджена вчасно."""

    pass
