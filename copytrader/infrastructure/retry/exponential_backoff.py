"""Exponential backoff retry logic for read-only chain calls.

Тільки для reads (transactions, resources, gas estimate). Submission
НІКОЛИ не обгортається цим decorator-ом - retry може виконати swap двічі.
"""

import asyncio
from functools import wraps
from typing import Any, Awaitable, Callable, Type, TypeVar

from copytrader.config import get_logger
from copytrader.domain.chain import ChainReadError

logger = get_logger(__name__)

T = TypeVar("T")


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    retryable_exceptions: tuple[Type[Exception], ...] = (ChainReadError,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator для retry з exponential backoff.

    Args:
        max_retries: Кількість повторних спроб після першої (default: 3).
        base_delay: Базова затримка в секундах (default: 1.0).
        max_delay: Максимальна затримка в секундах (default: 60.0).
        exponential_base: База для exponential backoff (default: 2.0).
        retryable_exceptions: Tuple exceptions які можна retry.

    Returns:
        Decorated coroutine function з retry logic.

    Example:
        >>> @retry_with_backoff(max_retries=2, base_delay=0.5)
        ... async def fetch_latest(address):
        ...     return await client.get(f"/accounts/{address}/transactions")

        >>> # Перша спроба fails → wait 0.5s
        >>> # Друга спроба fails → wait 1s
        >>> # Третя спроба fails → raise exception
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError("retry_with_backoff supports async functions only")

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_retries + 1):
                try:
                    result = await func(*args, **kwargs)
                    if attempt > 0:
                        logger.info(
                            "retry.success",
                            function=func.__name__,
                            attempt=attempt + 1,
                        )
                    return result

                except retryable_exceptions as e:
                    if attempt >= max_retries:
                        logger.warning(
                            "retry.exhausted",
                            function=func.__name__,
                            total_attempts=max_retries + 1,
                            error=str(e),
                        )
                        raise

                    delay = min(base_delay * (exponential_base**attempt), max_delay)
                    logger.debug(
                        "retry.attempt",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        delay_seconds=delay,
                        error=str(e),
                    )
                    await asyncio.sleep(delay)

            raise RuntimeError("Retry logic error: loop exited without result")

        return wrapper

    return decorator
