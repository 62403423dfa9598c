"""Base Command class для CQRS pattern.

Command - запит на зміну стану системи (write operation).
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class Command(ABC):
    """Base class для всіх commands.

    - **Immutable**: frozen=True запобігає змінам
    - **Verb-based naming**: StartCopyTrading, StopCopyTrading
    - **No business logic**: Тільки data, logic в Handler

    Example:
        >>> @dataclass(frozen=True)
        ... class StopCopyTradingCommand(Command):
        ...     follower_id: int
        ...     session_id: int

        >>> await handler.handle(StopCopyTradingCommand(follower_id=42, session_id=7))
    """

    pass
