"""StartCopyTrading Command."""

from dataclasses import dataclass

from copytrader.application.shared import Command


@dataclass(frozen=True)
class StartCopyTradingCommand(Command):
    """Command: follower починає копіювати master account.

    Example:
        >>> StartCopyTradingCommand(follower_id=42, master_address="0xabc")
    """

    follower_id: int
    master_address: str
