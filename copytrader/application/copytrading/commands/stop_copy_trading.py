"""StopCopyTrading Command."""

from dataclasses import dataclass

from copytrader.application.shared import Command


@dataclass(frozen=True)
class StopCopyTradingCommand(Command):
    """Command: зупинити session (тільки власник може це зробити)."""

    follower_id: int
    session_id: int
