from .start_copy_trading import StartCopyTradingCommand
from .stop_copy_trading import StopCopyTradingCommand

__all__ = ["StartCopyTradingCommand", "StopCopyTradingCommand"]
