from .list_copy_trading import GetCopyTradingQuery, ListCopyTradingQuery

__all__ = ["ListCopyTradingQuery", "GetCopyTradingQuery"]
