from .copy_trade_session_mapper import CopyTradeSessionMapper, WalletMapper

__all__ = ["CopyTradeSessionMapper", "WalletMapper"]
