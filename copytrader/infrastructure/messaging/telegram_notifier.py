"""Telegram notifier - sends copy-trade events to the follower's chat.

follower_id = Telegram user id, тому chat_id = follower_id.
"""

from html import escape

from aiogram import Bot
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from copytrader.config import get_logger
from copytrader.domain.copytrading import (
    SessionStartedEvent,
    SessionStoppedEvent,
    TradeDetectedEvent,
    TradeExecutedEvent,
    TradeFailedEvent,
)

from .event_bus import EventBus

logger = get_logger(__name__)


def short_address(address: str) -> str:
    if len(address) <= 16:
        return address
    return f"{address[:8]}...{address[-6:]}"


def asset_symbol(asset_type: str) -> str:
    """`0x1::aptos_coin::AptosCoin` → `AptosCoin`."""
    return asset_type.split("::")[-1]


# ====== Message rendering ======


def render_trade_detected(event: TradeDetectedEvent) -> str:
    return (
        "🔄 <b>New Trade Detected!</b>\n\n"
        f"📋 <b>Master Wallet:</b> <code>{short_address(event.master_address)}</code>\n"
        f"🔗 <b>Transaction:</b> <code>{event.version}</code>\n\n"
        "⏳ Executing copy trade..."
    )


def render_trade_executed(event: TradeExecutedEvent) -> str:
    return (
        "✅ <b>Copy Trade Executed!</b>\n\n"
        "🔄 <b>Trade Details:</b>\n"
        f"📤 <b>From:</b> {escape(asset_symbol(event.input_asset))}\n"
        f"📥 <b>To:</b> {escape(asset_symbol(event.output_asset))}\n"
        f"💰 <b>Amount:</b> {event.amount}\n"
        f"🔗 <b>Tx:</b> <code>{event.tx_hash}</code>\n\n"
        "Your wallet has successfully copied the trade!"
    )


def render_trade_failed(event: TradeFailedEvent) -> str:
    return (
        "❌ <b>Copy Trade Failed</b>\n\n"
        f"Error: {escape(event.reason)}\n\n"
        "Please check your wallet balance and try again."
    )


def render_session_started(event: SessionStartedEvent) -> str:
    return (
        "🎉 <b>Copy Trading Started!</b>\n\n"
        f"📋 <b>Master Wallet:</b>\n<code>{event.master_address}</code>\n\n"
        "✅ <b>Status:</b> Active"
    )


def render_session_stopped(event: SessionStoppedEvent) -> str:
    if event.terminal:
        return (
            "⛔ <b>Copy Trading Stopped</b>\n\n"
            f"📋 <b>Master Wallet:</b> <code>{short_address(event.master_address)}</code>\n"
            f"Reason: {escape(event.reason)}"
        )
    return "✅ <b>Copy Trading Stopped</b>\n\nCopy trading session has been stopped successfully."


class TelegramNotifier:
    """Subscribes to copy-trading events and forwards them to Telegram.

    Example:
        >>> notifier = TelegramNotifier.from_token(settings.telegram_bot_token)
        >>> notifier.register(event_bus)
    """

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    @classmethod
    def from_token(cls, token: str) -> "TelegramNotifier":
        return cls(Bot(token=token, default=DefaultBotProperties(parse_mode=ParseMode.HTML)))

    def register(self, event_bus: EventBus) -> None:
        event_bus.subscribe(TradeDetectedEvent, self.on_trade_detected)
        event_bus.subscribe(TradeExecutedEvent, self.on_trade_executed)
        event_bus.subscribe(TradeFailedEvent, self.on_trade_failed)
        event_bus.subscribe(SessionStartedEvent, self.on_session_started)
        event_bus.subscribe(SessionStoppedEvent, self.on_session_stopped)

    async def close(self) -> None:
        await self._bot.session.close()

    async def _send(self, chat_id: int, text: str) -> None:
        await self._bot.send_message(chat_id=chat_id, text=text, parse_mode=ParseMode.HTML)
        logger.debug("telegram_notifier.sent", chat_id=chat_id)

    async def on_trade_detected(self, event: TradeDetectedEvent) -> None:
        await self._send(event.follower_id, render_trade_detected(event))

    async def on_trade_executed(self, event: TradeExecutedEvent) -> None:
        await self._send(event.follower_id, render_trade_executed(event))

    async def on_trade_failed(self, event: TradeFailedEvent) -> None:
        await self._send(event.follower_id, render_trade_failed(event))

    async def on_session_started(self, event: SessionStartedEvent) -> None:
        await self._send(event.follower_id, render_session_started(event))

    async def on_session_stopped(self, event: SessionStoppedEvent) -> None:
        await self._send(event.follower_id, render_session_stopped(event))
