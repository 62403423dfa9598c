"""Messaging infrastructure - Event Bus and notifiers."""

from .event_bus import EventBus
from .telegram_notifier import TelegramNotifier

__all__ = ["EventBus", "TelegramNotifier"]
