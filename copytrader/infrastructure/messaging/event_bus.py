"""Event Bus - domain events infrastructure.

- Session runners publish events (TradeDetected, TradeExecuted, ...)
- Notifiers subscribe to events
- Decoupling: runner не знає про Telegram
"""

from collections import defaultdict
from typing import Awaitable, Callable, Type

from copytrader.config import get_logger
from copytrader.domain.shared import DomainEvent

logger = get_logger(__name__)

EventHandler = Callable[[DomainEvent], Awaitable[None]]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """Event Bus для domain events.

    Помилка одного handler-а логується і не впливає ні на інші handlers,
    ні на publisher (session runner продовжує polling).

    Example:
        >>> event_bus = EventBus()
        >>> event_bus.subscribe(TradeExecutedEvent, notifier.on_trade_executed)
        >>> await event_bus.publish(TradeExecutedEvent(...))
    """

    def __init__(self) -> None:
        self._subscribers: dict[Type[DomainEvent], list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """Subscribe handler to event type.

        Args:
            event_type: Type of event (e.g., TradeDetectedEvent).
            handler: Async function to call when event published.
        """
        self._subscribers[event_type].append(handler)
        logger.debug(
            "event_bus.subscription_added",
            event_type=event_type.__name__,
            handler=_handler_name(handler),
        )

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        if handler in self._subscribers[event_type]:
            self._subscribers[event_type].remove(handler)

    async def publish(self, event: DomainEvent) -> None:
        """Publish single domain event.

        Викликає всі handlers для цього event type, по черзі.
        """
        event_type = type(event)
        handlers = list(self._subscribers.get(event_type, []))

        if not handlers:
            logger.debug("event_bus.no_subscribers", event_type=event_type.__name__)
            return

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                # Log error but continue with other handlers
                logger.error(
                    "event_bus.handler_failed",
                    event_type=event_type.__name__,
                    handler=_handler_name(handler),
                    event_id=str(event.event_id),
                    error=str(e),
                    exc_info=True,
                )

    def get_subscribers_count(self, event_type: Type[DomainEvent]) -> int:
        return len(self._subscribers.get(event_type, []))

