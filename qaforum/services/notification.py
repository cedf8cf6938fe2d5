import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from qaforum.models.notification import NotificationEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[NotificationEvent], Awaitable[None]]


class NotificationSink(ABC):
    """Receives events after a successful commit.

    Delivery is fire-and-forget: a sink must never raise back into the
    operation that produced the event.
    """

    @abstractmethod
    async def publish(self, event: NotificationEvent) -> None:
        """Hand an event to the real-time transport.

        Args:
            event: The event payload, passed by value
        """
        raise NotImplementedError


class NotificationHub(NotificationSink):
    """In-process fan-out of events to registered subscribers.

    A transport (websocket broadcaster, message bus bridge) subscribes a
    coroutine; each event is delivered to every subscriber once, with
    subscriber failures logged and skipped.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber.

        Returns:
            A callable that removes the subscriber again
        """
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    async def publish(self, event: NotificationEvent) -> None:
        for subscriber in list(self._subscribers):
            try:
                await subscriber(event)
            except Exception:
                logger.exception("Subscriber failed to handle %s", event.event.value)
