"""
Event bus for billing domain events.

Synchronous in-process pub/sub used to invalidate cached lists after the API
accepts a mutation. Handlers execute immediately in the same thread as the
publisher. Handler errors are logged but never propagate: the server has
already accepted the mutation by the time an event exists.

Topics follow the event class hierarchy. A handler subscribed to
"InvoiceEvent" sees InvoiceCreated, InvoiceUpdated and InvoiceSent; one
subscribed to "BillingEvent" sees everything. A cache of invoice lists can
therefore subscribe once instead of once per concrete event.
"""

import logging
from typing import Callable, Dict, List

from billing.events import BillingEvent

logger = logging.getLogger(__name__)

EventType = str | type[BillingEvent]


def _topic(event_type: EventType) -> str:
    return event_type if isinstance(event_type, str) else event_type.__name__


def topics_for(event: BillingEvent) -> list[str]:
    """Topic names an event is delivered to, most specific first."""
    return [
        cls.__name__
        for cls in type(event).__mro__
        if isinstance(cls, type) and issubclass(cls, BillingEvent)
    ]


class EventBus:
    """
    In-process event bus for billing domain events.

    Subscribe by event class or class name, publish by event instance.
    Handlers for the concrete class run first, then handlers for each base
    class up to BillingEvent; within a topic they run in subscription order.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: EventType, callback: Callable):
        """
        Subscribe to events of a type and its subclasses.

        Args:
            event_type: Event class or its name (e.g. PaymentRecorded, 'InvoiceEvent')
            callback: Function to call when a matching event is published
        """
        self._subscribers.setdefault(_topic(event_type), []).append(callback)

    def unsubscribe(self, event_type: EventType, callback: Callable) -> bool:
        """
        Remove a previously subscribed callback.

        Returns:
            True if the callback was subscribed, False otherwise
        """
        callbacks = self._subscribers.get(_topic(event_type), [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def publish(self, event: BillingEvent):
        """
        Publish an event to every subscriber of its class or a base class.

        Args:
            event: BillingEvent instance to publish
        """
        event_type = event.__class__.__name__

        for topic in topics_for(event):
            for callback in list(self._subscribers.get(topic, [])):
                try:
                    callback(event)
                except Exception:
                    logger.exception(
                        "Handler %s failed for %s (topic=%s, event_id=%s)",
                        getattr(callback, "__name__", repr(callback)),
                        event_type,
                        topic,
                        event.event_id,
                    )
