"""
Synchronous publish/subscribe primitive shared by every controller.

Handlers run in subscription order on the publisher's call stack. A failing
handler is logged and skipped; the publisher never sees its exception.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from dex_browser.utils.core.logger import get_logger

logger = get_logger(__name__)

Handler = Callable[[Any], None]


@dataclass(eq=False)
class Subscription:
    """Handle returned by EventBus.subscribe, used to unsubscribe."""

    topic: str
    handler: Handler
    once: bool = False
    active: bool = field(default=True)


class EventBus:
    """Topic-keyed handler lists with explicit subscription handles."""

    def __init__(self):
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, topic: str, handler: Handler) -> Subscription:
        """Register a handler for a topic.

        Args:
            topic (str): Event topic (e.g. "search:query")
            handler (Handler): Callable invoked with the event payload

        Returns:
            Subscription: Handle for unsubscribe()
        """
        subscription = Subscription(topic, handler)
        self._subscriptions.setdefault(topic, []).append(subscription)
        return subscription

    def once(self, topic: str, handler: Handler) -> Subscription:
        """Register a handler that is removed after its first invocation."""
        subscription = Subscription(topic, handler, once=True)
        self._subscriptions.setdefault(topic, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unsubscribing twice is a no-op."""
        subscription.active = False
        handlers = self._subscriptions.get(subscription.topic)
        if handlers is None:
            return
        if subscription in handlers:
            handlers.remove(subscription)
        if not handlers:
            del self._subscriptions[subscription.topic]

    def publish(self, topic: str, payload: Any = None) -> None:
        """Invoke every handler currently subscribed to the topic.

        Args:
            topic (str): Event topic
            payload (Any, optional): Value passed to each handler. Defaults to None.
        """
        # Snapshot so handlers may subscribe/unsubscribe while we iterate
        for subscription in list(self._subscriptions.get(topic, ())):
            if not subscription.active:
                continue
            if subscription.once:
                # Deactivate before calling so a re-entrant publish skips it
                self.unsubscribe(subscription)
            try:
                subscription.handler(payload)
            except Exception as e:
                logger.error(f"Error in event handler for '{topic}': {e}", exc_info=True)

    def handler_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, ()))

    def clear(self) -> None:
        """Drop every subscription on every topic."""
        for handlers in self._subscriptions.values():
            for subscription in handlers:
                subscription.active = False
        self._subscriptions.clear()
