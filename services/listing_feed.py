"""In-process fan-out of listing change events to live subscribers.

Writers (request handlers running in worker threads) call `publish`;
each subscriber is an asyncio queue owned by one WebSocket session's event
loop. A subscriber must be removed with `unsubscribe` when its session
ends.
"""

import asyncio
import itertools
import threading
from typing import Any, Dict

from core.logger import get_logger

logger = get_logger("services.listing_feed")


class Subscription:
    """One live listener. Iterate with `await subscription.next_event()`."""

    def __init__(self, subscription_id: int, loop: asyncio.AbstractEventLoop):
        self.id = subscription_id
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue()

    async def next_event(self) -> Dict[str, Any]:
        return await self.queue.get()


class ListingFeed:
    """Thread-safe broadcaster of listing change events."""

    def __init__(self):
        self._subscribers: Dict[int, Subscription] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def subscribe(self) -> Subscription:
        """Register a listener bound to the running event loop."""
        subscription = Subscription(next(self._ids), asyncio.get_running_loop())
        with self._lock:
            self._subscribers[subscription.id] = subscription
        logger.info("Listing feed subscriber %s added (%s active)", subscription.id, self.subscriber_count)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            removed = self._subscribers.pop(subscription.id, None)
        if removed is not None:
            logger.info("Listing feed subscriber %s removed (%s active)", subscription.id, self.subscriber_count)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: Dict[str, Any]) -> None:
        """Deliver `event` to every subscriber, in publish order per subscriber."""
        with self._lock:
            subscribers = list(self._subscribers.values())
        for subscription in subscribers:
            try:
                subscription.loop.call_soon_threadsafe(subscription.queue.put_nowait, event)
            except RuntimeError:
                logger.warning("Dropping subscriber %s whose event loop is closed", subscription.id)
                self.unsubscribe(subscription)
        logger.debug("Published %s to %s subscribers", event.get("type"), len(subscribers))


def listing_event(listing, event_type: str = "listing_changed") -> Dict[str, Any]:
    return {
        "type": event_type,
        "listing_id": listing.id,
        "status": listing.status,
        "remaining_quantity": listing.remaining_quantity,
    }
