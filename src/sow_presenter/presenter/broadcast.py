"""Per-schedule publish/subscribe channel for presenter commands.

The control plane publishes payloads on a topic per schedule and every
connected display holds a Subscription on that topic. Delivery is
best-effort and at-most-once: there are no acknowledgements, no retries and
no backfill for late subscribers. A subscriber whose queue is full misses the
payload; the publisher never waits.

The in-memory channel runs on one asyncio event loop. ``publish`` must be
called from that loop; payloads published to a topic reach each subscriber
in publish order.
"""

import asyncio
from typing import Any, Optional, Protocol

from sow_presenter.logging_config import get_logger

logger = get_logger(__name__)

TOPIC_PREFIX = "schedule_presenter_"

# Wakes a reader blocked on a closed subscription
_CLOSED = object()


def topic_for(schedule_id: str) -> str:
    """Name of the broadcast topic for a schedule."""
    return f"{TOPIC_PREFIX}{schedule_id}"


class Subscription:
    """A display's membership in one topic.

    Iterate with ``async for payload in subscription`` or call ``get()``.
    Iteration ends once the subscription is closed.
    """

    def __init__(self, channel: "InMemoryBroadcastChannel", topic: str, max_queue_size: int):
        self.topic = topic
        self._channel = channel
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, payload: dict[str, Any]) -> bool:
        """Queue a payload without blocking.

        Returns:
            False if the subscription is closed or its queue is full
        """
        if self._closed:
            return False
        try:
            self._queue.put_nowait(payload)
        except asyncio.QueueFull:
            return False
        return True

    async def get(self) -> Optional[dict[str, Any]]:
        """Wait for the next payload.

        Returns:
            The payload, or None once the subscription is closed
        """
        if self._closed and self._queue.empty():
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            return None
        return item

    def get_nowait(self) -> Optional[dict[str, Any]]:
        """Next queued payload, or None if nothing is queued."""
        try:
            item = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        if item is _CLOSED:
            return None
        return item

    def pending(self) -> int:
        """Number of payloads waiting to be read."""
        return 0 if self._closed else self._queue.qsize()

    def close(self) -> None:
        """Stop delivery. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._channel.unsubscribe(self)

        # Undelivered payloads are dropped; the sentinel ends pending reads
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> dict[str, Any]:
        payload = await self.get()
        if payload is None:
            raise StopAsyncIteration
        return payload

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class BroadcastChannel(Protocol):
    """Interface the presenter uses to reach displays."""

    def publish(self, topic: str, payload: dict[str, Any]) -> int:
        ...

    def subscribe(self, topic: str) -> Subscription:
        ...


class InMemoryBroadcastChannel:
    """Broadcast channel backed by one bounded asyncio queue per subscriber.

    Attributes:
        max_queue_size: Payloads buffered per subscriber before dropping
    """

    def __init__(self, max_queue_size: int = 64):
        """Initialize the channel.

        Args:
            max_queue_size: Payloads buffered per subscriber before dropping
        """
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1")
        self.max_queue_size = max_queue_size
        self._topics: dict[str, list[Subscription]] = {}

    def publish(self, topic: str, payload: dict[str, Any]) -> int:
        """Deliver a payload to every current subscriber of a topic.

        Args:
            topic: Topic name
            payload: JSON-serializable payload

        Returns:
            Number of subscribers that accepted the payload
        """
        subscribers = list(self._topics.get(topic, ()))
        delivered = 0

        for subscription in subscribers:
            if subscription.offer(payload):
                delivered += 1
            else:
                logger.warning(
                    f"Dropped {payload.get('action', '?')} on {topic}: subscriber queue full"
                )

        logger.debug(f"Published {payload.get('action', '?')} on {topic} to {delivered}/{len(subscribers)}")
        return delivered

    def subscribe(self, topic: str) -> Subscription:
        """Subscribe to a topic.

        Only payloads published after this call are delivered.

        Args:
            topic: Topic name

        Returns:
            New Subscription
        """
        subscription = Subscription(self, topic, self.max_queue_size)
        self._topics.setdefault(topic, []).append(subscription)
        logger.info(f"Display subscribed to {topic} ({len(self._topics[topic])} total)")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown subscriptions are ignored."""
        subscribers = self._topics.get(subscription.topic)
        if not subscribers or subscription not in subscribers:
            return

        subscribers.remove(subscription)
        if not subscribers:
            del self._topics[subscription.topic]
        logger.info(f"Display unsubscribed from {subscription.topic}")

    def subscriber_count(self, topic: str) -> int:
        """Number of current subscribers on a topic."""
        return len(self._topics.get(topic, ()))

    def topics(self) -> list[str]:
        """Topics with at least one subscriber."""
        return sorted(self._topics)
