"""
Event Bus for GraphQL Subscriptions

In-process publish/subscribe used to push catalog changes to subscription
resolvers.

Features:
- Topic-based subscriptions (BOOK_ADDED, AUTHOR_UPDATED, AUTHOR_ADDED)
- One asyncio.Queue per subscriber, so a slow client never blocks
  publishers or other subscribers
- At-most-once delivery with no durability: a subscriber that connects
  after an event was published never sees it

The bus is created per application (see catalog.main.create_app) and
handed to resolvers through the GraphQL context instead of living in a
module-level global, so tests can build their own bus and assert on what
was published.

Usage:
    bus = EventBus()

    async for book in bus.subscribe(EventType.BOOK_ADDED):
        ...

    await bus.publish(EventType.BOOK_ADDED, book)
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Event Types
# =============================================================================


class EventType(StrEnum):
    """Topics that can be published and subscribed to."""

    BOOK_ADDED = "BOOK_ADDED"
    AUTHOR_UPDATED = "AUTHOR_UPDATED"
    AUTHOR_ADDED = "AUTHOR_ADDED"


@dataclass
class Event:
    """
    A published event.

    Attributes:
        type: The topic the event was published on
        payload: The object delivered to subscribers
        timestamp: When the event was published
    """

    type: EventType
    payload: Any
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


# =============================================================================
# Event Bus
# =============================================================================


class EventBus:
    """
    Delivers published payloads to every current subscriber of a topic.

    The bus optionally keeps a history of published events
    (record_history=True) which tests use to check what a mutation emitted.
    """

    def __init__(self, max_queue_size: int = 100, record_history: bool = False):
        self._subscribers: dict[str, set[asyncio.Queue]] = {}
        self._max_queue_size = max_queue_size
        self._record_history = record_history
        self.history: list[Event] = []

    async def publish(self, topic: EventType | str, payload: Any) -> int:
        """
        Publish a payload to all subscribers of a topic.

        A subscriber whose queue is full misses the event; publishing never
        waits on a subscriber.

        Returns:
            Number of subscribers the event was delivered to
        """
        event = Event(type=EventType(topic), payload=payload)
        if self._record_history:
            self.history.append(event)

        delivered = 0
        for queue in list(self._subscribers.get(event.type, ())):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"Subscriber queue full, dropping {event.type} event")

        logger.debug(f"Published {event.type} to {delivered} subscribers")
        return delivered

    async def subscribe(self, topic: EventType | str) -> AsyncIterator[Any]:
        """
        Yield payloads published on a topic from now on.

        The subscription is removed when the consumer stops iterating
        (for example when a WebSocket client disconnects and the generator
        is closed).
        """
        event_type = EventType(topic)
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers.setdefault(event_type, set()).add(queue)
        logger.info(
            f"Subscriber added to {event_type} "
            f"(total={len(self._subscribers[event_type])})"
        )

        try:
            while True:
                event = await queue.get()
                yield event.payload
        finally:
            self._unsubscribe(event_type, queue)

    def _unsubscribe(self, topic: EventType, queue: asyncio.Queue) -> None:
        """Remove a subscriber queue and drop empty topics."""
        subscribers = self._subscribers.get(topic)
        if subscribers is None:
            return

        subscribers.discard(queue)
        if not subscribers:
            del self._subscribers[topic]

        logger.info(f"Subscriber removed from {topic}")

    def subscriber_count(self, topic: EventType | str) -> int:
        """Get the number of active subscribers for a topic."""
        return len(self._subscribers.get(EventType(topic), ()))

    def events_of(self, topic: EventType | str) -> list[Event]:
        """Recorded events for one topic, oldest first."""
        event_type = EventType(topic)
        return [event for event in self.history if event.type == event_type]

    def get_stats(self) -> dict[str, Any]:
        """Get subscription statistics."""
        return {
            "topics": {
                str(topic): len(queues) for topic, queues in self._subscribers.items()
            },
            "published": len(self.history),
        }
