"""
Event System for Real-Time Broadcasting

In-process publish/subscribe used by GraphQL subscriptions.

One PubSub instance is created per application run (see the lifespan in
main.py) and handed to resolvers through the GraphQL context. Each
subscribing client
gets its own EventStream with a private queue, so every client sees every
event published while it is connected, in publish order. Nothing is
replayed to clients that subscribe later.

Usage:
    pubsub = PubSub()

    stream = pubsub.subscribe(EventType.BOOK_ADDED)
    try:
        async for book in stream:
            ...
    finally:
        stream.close()

    # elsewhere
    await pubsub.publish(EventType.BOOK_ADDED, book)
"""

import asyncio
import logging
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Event Types
# =============================================================================


class EventType(StrEnum):
    """Events that can be published on the bus."""

    BOOK_ADDED = "BOOK_ADDED"


# Queued to wake up and end a stream when the bus shuts down
_CLOSED = object()


# =============================================================================
# Event Stream
# =============================================================================


class EventStream:
    """
    One subscriber's view of a single event.

    The stream is registered with the bus as soon as it is created and
    stays registered until close() is called or the bus shuts down.
    """

    def __init__(self, pubsub: "PubSub", event: str):
        self.event = event
        self._pubsub = pubsub
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, payload: Any) -> None:
        self._queue.put_nowait(payload)

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> Any:
        if self._closed:
            raise StopAsyncIteration

        payload = await self._queue.get()
        if payload is _CLOSED:
            self.close()
            raise StopAsyncIteration
        return payload

    def close(self) -> None:
        """Unregister from the bus. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._pubsub._unsubscribe(self)


# =============================================================================
# Publish / Subscribe
# =============================================================================


class PubSub:
    """
    Process-wide event bus.

    Lifecycle:
    - created once per run by the application lifespan
    - subscribe() per subscription connection, close() on disconnect
    - close() on application shutdown ends every open stream
    """

    def __init__(self):
        self._streams: dict[str, set[EventStream]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscriber_count(self, event: str | None = None) -> int:
        """
        Number of open streams.

        Args:
            event: Only count streams for this event (all events if None)
        """
        if event is not None:
            return len(self._streams.get(event, ()))
        return sum(len(streams) for streams in self._streams.values())

    def subscribe(self, event: str) -> EventStream:
        """
        Open a new stream for an event.

        A stream opened after close() is already finished.

        Args:
            event: Event name, usually an EventType

        Returns:
            EventStream yielding payloads published from now on
        """
        stream = EventStream(self, event)
        if self._closed:
            stream.put(_CLOSED)
            return stream

        self._streams.setdefault(event, set()).add(stream)
        logger.debug(f"Subscribed to {event}: {self.subscriber_count(event)} subscribers")
        return stream

    async def publish(self, event: str, payload: Any) -> int:
        """
        Deliver a payload to every current subscriber of an event.

        Args:
            event: Event name
            payload: Object handed to each subscriber as-is

        Returns:
            Number of subscribers the payload was delivered to
        """
        if self._closed:
            logger.warning(f"Dropped {event}: event bus is closed")
            return 0

        streams = list(self._streams.get(event, ()))
        for stream in streams:
            stream.put(payload)

        logger.debug(f"Published {event} to {len(streams)} subscribers")
        return len(streams)

    async def close(self) -> None:
        """End every open stream and refuse further publishing."""
        if self._closed:
            return
        self._closed = True

        for streams in self._streams.values():
            for stream in streams:
                stream.put(_CLOSED)
        logger.info("Event bus closed")

    def _unsubscribe(self, stream: EventStream) -> None:
        streams = self._streams.get(stream.event)
        if streams is None:
            return
        streams.discard(stream)
        if not streams:
            del self._streams[stream.event]
        logger.debug(f"Unsubscribed from {stream.event}")
