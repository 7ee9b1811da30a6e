"""EventBus implementation for pub/sub notifications."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import SessionEvent, Topic

logger = get_logger(__name__)


TopicHandler = Callable[[SessionEvent], Awaitable[None]]


class IEventBus(Protocol):
    """In-memory pub/sub for session state changes."""

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        ...

    def unsubscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Remove a previously subscribed handler."""
        ...

    async def publish(self, event: SessionEvent) -> None:
        """Publish SessionEvent: calls subscriber callbacks."""
        ...

    async def emit(self, topic: Topic, payload: dict, source: str) -> None:
        """Build and publish a SessionEvent."""
        ...


class EventBus:
    """In-memory pub/sub event bus."""

    def __init__(self):
        self._subscribers: dict[Topic, list[TopicHandler]] = {
            topic: [] for topic in Topic
        }

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        self._subscribers[topic].append(handler)

    def unsubscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Remove a previously subscribed handler."""
        if handler in self._subscribers[topic]:
            self._subscribers[topic].remove(handler)

    async def publish(self, event: SessionEvent) -> None:
        """Publish SessionEvent: calls subscriber callbacks concurrently."""
        if not event.id:
            event.id = str(uuid.uuid4())

        handlers = list(self._subscribers.get(event.topic, []))
        if not handlers:
            return

        results = await asyncio.gather(
            *[handler(event) for handler in handlers],
            return_exceptions=True,
        )

        for i, result in enumerate(results):
            if isinstance(result, Exception):
                logger.error("Error in handler %s for %s: %s", i, event.topic.value, result)

    async def emit(self, topic: Topic, payload: dict, source: str) -> None:
        """Build and publish a SessionEvent."""
        await self.publish(
            SessionEvent(
                id=str(uuid.uuid4()),
                topic=topic,
                payload=payload,
                source=source,
                timestamp=datetime.now(timezone.utc),
            )
        )
