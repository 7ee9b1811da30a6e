"""Tracker implementation for creating TraceEvents."""

import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..event_bus import IEventBus
from ..models import SessionEvent, TraceEvent, Topic
from ..storage import IStorage

# Per-chunk updates are too noisy to trace.
TRACKED_TOPICS = [
    Topic.MESSAGE_APPENDED,
    Topic.MESSAGES_CLEARED,
    Topic.ATTACHMENTS_CHANGED,
    Topic.REQUEST_STARTED,
    Topic.REQUEST_FINISHED,
]


class ITracker(Protocol):
    """Creating TraceEvents. Two channels: EventBus subscription + direct calls."""

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to Storage."""
        ...

    async def stop(self) -> None:
        """Stop tracker."""
        ...


class Tracker:
    """Creates TraceEvents via EventBus subscription and direct track() calls."""

    def __init__(self, event_bus: IEventBus, storage: IStorage):
        self._event_bus = event_bus
        self._storage = storage

    async def start(self) -> None:
        """Subscribe to session topics."""
        for topic in TRACKED_TOPICS:
            self._event_bus.subscribe(topic, self._handle_event)

    async def _handle_event(self, event: SessionEvent) -> None:
        """Handle incoming SessionEvent from EventBus."""
        await self.track(
            event_type=event.topic.value,
            actor=event.source,
            data=event.payload,
        )

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to Storage."""
        trace_event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
        await self._storage.save_trace_event(trace_event)

    async def stop(self) -> None:
        """Unsubscribe from session topics."""
        for topic in TRACKED_TOPICS:
            self._event_bus.unsubscribe(topic, self._handle_event)
