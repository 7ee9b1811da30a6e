"""Observer channel data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Topic(str, Enum):
    """EventBus topics."""

    MESSAGE_APPENDED = "message_appended"
    MESSAGE_UPDATED = "message_updated"
    MESSAGES_CLEARED = "messages_cleared"
    ATTACHMENTS_CHANGED = "attachments_changed"
    REQUEST_STARTED = "request_started"
    REQUEST_FINISHED = "request_finished"


class RequestOutcome(str, Enum):
    """How a unit of work ended."""

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class SessionEvent:
    """A state change published to observers."""

    id: str
    topic: Topic
    payload: dict  # varies by topic
    source: str  # component that published
    timestamp: datetime
