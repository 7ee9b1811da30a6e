"""Message-related data models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Participant(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageState(str, Enum):
    """Lifecycle of a message."""

    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


class LoadingState(str, Enum):
    """Whether an attachment payload is available."""

    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Attachment:
    """A unit of media queued to accompany an outgoing message."""

    mime_type: str
    display_name: str = ""
    data: bytes | None = None
    url: str | None = None
    loading_state: LoadingState = LoadingState.LOADED
    error: Exception | None = None
    id: str = field(default_factory=_new_id)

    @property
    def kind(self) -> str:
        """Coarse media category used for display and request mapping."""
        major = self.mime_type.split("/", 1)[0]
        if major in ("image", "video", "audio"):
            return major
        if self.mime_type == "application/pdf":
            return "pdf"
        if major == "text":
            return "text"
        if self.data is None and self.url:
            return "link"
        return "file"

    @property
    def is_loaded(self) -> bool:
        return self.loading_state == LoadingState.LOADED


@dataclass
class Message:
    """A single entry in the message log."""

    participant: Participant
    content: str | None = None
    state: MessageState = MessageState.COMPLETE
    error: Exception | None = None
    attachments: list[Attachment] = field(default_factory=list)
    grounding_metadata: dict | None = None
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=_now)

    @classmethod
    def pending(cls, participant: Participant = Participant.ASSISTANT) -> "Message":
        """Placeholder shown while waiting for the first token."""
        return cls(participant=participant, state=MessageState.PENDING)

    @property
    def is_final(self) -> bool:
        return self.state in (MessageState.COMPLETE, MessageState.FAILED)

    def append(self, delta: str) -> None:
        """Concatenate a streamed delta onto the content."""
        self.content = (self.content or "") + delta
