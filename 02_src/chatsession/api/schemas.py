"""Pydantic views of session state."""

from datetime import datetime

from pydantic import BaseModel

from ..models import Attachment, Message


class ErrorView(BaseModel):
    """Error attached to a failed message or the session."""

    kind: str | None = None
    message: str


class AttachmentView(BaseModel):
    """Attachment metadata (payload bytes are never returned)."""

    id: str
    mime_type: str
    display_name: str
    kind: str
    url: str | None = None
    size: int | None = None
    loading_state: str


class MessageView(BaseModel):
    """Renderable message."""

    id: str
    participant: str
    content: str | None = None
    state: str
    error: ErrorView | None = None
    attachments: list[AttachmentView] = []
    grounding_metadata: dict | None = None
    timestamp: datetime


class SessionView(BaseModel):
    """Everything a UI needs to render the conversation."""

    conversation_id: str
    title: str
    initial_prompt: str
    model_name: str
    in_progress: bool
    error: ErrorView | None = None
    messages: list[MessageView]
    attachments: list[AttachmentView]


def error_view(error: Exception | None) -> ErrorView | None:
    if error is None:
        return None
    kind = getattr(error, "kind", None)
    return ErrorView(kind=kind.value if kind is not None else None, message=str(error))


def attachment_view(attachment: Attachment) -> AttachmentView:
    return AttachmentView(
        id=attachment.id,
        mime_type=attachment.mime_type,
        display_name=attachment.display_name,
        kind=attachment.kind,
        url=attachment.url,
        size=len(attachment.data) if attachment.data is not None else None,
        loading_state=attachment.loading_state.value,
    )


def message_view(message: Message) -> MessageView:
    return MessageView(
        id=message.id,
        participant=message.participant.value,
        content=message.content,
        state=message.state.value,
        error=error_view(message.error),
        attachments=[attachment_view(a) for a in message.attachments],
        grounding_metadata=message.grounding_metadata,
        timestamp=message.timestamp,
    )
