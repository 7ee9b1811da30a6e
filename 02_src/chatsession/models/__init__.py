"""Core data models for chat sessions."""

from .events import RequestOutcome, SessionEvent, Topic
from .generation import Chunk, GenerationRequest, Response
from .messages import Attachment, LoadingState, Message, MessageState, Participant
from .session import SessionConfig
from .tracing import TraceEvent

__all__ = [
    # Messages
    "Participant",
    "MessageState",
    "LoadingState",
    "Message",
    "Attachment",
    # Generation
    "GenerationRequest",
    "Chunk",
    "Response",
    # Session
    "SessionConfig",
    # Events
    "Topic",
    "RequestOutcome",
    "SessionEvent",
    # Tracing
    "TraceEvent",
]
