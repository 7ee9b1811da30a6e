"""Streaming chat sessions over a generative model."""

from .app import Application, IApplication
from .attachments import AttachmentStore
from .errors import (
    ChatSessionError,
    DecodeError,
    ErrorKind,
    InvalidRequestError,
    NetworkError,
    QuotaError,
    ServerError,
    TransportError,
    ValidationError,
)
from .event_bus import EventBus, IEventBus
from .history import MessageLog
from .llm import AnthropicTransport, ITransportClient
from .models import (
    Attachment,
    Chunk,
    GenerationRequest,
    LoadingState,
    Message,
    MessageState,
    Participant,
    RequestOutcome,
    Response,
    SessionConfig,
    SessionEvent,
    Topic,
    TraceEvent,
)
from .samples import SAMPLES, Sample
from .session import ISessionController, SessionController
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "Participant",
    "MessageState",
    "LoadingState",
    "Message",
    "Attachment",
    "GenerationRequest",
    "Chunk",
    "Response",
    "SessionConfig",
    "SessionEvent",
    "Topic",
    "RequestOutcome",
    "TraceEvent",
    # Errors
    "ErrorKind",
    "ChatSessionError",
    "ValidationError",
    "TransportError",
    "NetworkError",
    "QuotaError",
    "InvalidRequestError",
    "ServerError",
    "DecodeError",
    # Components
    "AttachmentStore",
    "MessageLog",
    "ITransportClient",
    "AnthropicTransport",
    "IEventBus",
    "EventBus",
    "IStorage",
    "Storage",
    "ITracker",
    "Tracker",
    "ISessionController",
    "SessionController",
    # Presets
    "Sample",
    "SAMPLES",
]
