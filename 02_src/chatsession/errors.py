"""
Exception hierarchy for chat sessions.

Transport errors carry an ErrorKind so the UI layer can pick a message
without inspecting exception types.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Error taxonomy surfaced to the UI layer."""

    VALIDATION = "validation"
    NETWORK = "network"
    QUOTA = "quota"
    INVALID_REQUEST = "invalid_request"
    SERVER = "server"
    DECODE = "decode"


class ChatSessionError(Exception):
    """Base exception for chatsession."""

    kind: ErrorKind | None = None

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(ChatSessionError):
    """Input rejected before reaching the transport."""

    kind = ErrorKind.VALIDATION


class TransportError(ChatSessionError):
    """Failure reported by the generative service or the connection to it."""

    kind = ErrorKind.SERVER


class NetworkError(TransportError):
    """Connection failed or timed out."""

    kind = ErrorKind.NETWORK


class QuotaError(TransportError):
    """Rate limit or quota exhausted."""

    kind = ErrorKind.QUOTA


class InvalidRequestError(TransportError):
    """The service rejected the request."""

    kind = ErrorKind.INVALID_REQUEST


class ServerError(TransportError):
    """The service failed to produce a response."""

    kind = ErrorKind.SERVER


class DecodeError(TransportError):
    """Response body could not be decoded."""

    kind = ErrorKind.DECODE


_ERRORS_BY_KIND: dict[ErrorKind, type[ChatSessionError]] = {
    ErrorKind.VALIDATION: ValidationError,
    ErrorKind.NETWORK: NetworkError,
    ErrorKind.QUOTA: QuotaError,
    ErrorKind.INVALID_REQUEST: InvalidRequestError,
    ErrorKind.SERVER: ServerError,
    ErrorKind.DECODE: DecodeError,
}


def error_from_kind(kind: str | None, message: str) -> ChatSessionError:
    """Rebuild an exception from a persisted kind and message."""
    if kind is None:
        return ChatSessionError(message)
    return _ERRORS_BY_KIND.get(ErrorKind(kind), ChatSessionError)(message)
