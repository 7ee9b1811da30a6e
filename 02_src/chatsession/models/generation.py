"""Request and response shapes exchanged with the transport."""

from dataclasses import dataclass

from .messages import Message


@dataclass
class GenerationRequest:
    """Everything the transport needs for one model call.

    ``contents`` holds the prior completed turns followed by the new user
    message.
    """

    contents: list[Message]
    model: str | None = None
    system_instruction: str | None = None
    max_tokens: int | None = None


@dataclass
class Chunk:
    """One increment of a streamed response."""

    text: str | None = None
    grounding_metadata: dict | None = None


@dataclass
class Response:
    """A complete, single-shot response."""

    text: str | None = None
    grounding_metadata: dict | None = None
    finish_reason: str | None = None
