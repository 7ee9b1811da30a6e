"""Session configuration."""

from dataclasses import dataclass, field

from ..config import default_max_tokens, default_model
from .messages import Attachment, Message


@dataclass
class SessionConfig:
    """Model settings and seed state for a conversation."""

    model_name: str = field(default_factory=default_model)
    system_instruction: str | None = None
    max_tokens: int = field(default_factory=default_max_tokens)
    title: str = ""
    initial_prompt: str = ""
    history: list[Message] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
