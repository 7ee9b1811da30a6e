"""LLM transport module."""

from .anthropic_transport import AnthropicTransport, map_error
from .transport import ITransportClient

__all__ = ["ITransportClient", "AnthropicTransport", "map_error"]
