"""Transport client abstraction."""

from typing import AsyncIterator, Protocol

from ..models import Chunk, GenerationRequest, Response


class ITransportClient(Protocol):
    """Boundary over the remote generative service.

    Both operations raise TransportError subclasses. Abandoning a stream early
    does not stop work already started server-side.
    """

    async def generate(self, request: GenerationRequest) -> Response:
        """Single-shot generation."""
        ...

    def generate_stream(self, request: GenerationRequest) -> AsyncIterator[Chunk]:
        """Lazy sequence of chunks, finite once the service closes the stream."""
        ...
