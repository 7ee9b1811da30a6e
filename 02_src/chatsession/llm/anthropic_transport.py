"""Transport implementation using Anthropic Claude API."""

import base64
import os
from typing import AsyncIterator

import anthropic

from ..config import default_max_tokens, default_model
from ..errors import (
    DecodeError,
    InvalidRequestError,
    NetworkError,
    QuotaError,
    ServerError,
    TransportError,
    ValidationError,
)
from ..logging_config import get_logger
from ..models import Attachment, Chunk, GenerationRequest, Message, Participant, Response

logger = get_logger(__name__)

IMAGE_MIME_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


def map_error(error: anthropic.APIError) -> TransportError:
    """Translate an SDK exception into the transport error taxonomy."""
    message = f"LLM API error: {error}"
    if isinstance(error, anthropic.APIConnectionError):
        return NetworkError(message)
    if isinstance(error, anthropic.APIResponseValidationError):
        return DecodeError(message)
    if isinstance(error, anthropic.RateLimitError):
        return QuotaError(message)
    if isinstance(error, anthropic.APIStatusError):
        if error.status_code >= 500:
            return ServerError(message, details={"status_code": error.status_code})
        return InvalidRequestError(message, details={"status_code": error.status_code})
    return ServerError(message)


def _attachment_block(attachment: Attachment) -> dict:
    mime_type = attachment.mime_type
    if mime_type in IMAGE_MIME_TYPES:
        block_type = "image"
    elif mime_type == "application/pdf":
        block_type = "document"
    elif mime_type == "text/plain" and attachment.data is not None:
        return {
            "type": "document",
            "source": {
                "type": "text",
                "media_type": "text/plain",
                "data": attachment.data.decode("utf-8", errors="replace"),
            },
        }
    else:
        raise InvalidRequestError(f"Unsupported attachment type: {mime_type}")

    if attachment.data:
        source = {
            "type": "base64",
            "media_type": mime_type,
            "data": base64.b64encode(attachment.data).decode("ascii"),
        }
    elif attachment.url and attachment.url.startswith(("http://", "https://")):
        source = {"type": "url", "url": attachment.url}
    else:
        raise InvalidRequestError(f"Attachment {attachment.id} has no payload")
    return {"type": block_type, "source": source}


def to_api_message(message: Message) -> dict:
    """Convert a log message to the Messages API format."""
    if message.participant == Participant.ASSISTANT:
        return {"role": "assistant", "content": message.content or ""}

    if not message.attachments:
        return {"role": "user", "content": message.content or ""}

    blocks: list[dict] = []
    if message.content:
        blocks.append({"type": "text", "text": message.content})
    for attachment in message.attachments:
        if not attachment.is_loaded:
            logger.warning(
                f"Skipping attachment {attachment.id} in state {attachment.loading_state.value}"
            )
            continue
        blocks.append(_attachment_block(attachment))
    if not blocks:
        raise ValidationError(
            f"Message {message.id} has no text and no loaded attachments"
        )
    return {"role": "user", "content": blocks}


class AnthropicTransport:
    """Anthropic Claude API transport."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self._model = model or default_model()
        self._max_tokens = max_tokens or default_max_tokens()
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    def _build_params(self, request: GenerationRequest) -> dict:
        params = {
            "model": request.model or self._model,
            "max_tokens": request.max_tokens or self._max_tokens,
            "messages": [to_api_message(m) for m in request.contents],
        }
        if request.system_instruction:
            params["system"] = request.system_instruction
        return params

    async def generate(self, request: GenerationRequest) -> Response:
        """Generate a complete response using Claude API."""
        params = self._build_params(request)
        try:
            response = await self._client.messages.create(**params)
        except anthropic.APIError as e:
            raise map_error(e) from e

        try:
            text = "".join(
                block.text for block in response.content if block.type == "text"
            )
        except (AttributeError, TypeError) as e:
            raise DecodeError("Malformed response body") from e

        return Response(text=text or None, finish_reason=response.stop_reason)

    async def generate_stream(self, request: GenerationRequest) -> AsyncIterator[Chunk]:
        """Stream text deltas using Claude API."""
        params = self._build_params(request)
        try:
            async with self._client.messages.stream(**params) as stream:
                async for text in stream.text_stream:
                    yield Chunk(text=text)
        except anthropic.APIError as e:
            raise map_error(e) from e
