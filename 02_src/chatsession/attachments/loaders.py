"""Helpers that turn files, URLs and inline payloads into Attachments."""

import asyncio
import base64
import binascii
from pathlib import Path

import httpx

from ..errors import ValidationError
from ..logging_config import get_logger
from ..models import Attachment, LoadingState

logger = get_logger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    # Documents / text
    "pdf": "application/pdf",
    "txt": "text/plain",
    "text": "text/plain",
    # Images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    # Video
    "flv": "video/x-flv",
    "mov": "video/quicktime",
    "qt": "video/quicktime",
    "mpeg": "video/mpeg",
    "mpg": "video/mpg",
    "ps": "video/mpegps",
    "mp4": "video/mp4",
    "webm": "video/webm",
    "wmv": "video/wmv",
    "3gp": "video/3gpp",
    "3gpp": "video/3gpp",
    # Audio
    "aac": "audio/aac",
    "flac": "audio/flac",
    "mp3": "audio/mpeg",
    "m4a": "audio/m4a",
    "mpga": "audio/mpga",
    "mp4a": "audio/mp4",
    "opus": "audio/opus",
    "pcm": "audio/pcm",
    "raw": "audio/pcm",
    "wav": "audio/wav",
    "weba": "audio/webm",
}


def guess_mime_type(path: str | Path) -> str:
    """Map a file extension to a MIME type."""
    extension = Path(path).suffix.lower().lstrip(".")
    return MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)


async def from_file(path: str | Path, mime_type: str | None = None) -> Attachment:
    """Read a local file into an Attachment.

    The read happens in a worker thread. I/O failures produce an attachment
    in the failed loading state instead of raising.
    """
    path = Path(path)
    attachment = Attachment(
        mime_type=mime_type or guess_mime_type(path),
        display_name=path.name,
        url=path.as_uri() if path.is_absolute() else None,
        loading_state=LoadingState.LOADING,
    )
    try:
        attachment.data = await asyncio.to_thread(path.read_bytes)
        attachment.loading_state = LoadingState.LOADED
    except OSError as e:
        logger.error(f"Failed to create attachment from file at {path}: {e}")
        attachment.loading_state = LoadingState.FAILED
        attachment.error = e
    return attachment


async def from_url(
    url: str,
    mime_type: str | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> Attachment:
    """Download a remote resource into an Attachment.

    When ``mime_type`` is omitted the response Content-Type is used.
    """
    attachment = Attachment(
        mime_type=mime_type or DEFAULT_MIME_TYPE,
        display_name=url.rsplit("/", 1)[-1] or url,
        url=url,
        loading_state=LoadingState.LOADING,
    )

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    try:
        response = await client.get(url)
        response.raise_for_status()
        attachment.data = response.content
        if mime_type is None:
            content_type = response.headers.get("content-type", "")
            attachment.mime_type = (
                content_type.split(";", 1)[0].strip() or guess_mime_type(url)
            )
        attachment.loading_state = LoadingState.LOADED
    except httpx.HTTPError as e:
        logger.error(f"Failed to create attachment from url {url}: {e}")
        attachment.loading_state = LoadingState.FAILED
        attachment.error = e
    finally:
        if owns_client:
            await client.aclose()

    return attachment


def from_base64(mime_type: str, data: str, display_name: str = "") -> Attachment:
    """Build an Attachment from an inline base64 payload."""
    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Attachment data is not valid base64") from e
    if not raw:
        raise ValidationError("Attachment data is empty")
    return Attachment(mime_type=mime_type, display_name=display_name, data=raw)


def link(url: str, mime_type: str, display_name: str = "") -> Attachment:
    """Reference a remote file without downloading it."""
    return Attachment(
        mime_type=mime_type,
        display_name=display_name or url.rsplit("/", 1)[-1],
        url=url,
    )
