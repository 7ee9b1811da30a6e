"""Attachments module."""

from .loaders import from_base64, from_file, from_url, guess_mime_type, link
from .store import AttachmentStore

__all__ = [
    "AttachmentStore",
    "guess_mime_type",
    "from_file",
    "from_url",
    "from_base64",
    "link",
]
