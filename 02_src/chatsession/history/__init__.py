"""History module."""

from .log import MessageLog

__all__ = ["MessageLog"]
