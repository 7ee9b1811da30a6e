"""API routes."""

from . import attachments, control, messaging, observability

__all__ = ["attachments", "control", "messaging", "observability"]
