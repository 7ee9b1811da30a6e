"""AttachmentStore implementation."""

from ..models import Attachment


class AttachmentStore:
    """Pending attachments queued for the next outgoing message."""

    def __init__(self, attachments: list[Attachment] | None = None):
        self._attachments: list[Attachment] = list(attachments or [])

    def add(self, attachment: Attachment) -> None:
        """Queue an attachment."""
        self._attachments.append(attachment)

    def remove(self, attachment_id: str) -> bool:
        """Remove an attachment by id. Returns False if it was not queued."""
        before = len(self._attachments)
        self._attachments = [a for a in self._attachments if a.id != attachment_id]
        return len(self._attachments) != before

    def get(self, attachment_id: str) -> Attachment | None:
        """Look up a queued attachment."""
        return next((a for a in self._attachments if a.id == attachment_id), None)

    def get_all(self) -> list[Attachment]:
        """Get all queued attachments in insertion order."""
        return self._attachments.copy()

    def drain_all(self) -> list[Attachment]:
        """Return every queued attachment and empty the store."""
        drained, self._attachments = self._attachments, []
        return drained

    def clear(self) -> None:
        """Drop all queued attachments."""
        self._attachments = []

    def __len__(self) -> int:
        return len(self._attachments)
