"""Handle for one cancellable unit of work."""

import asyncio
import uuid
from dataclasses import dataclass, field

from ..models import Message


@dataclass
class ActiveRequest:
    """One send: the assistant message it owns and the task filling it.

    The worker checks ``cancelled`` before every mutation, so results that
    arrive after cancellation are dropped even if the task itself is past
    its last await.
    """

    conversation_id: str
    assistant_message: Message
    position: int
    streaming: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    task: asyncio.Task | None = None
    cancelled: bool = False

    def cancel(self) -> None:
        """Mark cancelled and interrupt the task. Idempotent."""
        if self.cancelled:
            return
        self.cancelled = True
        if self.task is not None and not self.task.done():
            self.task.cancel()
