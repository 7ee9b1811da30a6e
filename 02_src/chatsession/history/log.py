"""MessageLog implementation."""

from ..models import Message, MessageState, Participant


class MessageLog:
    """Ordered, append-only history of a conversation."""

    def __init__(self, messages: list[Message] | None = None):
        self._messages: list[Message] = list(messages or [])

    def append(self, message: Message) -> int:
        """Append a message and return its position."""
        self._messages.append(message)
        return len(self._messages) - 1

    def last(self) -> Message | None:
        """Most recent message, if any."""
        return self._messages[-1] if self._messages else None

    def position(self, message_id: str) -> int | None:
        """Index of a message in the log."""
        for index, message in enumerate(self._messages):
            if message.id == message_id:
                return index
        return None

    def get_all(self) -> list[Message]:
        """Get all messages in insertion order."""
        return self._messages.copy()

    def completed_turns(self) -> list[Message]:
        """Messages that form the model-visible history.

        A user message is kept only together with the assistant reply that
        followed it, and only once that reply completed.
        """
        turns: list[Message] = []
        pending_user: Message | None = None
        for message in self._messages:
            if message.participant == Participant.USER:
                pending_user = message
            elif pending_user is not None:
                if message.state == MessageState.COMPLETE and message.content:
                    turns.extend([pending_user, message])
                pending_user = None
        return turns

    def clear(self) -> None:
        """Drop every message."""
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)
