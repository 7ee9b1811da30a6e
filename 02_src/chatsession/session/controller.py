"""SessionController implementation."""

import asyncio
import uuid
from typing import Protocol

from ..attachments import AttachmentStore
from ..event_bus import IEventBus
from ..history import MessageLog
from ..llm import ITransportClient
from ..logging_config import bind_log_context, get_logger
from ..models import (
    Attachment,
    Chunk,
    GenerationRequest,
    Message,
    MessageState,
    Participant,
    RequestOutcome,
    SessionConfig,
    Topic,
)
from ..storage import IStorage
from .request import ActiveRequest

logger = get_logger(__name__)

SOURCE = "session_controller"


class ISessionController(Protocol):
    """One conversation with the generative service."""

    async def send_message(self, text: str, streaming: bool = True) -> asyncio.Task | None:
        """Append user + placeholder messages and start a request. Returns its task."""
        ...

    async def stop(self) -> None:
        """Cancel the active request, if any."""
        ...

    async def start_new_chat(self) -> None:
        """Stop, then drop history, pending attachments and the error flag."""
        ...

    async def add_attachment(self, attachment: Attachment) -> None:
        """Queue an attachment for the next message."""
        ...

    async def remove_attachment(self, attachment_id: str) -> bool:
        """Remove a queued attachment."""
        ...


class SessionController:
    """Owns the message log, pending attachments and the single in-flight request."""

    def __init__(
        self,
        transport: ITransportClient,
        event_bus: IEventBus | None = None,
        storage: IStorage | None = None,
        config: SessionConfig | None = None,
        conversation_id: str | None = None,
    ):
        self._transport = transport
        self._event_bus = event_bus
        self._storage = storage
        self._config = config or SessionConfig()

        self._conversation_id = conversation_id or str(uuid.uuid4())
        self._log = MessageLog(self._config.history)
        self._attachments = AttachmentStore(self._config.attachments)
        self._title = self._config.title
        self._initial_prompt = self._config.initial_prompt

        self._active: ActiveRequest | None = None
        self._workers: set[asyncio.Task] = set()
        self._inflight = 0
        self._last_error: Exception | None = None

    # State

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def conversation_id(self) -> str:
        return self._conversation_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def initial_prompt(self) -> str:
        return self._initial_prompt

    @property
    def messages(self) -> list[Message]:
        return self._log.get_all()

    @property
    def attachments(self) -> list[Attachment]:
        return self._attachments.get_all()

    @property
    def in_progress(self) -> bool:
        return self._active is not None

    @property
    def inflight_requests(self) -> int:
        """Workers currently inside the transport call."""
        return self._inflight

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def has_error(self) -> bool:
        return self._last_error is not None

    # Operations

    async def send_message(self, text: str, streaming: bool = True) -> asyncio.Task | None:
        """Send ``text`` plus every pending attachment.

        All log mutations happen before the first await. Returns the worker
        task, or None when there was nothing to send or the request was
        superseded before its worker started.
        """
        loaded = [a for a in self._attachments.get_all() if a.is_loaded]
        if not text.strip() and not loaded:
            logger.debug("Ignoring blank message with no loaded attachments")
            return None

        previous = self._active
        if previous is not None:
            previous.cancel()
            logger.info(f"Request {previous.id} superseded by a new message")
        self._last_error = None

        drained = self._attachments.drain_all()
        user_message = Message(
            participant=Participant.USER,
            content=text,
            attachments=drained,
        )
        history = self._log.completed_turns()
        user_position = self._log.append(user_message)
        assistant_message = Message.pending(Participant.ASSISTANT)
        assistant_position = self._log.append(assistant_message)

        request = ActiveRequest(
            conversation_id=self._conversation_id,
            assistant_message=assistant_message,
            position=assistant_position,
            streaming=streaming,
        )
        self._active = request

        generation_request = GenerationRequest(
            contents=history + [user_message],
            model=self._config.model_name,
            system_instruction=self._config.system_instruction,
            max_tokens=self._config.max_tokens,
        )

        logger.info(
            f"Message sent: {text[:100]}",
            extra={
                "context": {
                    "conversation_id": request.conversation_id,
                    "request_id": request.id,
                    "attachments": len(drained),
                    "streaming": streaming,
                }
            },
        )

        try:
            await self._persist(request.conversation_id, user_position, user_message)
            await self._emit(Topic.MESSAGE_APPENDED, self._message_payload(user_message))
            await self._emit(
                Topic.MESSAGE_APPENDED, self._message_payload(assistant_message)
            )
            if drained:
                await self._emit(
                    Topic.ATTACHMENTS_CHANGED,
                    {"action": "drained", "count": 0, "message_id": user_message.id},
                )
        except Exception as e:
            # No worker exists yet, so nothing else will finalize this request.
            logger.error(f"Request {request.id} could not start: {e}", exc_info=True)
            if self._active is request:
                self._active = None
            if not request.cancelled:
                self._last_error = e
                assistant_message.state = MessageState.FAILED
                assistant_message.error = e
            raise

        if request.cancelled:
            return None

        # Includes workers already detached by stop() or start_new_chat().
        earlier = list(self._workers)
        task = asyncio.create_task(self._run(request, generation_request, earlier))
        request.task = task
        self._workers.add(task)
        task.add_done_callback(self._workers.discard)
        return task

    async def stop(self) -> None:
        """Cancel the active request. No-op when nothing is in flight."""
        request = self._active
        if request is None:
            return
        self._active = None
        request.cancel()
        logger.info(f"Request {request.id} stopped")

    async def start_new_chat(self) -> None:
        """Discard history and pending attachments, keeping the model settings."""
        await self.stop()
        self._last_error = None
        self._log.clear()
        self._attachments.clear()
        self._initial_prompt = ""
        previous_id, self._conversation_id = self._conversation_id, str(uuid.uuid4())

        logger.info(f"New chat {self._conversation_id} replaces {previous_id}")
        await self._emit(
            Topic.MESSAGES_CLEARED,
            {"previous_conversation_id": previous_id},
        )
        await self._emit(Topic.ATTACHMENTS_CHANGED, {"action": "cleared", "count": 0})

    async def add_attachment(self, attachment: Attachment) -> None:
        """Queue an attachment for the next message."""
        self._attachments.add(attachment)
        await self._emit(
            Topic.ATTACHMENTS_CHANGED,
            {
                "action": "added",
                "attachment_id": attachment.id,
                "mime_type": attachment.mime_type,
                "count": len(self._attachments),
            },
        )

    async def remove_attachment(self, attachment_id: str) -> bool:
        """Remove a queued attachment. Returns False if it was not queued."""
        removed = self._attachments.remove(attachment_id)
        if removed:
            await self._emit(
                Topic.ATTACHMENTS_CHANGED,
                {
                    "action": "removed",
                    "attachment_id": attachment_id,
                    "count": len(self._attachments),
                },
            )
        return removed

    async def wait(self) -> None:
        """Wait until every worker, including cancelled ones, has finished."""
        while self._workers:
            await asyncio.wait(list(self._workers))

    async def close(self) -> None:
        """Stop and wait for workers to unwind."""
        await self.stop()
        await self.wait()

    # Worker

    async def _run(
        self,
        request: ActiveRequest,
        generation_request: GenerationRequest,
        earlier: list[asyncio.Task],
    ) -> None:
        # Scoped to this worker task.
        bind_log_context(
            conversation_id=request.conversation_id, request_id=request.id
        )
        outcome = RequestOutcome.COMPLETED
        entered = False
        try:
            # A cancelled worker may still be inside the transport.
            if earlier:
                await asyncio.wait(earlier)

            self._inflight += 1
            entered = True
            await self._emit(
                Topic.REQUEST_STARTED,
                {
                    "conversation_id": request.conversation_id,
                    "request_id": request.id,
                    "message_id": request.assistant_message.id,
                    "streaming": request.streaming,
                },
            )

            if request.streaming:
                await self._consume_stream(request, generation_request)
            else:
                await self._consume_response(request, generation_request)

            if request.cancelled:
                outcome = RequestOutcome.CANCELLED

        except asyncio.CancelledError:
            outcome = RequestOutcome.CANCELLED
            logger.info(f"Request {request.id} cancelled")

        except Exception as e:
            if request.cancelled:
                outcome = RequestOutcome.CANCELLED
                logger.info(f"Discarding error from cancelled request {request.id}: {e}")
            else:
                outcome = RequestOutcome.FAILED
                await self._fail(request, e)

        finally:
            if entered:
                self._inflight -= 1
            if self._active is request:
                self._active = None

        try:
            await self._finish(request, outcome)
        except Exception as e:
            logger.error(f"Failed to record end of request {request.id}: {e}", exc_info=True)

    async def _consume_stream(
        self, request: ActiveRequest, generation_request: GenerationRequest
    ) -> None:
        message = request.assistant_message
        stream = self._transport.generate_stream(generation_request)
        try:
            async for chunk in stream:
                if request.cancelled:
                    break
                self._apply_chunk(message, chunk)
                await self._emit(
                    Topic.MESSAGE_UPDATED,
                    {
                        **self._message_payload(message, request.conversation_id),
                        "delta": chunk.text,
                    },
                )
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

        if request.cancelled:
            return
        message.state = MessageState.COMPLETE
        await self._emit(
            Topic.MESSAGE_UPDATED,
            self._message_payload(message, request.conversation_id),
        )

    async def _consume_response(
        self, request: ActiveRequest, generation_request: GenerationRequest
    ) -> None:
        response = await self._transport.generate(generation_request)
        if request.cancelled:
            return

        message = request.assistant_message
        if response.text is not None:
            message.content = response.text
        if response.grounding_metadata is not None:
            message.grounding_metadata = response.grounding_metadata
        message.state = MessageState.COMPLETE
        await self._emit(
            Topic.MESSAGE_UPDATED,
            self._message_payload(message, request.conversation_id),
        )

    @staticmethod
    def _apply_chunk(message: Message, chunk: Chunk) -> None:
        message.state = MessageState.STREAMING
        if chunk.text:
            message.append(chunk.text)
        if chunk.grounding_metadata is not None:
            message.grounding_metadata = chunk.grounding_metadata
        logger.debug(f"Applied chunk to {message.id}: {len(chunk.text or '')} chars")

    async def _fail(self, request: ActiveRequest, error: Exception) -> None:
        logger.error(f"Request {request.id} failed: {error}", exc_info=error)
        self._last_error = error
        message = request.assistant_message
        message.state = MessageState.FAILED
        message.error = error
        await self._emit(
            Topic.MESSAGE_UPDATED,
            self._message_payload(message, request.conversation_id),
        )

    async def _finish(self, request: ActiveRequest, outcome: RequestOutcome) -> None:
        message = request.assistant_message
        await self._persist(request.conversation_id, request.position, message)

        payload = {
            "conversation_id": request.conversation_id,
            "request_id": request.id,
            "message_id": message.id,
            "outcome": outcome.value,
            "state": message.state.value,
        }
        if outcome == RequestOutcome.FAILED and message.error is not None:
            kind = getattr(message.error, "kind", None)
            payload["error"] = str(message.error)
            payload["error_kind"] = kind.value if kind is not None else None
        await self._emit(Topic.REQUEST_FINISHED, payload)

    # Helpers

    async def _emit(self, topic: Topic, payload: dict) -> None:
        if self._event_bus is None:
            return
        await self._event_bus.emit(topic, payload, SOURCE)

    async def _persist(self, conversation_id: str, position: int, message: Message) -> None:
        if self._storage is None:
            return
        await self._storage.save_message(conversation_id, position, message)

    def _message_payload(
        self, message: Message, conversation_id: str | None = None
    ) -> dict:
        return {
            "conversation_id": conversation_id or self._conversation_id,
            "message_id": message.id,
            "participant": message.participant.value,
            "state": message.state.value,
        }
