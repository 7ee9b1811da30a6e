"""Messaging API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import IApplication
from ..schemas import MessageView, SessionView, attachment_view, error_view, message_view


class MessageRequest(BaseModel):
    """Request model for sending a message."""

    text: str = ""
    streaming: bool = True


class MessageAccepted(BaseModel):
    """Response model for an accepted message."""

    conversation_id: str
    user_message_id: str
    assistant_message_id: str


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=MessageAccepted, status_code=202)
    async def send_message(request: MessageRequest) -> dict:
        """Send a message; the reply is generated in the background."""
        session = app.session
        task = await session.send_message(request.text, streaming=request.streaming)
        if task is None:
            raise HTTPException(
                status_code=400, detail="Message text or attachments required"
            )
        messages = session.messages
        return {
            "conversation_id": session.conversation_id,
            "user_message_id": messages[-2].id,
            "assistant_message_id": messages[-1].id,
        }

    @router.get("/messages", response_model=list[MessageView])
    async def get_messages() -> list[MessageView]:
        """Get the message log."""
        return [message_view(m) for m in app.session.messages]

    @router.get("/session", response_model=SessionView)
    async def get_session() -> SessionView:
        """Get the full session view state."""
        session = app.session
        return SessionView(
            conversation_id=session.conversation_id,
            title=session.title,
            initial_prompt=session.initial_prompt,
            model_name=session.config.model_name,
            in_progress=session.in_progress,
            error=error_view(session.last_error),
            messages=[message_view(m) for m in session.messages],
            attachments=[attachment_view(a) for a in session.attachments],
        )

    @router.post("/stop", response_model=StatusResponse)
    async def stop() -> dict:
        """Cancel the in-flight request."""
        await app.session.stop()
        return {"status": "ok"}

    @router.post("/chat/new", response_model=StatusResponse)
    async def new_chat() -> dict:
        """Discard history and start over."""
        await app.session.start_new_chat()
        return {"status": "ok"}

    return router
