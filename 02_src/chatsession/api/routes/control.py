"""Control API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import IApplication
from ...samples import SAMPLES


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


class SessionOpened(BaseModel):
    """Response model for a newly opened session."""

    conversation_id: str
    title: str
    initial_prompt: str


class SampleResponse(BaseModel):
    """Response model for a preset."""

    index: int
    title: str
    description: str
    initial_prompt: str


def create_control_router(app: IApplication) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/reset", response_model=StatusResponse)
    async def reset_system() -> dict:
        """Discard the session and all stored data."""
        await app.reset()
        return {"status": "ok"}

    @router.get("/samples", response_model=list[SampleResponse])
    async def list_samples() -> list[dict]:
        """Available presets."""
        return [
            {
                "index": index,
                "title": sample.title,
                "description": sample.description,
                "initial_prompt": sample.initial_prompt,
            }
            for index, sample in enumerate(SAMPLES)
        ]

    @router.post("/samples/{index}", response_model=SessionOpened)
    async def open_sample(index: int) -> dict:
        """Open a new session from a preset."""
        if not 0 <= index < len(SAMPLES):
            raise HTTPException(status_code=404, detail="Sample not found")
        session = await app.open_session(SAMPLES[index].to_config())
        return {
            "conversation_id": session.conversation_id,
            "title": session.title,
            "initial_prompt": session.initial_prompt,
        }

    @router.post("/resume/{conversation_id}", response_model=SessionOpened)
    async def resume(conversation_id: str) -> dict:
        """Reopen a stored conversation."""
        try:
            session = await app.resume(conversation_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return {
            "conversation_id": session.conversation_id,
            "title": session.title,
            "initial_prompt": session.initial_prompt,
        }

    return router
