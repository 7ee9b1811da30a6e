"""Attachment API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...app import IApplication
from ...attachments import from_base64, from_url, link
from ...errors import ValidationError
from ..schemas import AttachmentView, attachment_view


class AttachmentRequest(BaseModel):
    """Inline payload (base64) or remote URL."""

    mime_type: str | None = None
    display_name: str = ""
    data: str | None = None
    url: str | None = None
    fetch: bool = False  # download the URL now instead of sending a reference


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_attachments_router(app: IApplication) -> APIRouter:
    """Create attachments router."""
    router = APIRouter(prefix="/api/attachments", tags=["attachments"])

    @router.get("", response_model=list[AttachmentView])
    async def list_attachments() -> list[AttachmentView]:
        """Attachments queued for the next message."""
        return [attachment_view(a) for a in app.session.attachments]

    @router.post("", response_model=AttachmentView, status_code=201)
    async def add_attachment(request: AttachmentRequest) -> AttachmentView:
        """Queue an attachment."""
        try:
            if request.data is not None:
                if not request.mime_type:
                    raise ValidationError("mime_type is required for inline data")
                attachment = from_base64(
                    request.mime_type, request.data, request.display_name
                )
            elif request.url:
                if request.fetch:
                    attachment = await from_url(request.url, request.mime_type)
                    if not attachment.is_loaded:
                        raise HTTPException(
                            status_code=502, detail=f"Failed to fetch {request.url}"
                        )
                else:
                    if not request.mime_type:
                        raise ValidationError("mime_type is required for links")
                    attachment = link(request.url, request.mime_type, request.display_name)
            else:
                raise ValidationError("Either data or url is required")
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=e.message)

        if request.display_name:
            attachment.display_name = request.display_name
        await app.session.add_attachment(attachment)
        return attachment_view(attachment)

    @router.delete("/{attachment_id}", response_model=StatusResponse)
    async def remove_attachment(attachment_id: str) -> dict:
        """Remove a queued attachment."""
        if not await app.session.remove_attachment(attachment_id):
            raise HTTPException(status_code=404, detail="Attachment not found")
        return {"status": "ok"}

    return router
