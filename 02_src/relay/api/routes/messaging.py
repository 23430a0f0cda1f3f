"""Messaging API routes."""

from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication


class MessageRequest(BaseModel):
    """Request model for sending a message."""

    user_id: str
    text: str


class MessageResponse(BaseModel):
    """Response model for message."""

    text: str
    service_response: dict[str, Any] | None = None


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=MessageResponse)
    async def send_message(request: MessageRequest) -> dict:
        """Relay a message to the dialog service and return the reply."""
        try:
            reply = await app.orchestrator.process_message(request.user_id, request.text)
            return {"text": reply.text, "service_response": reply.service_response}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    return router
