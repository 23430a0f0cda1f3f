"""Read-only views of the conversation log."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication


class ConversationResponse(BaseModel):
    """Response model for a conversation."""

    id: str
    user_id: str
    created_at: datetime


class TranscriptEntryResponse(BaseModel):
    """Response model for a transcript entry."""

    conversation_id: str
    action: str | None
    message: str
    reply: str
    timestamp: datetime


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get(
        "/users/{user_id}/conversations",
        response_model=list[ConversationResponse],
    )
    async def list_conversations(user_id: str) -> list[dict]:
        """List a user's conversations, oldest first."""
        try:
            conversations = await app.dialog_store.list_conversations(user_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return [
            {"id": c.id, "user_id": c.user_id, "created_at": c.created_at}
            for c in conversations
        ]

    @router.get(
        "/conversations/{conversation_id}/transcript",
        response_model=list[TranscriptEntryResponse],
    )
    async def get_transcript(conversation_id: str) -> list[dict]:
        """Get a conversation's transcript in logged order."""
        try:
            conversation = await app.dialog_store.get_conversation(conversation_id)
            if conversation is None:
                raise HTTPException(status_code=404, detail="Conversation not found")
            entries = await app.dialog_store.get_transcript(conversation_id)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return [
            {
                "conversation_id": e.conversation_id,
                "action": e.action,
                "message": e.message,
                "reply": e.reply,
                "timestamp": e.timestamp,
            }
            for e in entries
        ]

    return router
