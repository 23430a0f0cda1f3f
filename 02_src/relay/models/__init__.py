"""Core data models for the conversation relay."""

from .users import UserRecord
from .conversations import ConversationRecord, TranscriptEntry
from .dialog import (
    ACTION_KEY,
    CONVERSATION_ID_KEY,
    NEW_CONVERSATION_KEY,
    DialogResponse,
    Entity,
    Reply,
)

__all__ = [
    # Users
    "UserRecord",
    # Conversation log
    "ConversationRecord",
    "TranscriptEntry",
    # Dialog service
    "DialogResponse",
    "Entity",
    "Reply",
    "ACTION_KEY",
    "CONVERSATION_ID_KEY",
    "NEW_CONVERSATION_KEY",
]
