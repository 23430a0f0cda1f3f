"""Conversation log data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ConversationRecord:
    """One logical conversation, as flagged by the dialog service."""

    id: str
    user_id: str
    created_at: datetime


@dataclass
class TranscriptEntry:
    """A single message/reply exchange within a conversation."""

    conversation_id: str
    action: str | None
    message: str
    reply: str
    timestamp: datetime
