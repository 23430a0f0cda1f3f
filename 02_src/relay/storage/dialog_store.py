"""SQLite-backed conversation log."""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..errors import StoreError
from ..logging_config import get_logger
from ..models import ConversationRecord, TranscriptEntry

logger = get_logger(__name__)


def _parse_ts(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class IDialogStore(Protocol):
    """Append-only log of conversations and their transcript entries."""

    async def init(self) -> None:
        """Open the database and create tables."""
        ...

    async def close(self) -> None:
        """Close the database connection."""
        ...

    async def create_conversation(self, user_id: str) -> ConversationRecord:
        """Create a new conversation owned by ``user_id``."""
        ...

    async def get_conversation(self, conversation_id: str) -> ConversationRecord | None:
        """Get a conversation by id."""
        ...

    async def list_conversations(self, user_id: str) -> list[ConversationRecord]:
        """List a user's conversations, oldest first."""
        ...

    async def append_transcript_entry(
        self, conversation_id: str, entry: TranscriptEntry
    ) -> None:
        """Append an entry to a conversation. Raises StoreError on failure."""
        ...

    async def get_transcript(self, conversation_id: str) -> list[TranscriptEntry]:
        """Get a conversation's entries in append order."""
        ...


class DialogStore:
    """SQLite conversation log."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create tables."""
        logger.info("Opening dialog database %s", self._db_path)
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "dialog_schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise StoreError("Dialog store not initialized")
        return self._conn

    # Conversations
    async def create_conversation(self, user_id: str) -> ConversationRecord:
        """Create a new conversation owned by ``user_id``."""
        conn = self._require_conn()
        conversation = ConversationRecord(
            id=uuid.uuid4().hex,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await conn.execute(
                """
                INSERT INTO conversations (id, user_id, created_at)
                VALUES (?, ?, ?)
                """,
                (conversation.id, conversation.user_id, conversation.created_at.isoformat()),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to create conversation for {user_id}", e) from e

        logger.info(
            "Created conversation %s",
            conversation.id,
            extra={"sender_id": user_id, "conversation_id": conversation.id},
        )
        return conversation

    async def get_conversation(self, conversation_id: str) -> ConversationRecord | None:
        """Get a conversation by id."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT id, user_id, created_at
            FROM conversations
            WHERE id = ?
            """,
            (conversation_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return ConversationRecord(id=row[0], user_id=row[1], created_at=_parse_ts(row[2]))

    async def list_conversations(self, user_id: str) -> list[ConversationRecord]:
        """List a user's conversations, oldest first."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT id, user_id, created_at
            FROM conversations
            WHERE user_id = ?
            ORDER BY created_at ASC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()

        return [
            ConversationRecord(id=row[0], user_id=row[1], created_at=_parse_ts(row[2]))
            for row in rows
        ]

    # Transcript
    async def append_transcript_entry(
        self, conversation_id: str, entry: TranscriptEntry
    ) -> None:
        """Append an entry to a conversation. Raises StoreError on failure."""
        conn = self._require_conn()
        try:
            await conn.execute(
                """
                INSERT INTO dialogs (conversation_id, action, message, reply, timestamp)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    conversation_id,
                    entry.action,
                    entry.message,
                    entry.reply,
                    entry.timestamp.isoformat(),
                ),
            )
            await conn.commit()
        except (aiosqlite.Error, ValueError) as e:
            raise StoreError(
                f"Failed to append transcript entry to {conversation_id}", e
            ) from e

    async def get_transcript(self, conversation_id: str) -> list[TranscriptEntry]:
        """Get a conversation's entries in append order."""
        conn = self._require_conn()
        cursor = await conn.execute(
            """
            SELECT conversation_id, action, message, reply, timestamp
            FROM dialogs
            WHERE conversation_id = ?
            ORDER BY seq ASC
            """,
            (conversation_id,),
        )
        rows = await cursor.fetchall()

        return [
            TranscriptEntry(
                conversation_id=row[0],
                action=row[1],
                message=row[2],
                reply=row[3],
                timestamp=_parse_ts(row[4]),
            )
            for row in rows
        ]
