"""SQLite-backed user directory."""

import json
import uuid
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..errors import ConflictError, LookupConflict, StoreError
from ..logging_config import get_logger
from ..models import UserRecord

logger = get_logger(__name__)


def _next_revision(revision: str | None) -> str:
    """Build the revision token that follows ``revision``."""
    generation = 0
    if revision:
        generation = int(revision.split("-", 1)[0])
    return f"{generation + 1}-{uuid.uuid4().hex}"


class IUserStore(Protocol):
    """Durable mapping from sender id to UserRecord."""

    async def init(self) -> None:
        """Open the database and create tables."""
        ...

    async def close(self) -> None:
        """Close the database connection."""
        ...

    async def get(self, user_id: str) -> UserRecord | None:
        """Get a user by sender id."""
        ...

    async def get_or_create(self, user_id: str) -> UserRecord:
        """Return the user, creating it with an empty context on first contact."""
        ...

    async def persist_context(self, user: UserRecord, context: dict | None) -> UserRecord:
        """Overwrite the user's context. Raises ConflictError on a stale revision."""
        ...


class UserStore:
    """SQLite user directory with optimistic concurrency on revisions."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Open the database and create tables."""
        logger.info("Opening user database %s", self._db_path)
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "user_schema.sql"
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
            raise StoreError("User store not initialized")
        return self._conn

    async def get(self, user_id: str) -> UserRecord | None:
        """Get a user by sender id."""
        conn = self._require_conn()
        try:
            cursor = await conn.execute(
                """
                SELECT id, conversation_context, revision
                FROM users
                WHERE id = ?
                """,
                (user_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read user {user_id}", e) from e

        if not row:
            return None

        return UserRecord(
            id=row[0],
            conversation_context=json.loads(row[1]) if row[1] else None,
            revision=row[2],
        )

    async def get_or_create(self, user_id: str) -> UserRecord:
        """Return the user, creating it with an empty context on first contact."""
        user = await self.get(user_id)
        if user:
            logger.debug("User %s already exists", user_id, extra={"sender_id": user_id})
            return user

        try:
            return await self._insert(user_id)
        except LookupConflict:
            # Another message from the same sender created it first.
            logger.info(
                "User %s was created concurrently, using existing record",
                user_id,
                extra={"sender_id": user_id},
            )
            user = await self.get(user_id)
            if user is None:
                raise StoreError(f"User {user_id} vanished after create conflict")
            return user

    async def _insert(self, user_id: str) -> UserRecord:
        conn = self._require_conn()
        user = UserRecord(id=user_id, conversation_context=None, revision=_next_revision(None))
        try:
            await conn.execute(
                """
                INSERT INTO users (id, conversation_context, revision)
                VALUES (?, ?, ?)
                """,
                (user.id, None, user.revision),
            )
            await conn.commit()
        except aiosqlite.IntegrityError as e:
            raise LookupConflict(f"User {user_id} already exists", e) from e
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to create user {user_id}", e) from e

        logger.info("Created new user %s", user_id, extra={"sender_id": user_id})
        return user

    async def persist_context(self, user: UserRecord, context: dict | None) -> UserRecord:
        """Overwrite the user's context. Raises ConflictError on a stale revision."""
        conn = self._require_conn()
        revision = _next_revision(user.revision)
        try:
            cursor = await conn.execute(
                """
                UPDATE users
                SET conversation_context = ?, revision = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ? AND revision = ?
                """,
                (
                    json.dumps(context) if context is not None else None,
                    revision,
                    user.id,
                    user.revision,
                ),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to update user {user.id}", e) from e

        if cursor.rowcount == 0:
            raise ConflictError(
                f"Revision {user.revision} of user {user.id} is stale"
            )

        return UserRecord(id=user.id, conversation_context=context, revision=revision)
