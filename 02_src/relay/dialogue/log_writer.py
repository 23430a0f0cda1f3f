"""Single-flight writer that drains transcript entries into the conversation log."""

import asyncio
from collections import deque

from ..logging_config import get_logger
from ..models import TranscriptEntry
from ..storage import IDialogStore

logger = get_logger(__name__)


class SerializedLogWriter:
    """FIFO queue of transcript entries written one at a time.

    enqueue() never blocks. At most one write to the store is in flight, and
    entries reach the store in the order they were enqueued. A failed write
    is logged and dropped; the drain carries on with the next entry.
    """

    def __init__(self, dialog_store: IDialogStore):
        self._dialog_store = dialog_store
        self._queue: deque[TranscriptEntry] = deque()
        self._draining = False
        self._task: asyncio.Task | None = None
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> int:
        """Entries not yet handed to the store."""
        return len(self._queue)

    @property
    def draining(self) -> bool:
        return self._draining

    def enqueue(self, entry: TranscriptEntry) -> None:
        """Queue an entry and start draining if no drain is running."""
        self._queue.append(entry)
        if self._draining:
            return

        # Set before the task is scheduled so a second enqueue in the same
        # loop iteration does not start another drain.
        self._draining = True
        self._idle.clear()
        self._task = asyncio.create_task(self._drain())

    async def _drain(self) -> None:
        try:
            while self._queue:
                entry = self._queue.popleft()
                try:
                    await self._dialog_store.append_transcript_entry(
                        entry.conversation_id, entry
                    )
                except Exception as e:
                    logger.error(
                        "Failed to save transcript entry: %s",
                        e,
                        exc_info=True,
                        extra={
                            "conversation_id": entry.conversation_id,
                            "action": entry.action,
                        },
                    )
        finally:
            self._draining = False
            self._task = None
            self._idle.set()

    async def flush(self) -> None:
        """Wait until every queued entry has been written or dropped."""
        await self._idle.wait()
