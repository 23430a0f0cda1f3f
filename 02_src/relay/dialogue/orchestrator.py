"""Conversation orchestrator: the per-message lifecycle."""

import asyncio
from datetime import datetime, timezone
from typing import Protocol

from ..dialog_service import IDialogServiceClient
from ..logging_config import get_logger
from ..models import (
    CONVERSATION_ID_KEY,
    NEW_CONVERSATION_KEY,
    DialogResponse,
    Reply,
    TranscriptEntry,
    UserRecord,
)
from ..storage import IDialogStore, IUserStore
from .actions import ActionRegistry, create_default_registry
from .log_writer import SerializedLogWriter

logger = get_logger(__name__)

FALLBACK_REPLY = "Sorry, something went wrong!"


class IConversationOrchestrator(Protocol):
    """Relays one user message to the dialog service and back."""

    async def process_message(self, sender_id: str, text: str) -> Reply:
        """Process a message. Never raises: failures become the fallback reply."""
        ...


class ConversationOrchestrator:
    """Resolves the sender, calls the dialog service, logs and persists the exchange."""

    def __init__(
        self,
        user_store: IUserStore,
        dialog_store: IDialogStore,
        dialog_client: IDialogServiceClient,
        log_writer: SerializedLogWriter,
        actions: ActionRegistry | None = None,
        serialize_per_sender: bool = False,
    ):
        self._users = user_store
        self._dialog_store = dialog_store
        self._dialog_client = dialog_client
        self._log_writer = log_writer
        self._actions = actions or create_default_registry()
        self._serialize_per_sender = serialize_per_sender
        self._sender_locks: dict[str, asyncio.Lock] = {}
        self._sender_waiters: dict[str, int] = {}

    async def process_message(self, sender_id: str, text: str) -> Reply:
        """Process a message. Never raises: failures become the fallback reply."""
        if not self._serialize_per_sender:
            return await self._process(sender_id, text)

        lock = self._sender_locks.setdefault(sender_id, asyncio.Lock())
        self._sender_waiters[sender_id] = self._sender_waiters.get(sender_id, 0) + 1
        try:
            async with lock:
                return await self._process(sender_id, text)
        finally:
            # Drop the lock once no message from this sender holds or awaits it.
            self._sender_waiters[sender_id] -= 1
            if not self._sender_waiters[sender_id]:
                del self._sender_waiters[sender_id]
                del self._sender_locks[sender_id]

    async def _process(self, sender_id: str, text: str) -> Reply:
        log_extra = {"sender_id": sender_id}
        response: DialogResponse | None = None

        try:
            logger.debug("Getting user...", extra=log_extra)
            user = await self._users.get_or_create(sender_id)

            logger.debug("Sending request to dialog service...", extra=log_extra)
            response = await self._dialog_client.send(text, user.conversation_context)

            logger.debug("Processing response from dialog service...", extra=log_extra)
            reply = await self._handle_response(user, text, response)

            logger.debug("Updating user with dialog context...", extra=log_extra)
            await self._users.persist_context(user, response.context)
        except Exception as e:
            logger.error(
                "Failed to process message from %s: %s",
                sender_id,
                e,
                exc_info=True,
                extra=log_extra,
            )
            return Reply(
                text=FALLBACK_REPLY,
                service_response=response.to_dict() if response else None,
            )

        logger.info(
            "Replying to user",
            extra={
                **log_extra,
                "conversation_id": response.conversation_id,
                "action": response.action,
            },
        )
        return Reply(text=reply, service_response=response.to_dict())

    async def _handle_response(
        self, user: UserRecord, text: str, response: DialogResponse
    ) -> str:
        conversation_id = await self._get_or_create_conversation_id(user, response)

        action = response.action
        handler = self._actions.resolve(action)
        reply = await handler(response)

        self._log_dialog(conversation_id, action, text, reply)
        return reply

    async def _get_or_create_conversation_id(
        self, user: UserRecord, response: DialogResponse
    ) -> str | None:
        """Open a new conversation when the dialog flags one, else reuse the current id."""
        context = response.context
        if context.get(NEW_CONVERSATION_KEY):
            context[NEW_CONVERSATION_KEY] = False
            conversation = await self._dialog_store.create_conversation(user.id)
            context[CONVERSATION_ID_KEY] = conversation.id
            return conversation.id

        # May be None after a context reset; logging is skipped in that case.
        return context.get(CONVERSATION_ID_KEY)

    def _log_dialog(
        self, conversation_id: str | None, action: str | None, message: str, reply: str
    ) -> None:
        if not conversation_id:
            logger.debug("No active conversation, transcript entry not logged")
            return

        self._log_writer.enqueue(
            TranscriptEntry(
                conversation_id=conversation_id,
                action=action,
                message=message,
                reply=reply,
                timestamp=datetime.now(timezone.utc),
            )
        )
