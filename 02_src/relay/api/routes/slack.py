"""Slack Events API route for direct messages to the bot."""

import asyncio
from typing import Any

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from ...app import IApplication
from ...logging_config import get_logger

logger = get_logger(__name__)


def is_direct_message(event: dict[str, Any]) -> bool:
    """True for a user-authored message in a DM channel."""
    if event.get("type") != "message":
        return False
    # Bot echoes and edits/deletes carry bot_id or a subtype.
    if event.get("bot_id") or event.get("subtype") or not event.get("user"):
        return False
    channel = event.get("channel") or ""
    return event.get("channel_type") == "im" or channel.startswith("D")


def create_slack_router(app: IApplication, client: WebClient | None = None) -> APIRouter:
    """Create Slack events router. Without a bot token every event is refused."""
    router = APIRouter(prefix="/slack", tags=["slack"])

    if client is None and app.settings.slack_bot_token:
        client = WebClient(token=app.settings.slack_bot_token)

    async def reply_to(channel: str, user_id: str, text: str) -> None:
        reply = await app.orchestrator.process_message(user_id, text)
        try:
            await asyncio.to_thread(client.chat_postMessage, channel=channel, text=reply.text)
        except SlackApiError as e:
            logger.error(
                "Slack postMessage failed: %s",
                e.response.get("error"),
                extra={"sender_id": user_id},
            )
        except Exception as e:
            logger.error(
                "Slack postMessage failed: %s",
                e,
                exc_info=True,
                extra={"sender_id": user_id},
            )

    @router.post("/events")
    async def slack_events(request: Request, background_tasks: BackgroundTasks) -> dict:
        """Handle a Slack Events API callback."""
        if client is None:
            raise HTTPException(status_code=404, detail="Slack not configured")

        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON")

        if body.get("type") == "url_verification":
            return {"challenge": body.get("challenge")}

        if request.headers.get("X-Slack-Retry-Num"):
            # Already being handled from the first delivery.
            return {"ok": True}

        event = body.get("event") or {}
        if body.get("type") == "event_callback" and is_direct_message(event):
            background_tasks.add_task(
                reply_to, event["channel"], event["user"], event.get("text", "")
            )

        return {"ok": True}

    return router
