"""WebSocket chat route used by the browser client."""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ...app import IApplication
from ...logging_config import get_logger

logger = get_logger(__name__)


def create_websocket_router(app: IApplication) -> APIRouter:
    """Create WebSocket chat router."""
    router = APIRouter(tags=["websocket"])

    @router.websocket("/ws")
    async def chat_socket(websocket: WebSocket) -> None:
        """Relay chat frames until the client disconnects.

        Frames are JSON objects. ``{"type": "ping"}`` is echoed back; any
        other frame must carry ``userId`` and ``text`` and is answered with
        ``{"type": "msg", "text": ..., "watsonData": ...}``.
        """
        await websocket.accept()
        logger.info("WebSocket client connected")

        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    frame = json.loads(raw)
                except ValueError:
                    await websocket.send_json({"type": "error", "text": "Invalid JSON"})
                    continue

                if not isinstance(frame, dict):
                    await websocket.send_json({"type": "error", "text": "Invalid frame"})
                    continue

                if frame.get("type") == "ping":
                    await websocket.send_json({"type": "ping"})
                    continue

                user_id = frame.get("userId")
                text = frame.get("text")
                if not user_id or not isinstance(text, str):
                    await websocket.send_json(
                        {"type": "error", "text": "userId and text are required"}
                    )
                    continue

                reply = await app.orchestrator.process_message(str(user_id), text)
                await websocket.send_json(
                    {
                        "type": "msg",
                        "text": reply.text,
                        "watsonData": reply.service_response,
                    }
                )
        except WebSocketDisconnect:
            logger.info("WebSocket client disconnected")

    return router
