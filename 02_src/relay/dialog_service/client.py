"""Dialog service client for a Watson-Assistant-style message API."""

import os
from typing import Any, Protocol

import httpx

from ..config import DEFAULT_DIALOG_VERSION_DATE
from ..errors import ServiceError
from ..logging_config import get_logger
from ..models import DialogResponse, Entity

logger = get_logger(__name__)

DEFAULT_SERVICE_URL = "https://gateway.watsonplatform.net/conversation/api"


class IDialogServiceClient(Protocol):
    """Request/response access to the remote dialog service."""

    async def send(self, text: str, context: dict | None) -> DialogResponse:
        """Send the user's text with the last context, return the parsed response."""
        ...

    async def aclose(self) -> None:
        """Release the underlying HTTP client."""
        ...


def parse_response(body: dict[str, Any]) -> DialogResponse:
    """Turn a raw message-API body into a DialogResponse."""
    output = body.get("output") or {}
    lines = output.get("text") or []
    if isinstance(lines, str):
        lines = [lines]

    context = body.get("context")
    if not isinstance(context, dict):
        raise ValueError("response has no context object")

    entities = [
        Entity(type=e["entity"], value=str(e.get("value", "")))
        for e in body.get("entities") or []
        if "entity" in e
    ]

    return DialogResponse(
        output_lines=[str(line) for line in lines],
        context=context,
        entities=entities,
        intents=list(body.get("intents") or []),
    )


class DialogServiceClient:
    """httpx-based dialog service client."""

    def __init__(
        self,
        url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        workspace_id: str | None = None,
        version_date: str = DEFAULT_DIALOG_VERSION_DATE,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._url = (url or os.getenv("DIALOG_SERVICE_URL") or DEFAULT_SERVICE_URL).rstrip("/")
        self._workspace_id = workspace_id or os.getenv("DIALOG_WORKSPACE_ID")
        if not self._workspace_id:
            raise ValueError("DIALOG_WORKSPACE_ID environment variable not set")

        self._version_date = version_date
        username = username or os.getenv("DIALOG_SERVICE_USERNAME")
        password = password or os.getenv("DIALOG_SERVICE_PASSWORD")
        auth = httpx.BasicAuth(username, password) if username and password else None

        self._client = client or httpx.AsyncClient(timeout=timeout, auth=auth)

    @property
    def message_url(self) -> str:
        return f"{self._url}/v1/workspaces/{self._workspace_id}/message"

    async def send(self, text: str, context: dict | None) -> DialogResponse:
        """Send the user's text with the last context, return the parsed response."""
        payload = {
            "input": {"text": text},
            "context": context or {},
        }

        try:
            response = await self._client.post(
                self.message_url,
                params={"version": self._version_date},
                json=payload,
            )
            response.raise_for_status()
            parsed = parse_response(response.json())
        except httpx.HTTPStatusError as e:
            raise ServiceError(
                f"Dialog service returned {e.response.status_code}", e
            ) from e
        except httpx.HTTPError as e:
            raise ServiceError(f"Dialog service unreachable: {e}", e) from e
        except (ValueError, KeyError, TypeError) as e:
            raise ServiceError(f"Malformed dialog service response: {e}", e) from e

        logger.debug(
            "Dialog service replied with %d lines",
            len(parsed.output_lines),
            extra={"action": parsed.action},
        )
        return parsed

    async def aclose(self) -> None:
        """Release the underlying HTTP client."""
        await self._client.aclose()
