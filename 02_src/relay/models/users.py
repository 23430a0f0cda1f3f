"""User-related data models."""

from dataclasses import dataclass


@dataclass
class UserRecord:
    """A sender known to the relay, with the last dialog context it saw."""

    id: str  # platform sender id (Slack user id, WebSocket client id)
    conversation_context: dict | None = None
    revision: str | None = None  # "<n>-<hex>", changes on every write
