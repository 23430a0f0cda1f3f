"""Dialog service exchange models."""

from dataclasses import dataclass, field
from typing import Any

# Context keys owned by the orchestrator. Everything else in the context
# belongs to the dialog service and is passed through untouched.
NEW_CONVERSATION_KEY = "newConversation"
CONVERSATION_ID_KEY = "conversationDocId"
ACTION_KEY = "action"


@dataclass
class Entity:
    """An entity extracted from the user's message."""

    type: str  # e.g. "sys-location"
    value: str


@dataclass
class DialogResponse:
    """Parsed response from the dialog service."""

    output_lines: list[str]
    context: dict[str, Any]
    entities: list[Entity] = field(default_factory=list)
    intents: list[dict] = field(default_factory=list)

    @property
    def action(self) -> str | None:
        """Action label attached to the context, if any."""
        return self.context.get(ACTION_KEY)

    @property
    def conversation_id(self) -> str | None:
        """Conversation id carried in the context, if any."""
        return self.context.get(CONVERSATION_ID_KEY)

    def entity_values(self, entity_type: str) -> list[str]:
        """Values of every entity of the given type, in order."""
        return [e.value for e in self.entities if e.type == entity_type]

    def to_dict(self) -> dict[str, Any]:
        """Diagnostic view sent back to transports."""
        return {
            "output": {"text": list(self.output_lines)},
            "context": self.context,
            "entities": [{"entity": e.type, "value": e.value} for e in self.entities],
            "intents": self.intents,
        }


@dataclass
class Reply:
    """Result of processing one message."""

    text: str
    service_response: dict[str, Any] | None = None
