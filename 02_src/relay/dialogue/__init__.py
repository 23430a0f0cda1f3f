"""Dialogue module."""

from .actions import (
    ActionHandler,
    ActionName,
    ActionRegistry,
    FindDoctorLocationHandler,
    create_default_registry,
    handle_generic,
)
from .log_writer import SerializedLogWriter
from .orchestrator import (
    FALLBACK_REPLY,
    ConversationOrchestrator,
    IConversationOrchestrator,
)

__all__ = [
    "ActionHandler",
    "ActionName",
    "ActionRegistry",
    "ConversationOrchestrator",
    "FALLBACK_REPLY",
    "FindDoctorLocationHandler",
    "IConversationOrchestrator",
    "SerializedLogWriter",
    "create_default_registry",
    "handle_generic",
]
