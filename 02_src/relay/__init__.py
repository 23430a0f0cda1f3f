"""Conversation relay core."""

from .app import Application, IApplication
from .config import Settings
from .dialog_service import DialogServiceClient, IDialogServiceClient
from .dialogue import (
    ActionName,
    ActionRegistry,
    ConversationOrchestrator,
    IConversationOrchestrator,
    SerializedLogWriter,
)
from .errors import ConflictError, LookupConflict, RelayError, ServiceError, StoreError
from .models import (
    ConversationRecord,
    DialogResponse,
    Entity,
    Reply,
    TranscriptEntry,
    UserRecord,
)
from .storage import DialogStore, IDialogStore, IUserStore, UserStore
from .venues import IVenueClient, Venue, VenueClient

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "UserRecord",
    "ConversationRecord",
    "TranscriptEntry",
    "DialogResponse",
    "Entity",
    "Reply",
    # Errors
    "RelayError",
    "ServiceError",
    "StoreError",
    "ConflictError",
    "LookupConflict",
    # Components
    "IUserStore",
    "UserStore",
    "IDialogStore",
    "DialogStore",
    "IDialogServiceClient",
    "DialogServiceClient",
    "IVenueClient",
    "VenueClient",
    "Venue",
    "ActionName",
    "ActionRegistry",
    "SerializedLogWriter",
    "IConversationOrchestrator",
    "ConversationOrchestrator",
]
