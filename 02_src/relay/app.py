"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import Settings
from .dialog_service import DialogServiceClient, IDialogServiceClient
from .dialogue import (
    ConversationOrchestrator,
    IConversationOrchestrator,
    SerializedLogWriter,
    create_default_registry,
)
from .logging_config import get_logger
from .storage import DialogStore, IDialogStore, IUserStore, UserStore
from .venues import IVenueClient, VenueClient

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def settings(self) -> Settings:
        ...

    @property
    def orchestrator(self) -> IConversationOrchestrator:
        ...

    @property
    def dialog_store(self) -> IDialogStore:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        dialog_client: IDialogServiceClient | None = None,
        venue_client: IVenueClient | None = None,
    ):
        self.settings = settings or Settings.from_env()

        # Injected clients are owned by the caller and not closed on stop().
        self._injected_dialog_client = dialog_client
        self._injected_venue_client = venue_client

        # Components (will be initialized in start())
        self._user_store: IUserStore | None = None
        self._dialog_store: IDialogStore | None = None
        self._dialog_client: IDialogServiceClient | None = None
        self._venue_client: IVenueClient | None = None
        self._log_writer: SerializedLogWriter | None = None
        self._orchestrator: ConversationOrchestrator | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")
        settings = self.settings

        # 1. Stores (no dependencies)
        self._user_store = UserStore(settings.user_db_path)
        await self._user_store.init()
        self._dialog_store = DialogStore(settings.dialog_db_path)
        await self._dialog_store.init()
        logger.info("Stores initialized")

        # 2. Remote clients (no internal dependencies)
        self._dialog_client = self._injected_dialog_client or DialogServiceClient(
            url=settings.dialog_service_url,
            username=settings.dialog_service_username,
            password=settings.dialog_service_password,
            workspace_id=settings.dialog_workspace_id,
            version_date=settings.dialog_version_date,
            timeout=settings.dialog_service_timeout,
        )
        self._venue_client = self._injected_venue_client
        if self._venue_client is None and (
            settings.foursquare_client_id and settings.foursquare_client_secret
        ):
            self._venue_client = VenueClient(
                settings.foursquare_client_id, settings.foursquare_client_secret
            )
        if self._venue_client is None:
            logger.info("No venue client configured, location lookups will apologise")
        logger.info("Service clients initialized")

        # 3. Log writer (depends on the dialog store)
        self._log_writer = SerializedLogWriter(self._dialog_store)

        # 4. Orchestrator (depends on everything above)
        self._orchestrator = ConversationOrchestrator(
            user_store=self._user_store,
            dialog_store=self._dialog_store,
            dialog_client=self._dialog_client,
            log_writer=self._log_writer,
            actions=create_default_registry(self._venue_client),
            serialize_per_sender=settings.serialize_per_sender,
        )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._log_writer:
            await self._log_writer.flush()
            logger.info("Transcript queue flushed")
        if self._venue_client and self._injected_venue_client is None:
            await self._venue_client.aclose()
        if self._dialog_client and self._injected_dialog_client is None:
            await self._dialog_client.aclose()
        if self._dialog_store:
            await self._dialog_store.close()
        if self._user_store:
            await self._user_store.close()
        logger.info("Stores closed")

    @property
    def orchestrator(self) -> IConversationOrchestrator:
        """Get orchestrator instance."""
        if not self._orchestrator:
            raise RuntimeError("Application not started")
        return self._orchestrator

    @property
    def user_store(self) -> IUserStore:
        """Get user store instance."""
        if not self._user_store:
            raise RuntimeError("Application not started")
        return self._user_store

    @property
    def dialog_store(self) -> IDialogStore:
        """Get dialog store instance."""
        if not self._dialog_store:
            raise RuntimeError("Application not started")
        return self._dialog_store

    @property
    def log_writer(self) -> SerializedLogWriter:
        """Get transcript log writer."""
        if not self._log_writer:
            raise RuntimeError("Application not started")
        return self._log_writer
