"""Reply handlers selected by the action the dialog service attaches to its context."""

from enum import Enum
from typing import Awaitable, Callable

from ..errors import ServiceError
from ..logging_config import get_logger
from ..models import DialogResponse
from ..venues import IVenueClient

logger = get_logger(__name__)


ActionHandler = Callable[[DialogResponse], Awaitable[str]]

NO_DOCTORS_REPLY = "Sorry, I couldn't find any doctors near you."
LOCATION_ENTITY = "sys-location"


class ActionName(str, Enum):
    """Actions with a custom reply handler."""

    FIND_DOCTOR_LOCATION = "findDoctorLocation"


async def handle_generic(response: DialogResponse) -> str:
    """Reply with the dialog's own output, one newline-terminated line each."""
    return "".join(f"{line}\n" for line in response.output_lines)


class FindDoctorLocationHandler:
    """Looks up doctors near the location the user mentioned."""

    def __init__(self, venue_client: IVenueClient | None, radius: int = 5000):
        self._venue_client = venue_client
        self._radius = radius

    async def __call__(self, response: DialogResponse) -> str:
        location = " ".join(response.entity_values(LOCATION_ENTITY))
        if not location or self._venue_client is None:
            logger.info("Cannot search doctors: location=%r", location)
            return NO_DOCTORS_REPLY

        try:
            venues = await self._venue_client.search("doctor", near=location, radius=self._radius)
        except ServiceError as e:
            logger.error("Doctor lookup near %r failed: %s", location, e)
            return NO_DOCTORS_REPLY

        if not venues:
            return NO_DOCTORS_REPLY

        return "".join(f"{venue.name}\n" for venue in venues)


class ActionRegistry:
    """Maps action names to handlers, falling back to a default handler."""

    def __init__(self, default: ActionHandler = handle_generic):
        self._default = default
        self._handlers: dict[str, ActionHandler] = {}

    def register(self, name: ActionName | str, handler: ActionHandler) -> None:
        """Register a handler for an action name."""
        key = name.value if isinstance(name, ActionName) else name
        self._handlers[key] = handler

    def resolve(self, name: str | None) -> ActionHandler:
        """Handler for ``name``; the default for unknown or missing names."""
        if name is None:
            return self._default
        return self._handlers.get(name, self._default)

    @property
    def names(self) -> list[str]:
        return list(self._handlers)


def create_default_registry(venue_client: IVenueClient | None = None) -> ActionRegistry:
    """Registry with every built-in action registered."""
    registry = ActionRegistry()
    registry.register(
        ActionName.FIND_DOCTOR_LOCATION, FindDoctorLocationHandler(venue_client)
    )
    return registry
