"""Foursquare venue search client."""

import os
from dataclasses import dataclass
from typing import Protocol

import httpx

from ..errors import ServiceError
from ..logging_config import get_logger

logger = get_logger(__name__)

FOURSQUARE_API_URL = "https://api.foursquare.com/v2"
FOURSQUARE_API_VERSION = "20170421"


@dataclass
class Venue:
    """A venue returned by a search."""

    id: str
    name: str


class IVenueClient(Protocol):
    """Venue lookup near a free-text location."""

    async def search(self, query: str, near: str, radius: int = 5000) -> list[Venue]:
        """Search venues matching ``query`` near ``near``."""
        ...

    async def aclose(self) -> None:
        """Release the underlying HTTP client."""
        ...


class VenueClient:
    """Foursquare v2 venues/search client (userless auth)."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._client_id = client_id or os.getenv("FOURSQUARE_CLIENT_ID")
        self._client_secret = client_secret or os.getenv("FOURSQUARE_CLIENT_SECRET")
        if not self._client_id or not self._client_secret:
            raise ValueError("Foursquare client id and secret must be set")

        self._client = client or httpx.AsyncClient(base_url=FOURSQUARE_API_URL, timeout=10.0)

    async def search(self, query: str, near: str, radius: int = 5000) -> list[Venue]:
        """Search venues matching ``query`` near ``near``."""
        params = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "v": FOURSQUARE_API_VERSION,
            "query": query,
            "near": near,
            "radius": radius,
        }

        try:
            response = await self._client.get("/venues/search", params=params)
            response.raise_for_status()
            venues = [
                Venue(id=v.get("id", ""), name=v["name"])
                for v in response.json()["response"]["venues"]
                if v.get("name")
            ]
        except httpx.HTTPError as e:
            raise ServiceError(f"Venue search failed: {e}", e) from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ServiceError(f"Malformed venue search response: {e}", e) from e

        logger.debug("Found %d venues for %r near %r", len(venues), query, near)
        return venues

    async def aclose(self) -> None:
        """Release the underlying HTTP client."""
        await self._client.aclose()
