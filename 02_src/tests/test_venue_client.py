"""Tests for VenueClient."""

import httpx
import pytest

from relay.errors import ServiceError
from relay.venues import VenueClient
from relay.venues.foursquare import FOURSQUARE_API_URL


def _client(handler) -> VenueClient:
    return VenueClient(
        client_id="id",
        client_secret="secret",
        client=httpx.AsyncClient(
            base_url=FOURSQUARE_API_URL, transport=httpx.MockTransport(handler)
        ),
    )


class TestVenueClient:
    """Tests for VenueClient.search()."""

    def test_init_without_credentials_raises(self, monkeypatch):
        """Test missing credentials are rejected."""
        monkeypatch.delenv("FOURSQUARE_CLIENT_ID", raising=False)
        monkeypatch.delenv("FOURSQUARE_CLIENT_SECRET", raising=False)

        with pytest.raises(ValueError):
            VenueClient()

    @pytest.mark.asyncio
    async def test_search_sends_query(self):
        """Test the search request parameters."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"response": {"venues": []}})

        await _client(handler).search("doctor", near="Austin", radius=5000)

        assert seen["path"] == "/v2/venues/search"
        assert seen["params"]["query"] == "doctor"
        assert seen["params"]["near"] == "Austin"
        assert seen["params"]["radius"] == "5000"
        assert seen["params"]["client_id"] == "id"

    @pytest.mark.asyncio
    async def test_search_returns_venues(self):
        """Test venues are parsed by name."""
        body = {
            "response": {
                "venues": [
                    {"id": "v1", "name": "Dr. Adams"},
                    {"id": "v2", "name": "City Clinic"},
                ]
            }
        }

        venues = await _client(lambda r: httpx.Response(200, json=body)).search(
            "doctor", near="Austin"
        )

        assert [v.name for v in venues] == ["Dr. Adams", "City Clinic"]

    @pytest.mark.asyncio
    async def test_search_error_raises_service_error(self):
        """Test lookup failures become ServiceError."""
        client = _client(lambda r: httpx.Response(400, json={"meta": {"code": 400}}))

        with pytest.raises(ServiceError):
            await client.search("doctor", near="???")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "venues",
        [{"a": 1}, ["Dr. Adams"], None],
    )
    async def test_search_unexpected_venues_shape_raises_service_error(self, venues):
        """Test a venues payload of the wrong shape becomes ServiceError."""
        body = {"response": {"venues": venues}}
        client = _client(lambda r: httpx.Response(200, json=body))

        with pytest.raises(ServiceError, match="Malformed"):
            await client.search("doctor", near="Austin")
