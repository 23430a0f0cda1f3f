"""Tests for DialogServiceClient."""

import json

import httpx
import pytest

from relay.dialog_service import DialogServiceClient, parse_response
from relay.errors import ServiceError


def _client(handler) -> DialogServiceClient:
    return DialogServiceClient(
        url="https://dialog.test/api",
        workspace_id="ws-1",
        version_date="2017-04-21",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestDialogServiceClientInit:
    """Tests for DialogServiceClient initialization."""

    def test_init_without_workspace_raises(self, monkeypatch):
        """Test a missing workspace id is rejected."""
        monkeypatch.delenv("DIALOG_WORKSPACE_ID", raising=False)

        with pytest.raises(ValueError, match="DIALOG_WORKSPACE_ID"):
            DialogServiceClient(url="https://dialog.test/api")

    def test_init_reads_workspace_from_env(self, monkeypatch):
        """Test the workspace id defaults from the environment."""
        monkeypatch.setenv("DIALOG_WORKSPACE_ID", "env-ws")

        client = DialogServiceClient(url="https://dialog.test/api/")
        assert client.message_url == "https://dialog.test/api/v1/workspaces/env-ws/message"


class TestDialogServiceClientSend:
    """Tests for DialogServiceClient.send()."""

    @pytest.mark.asyncio
    async def test_send_posts_text_and_context(self, service_body):
        """Test the request carries input text, context and version."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=service_body(lines=["Hi"], context={"a": 1}))

        client = _client(handler)
        await client.send("hello", {"dialog_stack": ["root"]})

        assert seen["url"] == (
            "https://dialog.test/api/v1/workspaces/ws-1/message?version=2017-04-21"
        )
        assert seen["body"] == {
            "input": {"text": "hello"},
            "context": {"dialog_stack": ["root"]},
        }

    @pytest.mark.asyncio
    async def test_send_without_context_sends_empty_object(self, service_body):
        """Test a first message sends an empty context."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=service_body())

        await _client(handler).send("hello", None)

        assert seen["body"]["context"] == {}

    @pytest.mark.asyncio
    async def test_send_parses_response(self, service_body):
        """Test output lines, context and entities are parsed."""
        body = service_body(
            lines=["Hello", "How can I help?"],
            context={"newConversation": True, "action": "none"},
            entities=[{"entity": "sys-location", "value": "Austin", "location": [0, 6]}],
            intents=[{"intent": "greeting", "confidence": 0.9}],
        )

        response = await _client(lambda r: httpx.Response(200, json=body)).send("hi", None)

        assert response.output_lines == ["Hello", "How can I help?"]
        assert response.context["newConversation"] is True
        assert response.action == "none"
        assert response.entity_values("sys-location") == ["Austin"]
        assert response.intents[0]["intent"] == "greeting"

    @pytest.mark.asyncio
    async def test_http_error_raises_service_error(self):
        """Test a non-2xx status becomes ServiceError."""
        client = _client(lambda r: httpx.Response(500, json={"error": "boom"}))

        with pytest.raises(ServiceError, match="500"):
            await client.send("hi", None)

    @pytest.mark.asyncio
    async def test_transport_error_raises_service_error(self):
        """Test a network failure becomes ServiceError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ServiceError, match="unreachable"):
            await _client(handler).send("hi", None)

    @pytest.mark.asyncio
    async def test_malformed_body_raises_service_error(self):
        """Test a body without context becomes ServiceError."""
        client = _client(lambda r: httpx.Response(200, json={"output": {"text": []}}))

        with pytest.raises(ServiceError, match="Malformed"):
            await client.send("hi", None)


class TestParseResponse:
    """Tests for parse_response()."""

    def test_string_output_becomes_single_line(self):
        """Test a bare string output is treated as one line."""
        response = parse_response({"output": {"text": "Hi"}, "context": {}})
        assert response.output_lines == ["Hi"]

    def test_to_dict_round_trips_shape(self, service_body):
        """Test the diagnostic view keeps the service's field names."""
        body = service_body(
            lines=["Hi"],
            context={"x": 1},
            entities=[{"entity": "sys-location", "value": "Austin"}],
        )

        view = parse_response(body).to_dict()

        assert view["output"]["text"] == ["Hi"]
        assert view["context"] == {"x": 1}
        assert view["entities"] == [{"entity": "sys-location", "value": "Austin"}]
