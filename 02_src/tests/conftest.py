"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


def make_service_body(
    lines=None,
    context=None,
    entities=None,
    intents=None,
) -> dict:
    """Build a raw dialog-service message body."""
    return {
        "output": {"text": list(lines or [])},
        "context": dict(context or {}),
        "entities": list(entities or []),
        "intents": list(intents or []),
    }


@pytest.fixture
def service_body():
    """Factory for raw dialog-service message bodies."""
    return make_service_body


@pytest.fixture
def make_response():
    """Factory for parsed DialogResponse objects."""
    from relay.dialog_service import parse_response

    def _make(lines=None, context=None, entities=None):
        return parse_response(
            make_service_body(lines=lines, context=context, entities=entities)
        )

    return _make


@pytest_asyncio.fixture
async def user_store():
    """Create in-memory user store for testing."""
    from relay.storage import UserStore

    st = UserStore(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest_asyncio.fixture
async def dialog_store():
    """Create in-memory dialog store for testing."""
    from relay.storage import DialogStore

    st = DialogStore(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest_asyncio.fixture
async def log_writer(dialog_store):
    """Create log writer draining into the dialog store."""
    from relay.dialogue import SerializedLogWriter

    writer = SerializedLogWriter(dialog_store)
    yield writer
    await writer.flush()


@pytest.fixture
def mock_dialog_client():
    """Create mock dialog service client.

    Replies with a new conversation and two output lines by default.
    """
    from relay.dialog_service import parse_response

    client = Mock()
    client.send = AsyncMock(
        side_effect=lambda text, context: parse_response(
            make_service_body(
                lines=["Hello", "How can I help?"],
                context={"newConversation": True, "action": "none"},
            )
        )
    )
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def mock_venue_client():
    """Create mock venue client returning no venues."""
    client = Mock()
    client.search = AsyncMock(return_value=[])
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def orchestrator(user_store, dialog_store, mock_dialog_client, log_writer, mock_venue_client):
    """Create ConversationOrchestrator for testing."""
    from relay.dialogue import ConversationOrchestrator, create_default_registry

    return ConversationOrchestrator(
        user_store=user_store,
        dialog_store=dialog_store,
        dialog_client=mock_dialog_client,
        log_writer=log_writer,
        actions=create_default_registry(mock_venue_client),
    )
