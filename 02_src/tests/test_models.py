"""Tests for data models and logging helpers."""

import json
import logging
from datetime import datetime, timezone

from relay.logging_config import JSONFormatter
from relay.models import (
    ConversationRecord,
    DialogResponse,
    Entity,
    Reply,
    TranscriptEntry,
    UserRecord,
)


class TestUserRecord:
    """Tests for UserRecord."""

    def test_defaults(self):
        """Test a new user has no context and no revision."""
        user = UserRecord(id="u1")
        assert user.conversation_context is None
        assert user.revision is None


class TestConversationModels:
    """Tests for conversation log models."""

    def test_conversation_record(self):
        """Test creating a conversation record."""
        ts = datetime.now(timezone.utc)
        conversation = ConversationRecord(id="c1", user_id="u1", created_at=ts)
        assert conversation.created_at == ts

    def test_transcript_entry_allows_missing_action(self):
        """Test action may be None."""
        entry = TranscriptEntry(
            conversation_id="c1",
            action=None,
            message="hi",
            reply="hello",
            timestamp=datetime.now(timezone.utc),
        )
        assert entry.action is None


class TestDialogResponse:
    """Tests for DialogResponse helpers."""

    def test_well_known_context_fields(self):
        """Test action and conversation id are read from the context."""
        response = DialogResponse(
            output_lines=[],
            context={"action": "findDoctorLocation", "conversationDocId": "c1"},
        )
        assert response.action == "findDoctorLocation"
        assert response.conversation_id == "c1"

    def test_missing_context_fields(self):
        """Test absent fields read as None."""
        response = DialogResponse(output_lines=[], context={})
        assert response.action is None
        assert response.conversation_id is None

    def test_entity_values_filters_by_type(self):
        """Test entity values are filtered and ordered."""
        response = DialogResponse(
            output_lines=[],
            context={},
            entities=[
                Entity(type="sys-location", value="Austin"),
                Entity(type="sys-number", value="3"),
                Entity(type="sys-location", value="Texas"),
            ],
        )
        assert response.entity_values("sys-location") == ["Austin", "Texas"]
        assert response.entity_values("sys-date") == []

    def test_reply_defaults(self):
        """Test a reply may omit the service response."""
        assert Reply(text="x").service_response is None


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            name="relay.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Processed %s",
            args=("hi",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_formats_json_line(self):
        """Test the basic fields are present."""
        data = json.loads(JSONFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "relay.test"
        assert data["message"] == "Processed hi"

    def test_includes_conversation_context(self):
        """Test sender and conversation ids from extra= are included."""
        data = json.loads(
            JSONFormatter().format(self._record(sender_id="u1", conversation_id="c1"))
        )

        assert data["sender_id"] == "u1"
        assert data["conversation_id"] == "c1"
        assert "action" not in data
