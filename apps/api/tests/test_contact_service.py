"""Tests for contact messages and emailed replies."""

import uuid
from unittest.mock import MagicMock

import httpx
import pytest

from library_cms.core.config import settings
from library_cms.core.errors import (
    AuthorizationError, NotFoundError, UpstreamIOError, ValidationError,
)
from library_cms.db import store
from library_cms.db.enums import ResponseStatus
from library_cms.services import contact_service, email_service


def _submit(db, library_id, **overrides):
    data = {
        "name": "Ada Visitor",
        "email": "ada@example.com",
        "subject": "Opening hours",
        "message": "Are you open on Sundays?",
        "library_id": library_id,
        **overrides,
    }
    return contact_service.create_message(db, data)


class FakeSender:
    """Stands in for the Resend call and records what was sent."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return self.result


@pytest.fixture
def sent_ok(monkeypatch):
    sender = FakeSender({"success": True, "message_id": "msg_1", "error": None})
    monkeypatch.setattr(email_service, "send_response_email", sender)
    return sender


# =============================================================================
# Submissions and triage
# =============================================================================

def test_create_message_defaults(db, library):
    message = _submit(db, library.id)

    assert message.is_read is False
    assert message.response_status == ResponseStatus.PENDING.value


def test_create_message_without_library(db):
    message = _submit(db, None)
    assert message.library_id is None


def test_create_message_for_unknown_library(db):
    with pytest.raises(NotFoundError, match="Library not found"):
        _submit(db, uuid.uuid4())


def test_list_messages_scoped_to_library(db, library, other_library):
    mine = _submit(db, library.id)
    _submit(db, other_library.id)

    assert [m.id for m in contact_service.list_messages(db, library.id)] == [mine.id]
    assert len(contact_service.list_messages(db)) == 2


def test_update_message_only_touches_triage_fields(db, library):
    message = _submit(db, library.id)

    updated = contact_service.update_message(
        db, message.id, {"is_read": True, "subject": "changed", "response_status": ResponseStatus.CLOSED}
    )

    assert updated.is_read is True
    assert updated.response_status == "closed"
    assert updated.subject == "Opening hours"


def test_update_unknown_message(db):
    with pytest.raises(NotFoundError, match="Contact message not found"):
        contact_service.update_message(db, uuid.uuid4(), {"is_read": True})


# =============================================================================
# Replies
# =============================================================================

@pytest.mark.asyncio
async def test_reply_sends_email_and_records_response(db, library, sent_ok):
    message = _submit(db, library.id)
    admin_id = uuid.uuid4()

    response = await contact_service.reply_to_message(
        db, message.id, "Re: Opening hours", "Yes, 10 to 4.", admin_id, library.id
    )

    assert response.email_sent is True
    assert response.responded_by == admin_id
    assert sent_ok.calls[0]["to_email"] == "ada@example.com"
    assert sent_ok.calls[0]["library_name"] == library.name

    refreshed = store.get_contact_message(db, message.id)
    assert refreshed.response_status == ResponseStatus.RESPONDED.value
    assert refreshed.is_read is True


@pytest.mark.asyncio
@pytest.mark.parametrize("subject,body", [("", "text"), ("subject", "   "), ("", "")])
async def test_reply_requires_subject_and_message(db, library, sent_ok, subject, body):
    message = _submit(db, library.id)

    with pytest.raises(ValidationError, match="Subject and message are required"):
        await contact_service.reply_to_message(db, message.id, subject, body, uuid.uuid4(), library.id)
    assert sent_ok.calls == []


@pytest.mark.asyncio
async def test_reply_to_other_library_message_is_not_found(db, library, other_library, sent_ok):
    message = _submit(db, other_library.id)

    with pytest.raises(NotFoundError, match="Message not found"):
        await contact_service.reply_to_message(db, message.id, "s", "m", uuid.uuid4(), library.id)
    assert sent_ok.calls == []


@pytest.mark.asyncio
async def test_reply_to_unknown_message(db, library, sent_ok):
    with pytest.raises(NotFoundError, match="Message not found"):
        await contact_service.reply_to_message(db, uuid.uuid4(), "s", "m", uuid.uuid4(), library.id)


@pytest.mark.asyncio
async def test_reply_email_failure_leaves_message_pending(db, library, monkeypatch):
    sender = FakeSender({"success": False, "message_id": None, "error": "Resend API error (500)"})
    monkeypatch.setattr(email_service, "send_response_email", sender)
    message = _submit(db, library.id)

    with pytest.raises(UpstreamIOError, match="Failed to send email response"):
        await contact_service.reply_to_message(db, message.id, "s", "m", uuid.uuid4(), library.id)

    refreshed = store.get_contact_message(db, message.id)
    assert refreshed.response_status == ResponseStatus.PENDING.value
    assert refreshed.responses == []


@pytest.mark.asyncio
async def test_reply_without_library_context(db, sent_ok):
    message = _submit(db, None)

    with pytest.raises(AuthorizationError, match="Library context required"):
        await contact_service.reply_to_message(db, message.id, "s", "m", uuid.uuid4(), None)
    assert sent_ok.calls == []


@pytest.mark.asyncio
async def test_reply_fails_when_status_update_is_lost(db, library, sent_ok, monkeypatch):
    monkeypatch.setattr(store, "update_contact_message", MagicMock(return_value=None))
    message = _submit(db, library.id)

    with pytest.raises(UpstreamIOError, match="Failed to update contact message"):
        await contact_service.reply_to_message(db, message.id, "s", "m", uuid.uuid4(), library.id)


# =============================================================================
# Resend transport
# =============================================================================

def _mock_resend(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(email_service.httpx, "AsyncClient", factory)
    monkeypatch.setattr(settings, "PLATFORM_RESEND_API_KEY", "re_test")
    monkeypatch.setattr(settings, "PLATFORM_EMAIL_FROM", "noreply@library.test")


def _send_kwargs():
    return {
        "to_email": "ada@example.com",
        "visitor_name": "Ada <script>",
        "original_subject": "Hours",
        "subject": "Re: Hours",
        "message": "Line one\nLine two",
        "library_name": "Central Library",
    }


@pytest.mark.asyncio
async def test_send_response_email_success(monkeypatch):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = request.content.decode()
        return httpx.Response(200, json={"id": "email_123"})

    _mock_resend(monkeypatch, handler)

    result = await email_service.send_response_email(**_send_kwargs())

    assert result == {"success": True, "message_id": "email_123", "error": None}
    assert captured["auth"] == "Bearer re_test"
    assert "Ada &lt;script&gt;" in captured["body"]


@pytest.mark.asyncio
async def test_send_response_email_provider_error(monkeypatch):
    _mock_resend(monkeypatch, lambda request: httpx.Response(500, json={"message": "boom"}))

    result = await email_service.send_response_email(**_send_kwargs())

    assert result["success"] is False
    assert result["error"] == "Resend API error (500)"


@pytest.mark.asyncio
async def test_send_response_email_without_sender(monkeypatch):
    monkeypatch.setattr(settings, "PLATFORM_RESEND_API_KEY", "")

    result = await email_service.send_response_email(**_send_kwargs())

    assert result["success"] is False
    assert result["error"] == "Email sender not configured"
