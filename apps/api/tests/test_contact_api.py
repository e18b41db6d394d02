"""HTTP tests for the contact form, inbox and replies."""

import uuid

import pytest

from library_cms.services import contact_service, email_service


def _message(db, library_id, subject="Hours"):
    message = contact_service.create_message(
        db,
        {
            "name": "Visitor",
            "email": "visitor@example.com",
            "subject": subject,
            "message": "Hello there",
            "library_id": library_id,
        },
    )
    db.commit()
    return message


@pytest.mark.asyncio
async def test_public_submission(client, library):
    res = await client.post(
        "/api/contact",
        json={
            "library_id": str(library.id),
            "name": "Grace",
            "email": "grace@example.com",
            "subject": "Room booking",
            "message": "Can I book the study room?",
        },
    )

    assert res.status_code == 201
    body = res.json()
    assert body["is_read"] is False
    assert body["response_status"] == "pending"


@pytest.mark.asyncio
async def test_submission_rejects_bad_email(client, library):
    res = await client.post(
        "/api/contact",
        json={"name": "G", "email": "not-an-email", "subject": "s", "message": "m"},
    )

    assert res.status_code == 422


@pytest.mark.asyncio
async def test_inbox_is_scoped_to_session_library(client, db, library, other_library, library_admin):
    mine = _message(db, library.id)
    _message(db, other_library.id)

    res = await client.get(
        "/api/contact", params={"library_id": str(other_library.id)}, headers=library_admin.headers
    )

    assert [m["id"] for m in res.json()] == [str(mine.id)]


@pytest.mark.asyncio
async def test_mark_read(client, db, library, library_admin):
    message = _message(db, library.id)

    res = await client.patch(f"/api/contact/{message.id}", json={"is_read": True}, headers=library_admin.headers)

    assert res.status_code == 200
    assert res.json()["is_read"] is True


@pytest.mark.asyncio
async def test_cannot_triage_other_library_message(client, db, other_library, library_admin):
    message = _message(db, other_library.id)

    res = await client.patch(f"/api/contact/{message.id}", json={"is_read": True}, headers=library_admin.headers)

    assert res.status_code == 403


@pytest.mark.asyncio
async def test_reply(client, db, library, library_admin, monkeypatch):
    sent = []

    async def fake_send(**kwargs):
        sent.append(kwargs)
        return {"success": True, "message_id": "m1", "error": None}

    monkeypatch.setattr(email_service, "send_response_email", fake_send)
    message = _message(db, library.id)

    res = await client.post(
        f"/api/contact/{message.id}/reply",
        json={"subject": "Re: Hours", "message": "Open till 8."},
        headers=library_admin.headers,
    )

    assert res.status_code == 201
    assert res.json()["responded_by"] == str(library_admin.user_id)
    assert sent[0]["subject"] == "Re: Hours"


@pytest.mark.asyncio
async def test_super_admin_cannot_reply(client, db, library, super_admin):
    message = _message(db, library.id)

    res = await client.post(
        f"/api/contact/{message.id}/reply",
        json={"subject": "s", "message": "m"},
        headers=super_admin.headers,
    )

    assert res.status_code == 403
    assert res.json()["detail"] == "Unauthorized"


@pytest.mark.asyncio
async def test_reply_validation_and_not_found(client, library_admin):
    empty = await client.post(
        f"/api/contact/{uuid.uuid4()}/reply", json={"subject": "", "message": "m"}, headers=library_admin.headers
    )
    missing = await client.post(
        f"/api/contact/{uuid.uuid4()}/reply", json={"subject": "s", "message": "m"}, headers=library_admin.headers
    )

    assert empty.status_code == 400
    assert empty.json()["detail"] == "Subject and message are required"
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Message not found"


@pytest.mark.asyncio
async def test_reply_email_failure_is_500(client, db, library, library_admin, monkeypatch):
    async def failing_send(**kwargs):
        return {"success": False, "message_id": None, "error": "Email provider unreachable"}

    monkeypatch.setattr(email_service, "send_response_email", failing_send)
    message = _message(db, library.id)

    res = await client.post(
        f"/api/contact/{message.id}/reply",
        json={"subject": "s", "message": "m"},
        headers=library_admin.headers,
    )

    assert res.status_code == 500
    assert res.json() == {"detail": "Failed to send email response", "code": "UPSTREAM_ERROR"}


@pytest.mark.asyncio
async def test_track_view(client, library):
    res = await client.post(
        "/api/analytics/track", json={"library_id": str(library.id), "page_type": "gallery"}
    )
    missing = await client.post(
        "/api/analytics/track", json={"library_id": str(uuid.uuid4()), "page_type": "gallery"}
    )

    assert res.status_code == 204
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_get_message_scoped_to_inbox(client, db, library, other_library, library_admin):
    mine = _message(db, library.id)
    theirs = _message(db, other_library.id)

    own = await client.get(f"/api/contact/{mine.id}", headers=library_admin.headers)
    other = await client.get(f"/api/contact/{theirs.id}", headers=library_admin.headers)

    assert own.json()["subject"] == "Hours"
    assert other.status_code == 403
