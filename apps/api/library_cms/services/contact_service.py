"""Contact messages: public submissions, admin triage, and emailed replies."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.core.errors import (
    AuthorizationError, NotFoundError, UpstreamIOError, ValidationError,
)
from library_cms.core.structured_logging import build_log_context
from library_cms.db import store
from library_cms.db.enums import ResponseStatus
from library_cms.db.models import ContactMessage, MessageResponse
from library_cms.db.store import ContactFilters
from library_cms.services import email_service
from library_cms.utils.datetime_parsing import utc_now

logger = logging.getLogger(__name__)


def list_messages(
    db: Session,
    library_id: UUID | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[ContactMessage]:
    """List messages, newest first, optionally for one library."""
    return store.list_contact_messages(
        db, ContactFilters(library_id=library_id, limit=limit, offset=offset)
    )


def get_message(db: Session, message_id: UUID) -> ContactMessage:
    message = store.get_contact_message(db, message_id)
    if message is None:
        raise NotFoundError("Contact message")
    return message


def create_message(db: Session, data: dict[str, Any]) -> ContactMessage:
    """Record a contact-form submission. No ownership applies."""
    library_id = data.get("library_id")
    if library_id and store.get_library(db, library_id) is None:
        raise NotFoundError("Library")
    
    message = store.create_contact_message(db, data)
    logger.info(
        "contact_message_created",
        extra=build_log_context(library_id=message.library_id, entity_id=message.id),
    )
    return message


def update_message(db: Session, message_id: UUID, patch: dict[str, Any]) -> ContactMessage:
    """
    Update read/response state.
    
    Raises:
        NotFoundError: unknown message (or the write was rejected)
    """
    values = {k: v for k, v in patch.items() if k in {"is_read", "response_status"}}
    if isinstance(values.get("response_status"), ResponseStatus):
        values["response_status"] = values["response_status"].value
    
    updated = store.update_contact_message(db, message_id, values)
    if not updated:
        raise NotFoundError("Contact message")
    
    logger.info(
        "contact_message_updated",
        extra=build_log_context(library_id=updated.library_id, entity_id=message_id),
    )
    return updated


async def reply_to_message(
    db: Session,
    message_id: UUID,
    subject: str,
    message: str,
    actor_id: UUID,
    actor_library_id: UUID | None,
) -> MessageResponse:
    """
    Email a reply to the visitor and record it.
    
    The message must belong to the actor's library; otherwise it is reported
    as not found rather than forbidden.
    
    Raises:
        ValidationError: empty subject or message
        AuthorizationError: actor has no library
        NotFoundError: message (or its library) not found
        UpstreamIOError: the email could not be sent, or the message status did not persist
    """
    if not (subject or "").strip() or not (message or "").strip():
        raise ValidationError("Subject and message are required")
    
    if actor_library_id is None:
        raise AuthorizationError("Library context required")
    
    original = store.get_contact_message(db, message_id)
    if original is None or str(original.library_id) != str(actor_library_id):
        raise NotFoundError("Message")
    
    library = store.get_library(db, actor_library_id)
    if library is None:
        raise NotFoundError("Library")
    
    result = await email_service.send_response_email(
        to_email=original.email,
        visitor_name=original.name,
        original_subject=original.subject,
        subject=subject,
        message=message,
        library_name=library.name,
    )
    if not result.get("success"):
        logger.error(
            "contact_reply_email_failed",
            extra={
                **build_log_context(user_id=actor_id, library_id=actor_library_id, entity_id=message_id),
                "error": result.get("error"),
            },
        )
        raise UpstreamIOError("Failed to send email response")
    
    response = store.create_message_response(
        db,
        {
            "contact_message_id": message_id,
            "responded_by": actor_id,
            "subject": subject,
            "message": message,
            "email_sent": True,
            "email_sent_at": utc_now(),
        },
    )
    updated = store.update_contact_message(
        db,
        message_id,
        {"response_status": ResponseStatus.RESPONDED.value, "is_read": True},
    )
    if not updated:
        raise UpstreamIOError("Failed to update contact message")
    
    logger.info(
        "contact_message_replied",
        extra=build_log_context(user_id=actor_id, library_id=actor_library_id, entity_id=message_id),
    )
    return response
