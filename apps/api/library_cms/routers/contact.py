"""Contact router - public submissions, admin inbox and replies."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from library_cms.core.config import settings
from library_cms.core.deps import get_db, require_library_context, require_roles
from library_cms.core.errors import AuthorizationError
from library_cms.core.rate_limit import limiter
from library_cms.db.enums import Role
from library_cms.db.models import ContactMessage
from library_cms.schemas.auth import UserSession
from library_cms.schemas.contact import (
    ContactMessageCreate, ContactMessageRead, ContactMessageUpdate, MessageResponseRead,
    ReplyRequest,
)
from library_cms.services import contact_service

router = APIRouter(prefix="/api/contact", tags=["contact"])


def _check_inbox_owner(session: UserSession, message: ContactMessage) -> None:
    if session.role != Role.SUPER_ADMIN and str(message.library_id) != str(session.library_id):
        raise AuthorizationError("You can only manage messages for your library")


@router.post("", response_model=ContactMessageRead, status_code=201)
@limiter.limit(settings.RATE_LIMIT_CONTACT)
def submit_contact_message(
    request: Request,
    data: ContactMessageCreate,
    db: Session = Depends(get_db),
):
    """Public contact form."""
    message = contact_service.create_message(db, data.model_dump())
    db.commit()
    return message


@router.get("", response_model=list[ContactMessageRead])
def list_contact_messages(
    library_id: UUID | None = Query(None),
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    """Library admins see their own inbox; super admins may filter by library."""
    if session.role != Role.SUPER_ADMIN:
        library_id = session.library_id
    return contact_service.list_messages(db, library_id=library_id, limit=limit, offset=offset)


@router.get("/{message_id}", response_model=ContactMessageRead)
def get_contact_message(
    message_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    message = contact_service.get_message(db, message_id)
    _check_inbox_owner(session, message)
    return message


@router.patch("/{message_id}", response_model=ContactMessageRead)
def update_contact_message(
    message_id: UUID,
    data: ContactMessageUpdate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    _check_inbox_owner(session, contact_service.get_message(db, message_id))
    message = contact_service.update_message(
        db, message_id, data.model_dump(exclude_unset=True, exclude_none=True)
    )
    db.commit()
    return message


@router.post("/{message_id}/reply", response_model=MessageResponseRead, status_code=201)
@limiter.limit(settings.RATE_LIMIT_REPLY)
async def reply_to_message(
    request: Request,
    message_id: UUID,
    data: ReplyRequest,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles([Role.LIBRARY_ADMIN])),
):
    """Email a reply to the sender. Library admins only."""
    response = await contact_service.reply_to_message(
        db,
        message_id,
        data.subject,
        data.message,
        actor_id=session.user_id,
        actor_library_id=session.library_id,
    )
    db.commit()
    return response
