"""Events router."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from library_cms.core.deps import get_db, require_library_context
from library_cms.db.store import EventFilters
from library_cms.schemas.auth import UserSession
from library_cms.schemas.event import EventCreate, EventRead, EventUpdate
from library_cms.services import event_service
from library_cms.utils.forms import parse_payload, read_upload, resolve_owner_library

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventRead])
def list_events(
    library_id: UUID | None = Query(None),
    published: bool | None = Query(None),
    approved: bool | None = Query(None),
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return event_service.list_events(
        db,
        EventFilters(
            library_id=library_id,
            published=published,
            approved=approved,
            limit=limit,
            offset=offset,
        ),
    )


@router.get("/{event_id}", response_model=EventRead)
def get_event(event_id: UUID, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@router.post("", response_model=EventRead, status_code=201)
async def create_event(
    payload: str = Form("{}"),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    data = parse_payload(payload, EventCreate)
    event = event_service.create_event(
        db,
        data.model_dump(exclude_none=True, exclude={"library_id"}),
        resolve_owner_library(session, data.library_id),
        image=await read_upload(image),
        actor_id=session.user_id,
    )
    db.commit()
    return event


@router.patch("/{event_id}", response_model=EventRead)
async def update_event(
    event_id: UUID,
    payload: str = Form("{}"),
    image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    data = parse_payload(payload, EventUpdate)
    event = event_service.update_event(
        db,
        event_id,
        data.model_dump(exclude_unset=True, exclude_none=True),
        session.library_id,
        session.role,
        image=await read_upload(image),
        actor_id=session.user_id,
    )
    db.commit()
    return event


@router.delete("/{event_id}")
def delete_event(
    event_id: UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    event_service.delete_event(
        db,
        event_id,
        actor_library_id=session.library_id,
        actor_role=session.role,
        actor_id=session.user_id,
    )
    db.commit()
    return {"deleted": True}
