"""Media router."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from library_cms.core.deps import get_db, require_library_context
from library_cms.db.store import MediaFilters
from library_cms.schemas.auth import UserSession
from library_cms.schemas.media import MediaItemCreate, MediaItemRead, MediaItemUpdate
from library_cms.services import media_service
from library_cms.utils.forms import parse_payload, read_upload, resolve_owner_library

router = APIRouter(prefix="/api/media", tags=["media"])


@router.get("", response_model=list[MediaItemRead])
def list_media(
    library_id: UUID | None = Query(None),
    gallery_id: str | None = Query(None),
    approved: bool | None = Query(None),
    media_type: str | None = Query(None),
    tags: list[str] | None = Query(None),
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    return media_service.list_media_items(
        db,
        MediaFilters(
            library_id=library_id,
            gallery_id=gallery_id,
            approved=approved,
            media_type=media_type,
            tags=tags,
            limit=limit,
            offset=offset,
        ),
    )


@router.get("/tags", response_model=list[str])
def list_media_tags(db: Session = Depends(get_db)):
    return media_service.list_media_tags(db)


@router.get("/{media_id}", response_model=MediaItemRead)
def get_media_item(media_id: UUID, db: Session = Depends(get_db)):
    return media_service.get_media_item(db, media_id)


@router.post("", response_model=MediaItemRead, status_code=201)
async def create_media_item(
    payload: str = Form("{}"),
    file: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    """Create a media item from an uploaded ``file`` or a ``url`` in the payload."""
    data = parse_payload(payload, MediaItemCreate)
    item = media_service.create_media_item(
        db,
        data.model_dump(exclude_none=True, exclude={"library_id"}),
        resolve_owner_library(session, data.library_id),
        file=await read_upload(file),
        actor_id=session.user_id,
    )
    db.commit()
    return item


@router.patch("/{media_id}", response_model=MediaItemRead)
async def update_media_item(
    media_id: UUID,
    payload: str = Form("{}"),
    file: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    data = parse_payload(payload, MediaItemUpdate)
    item = media_service.update_media_item(
        db,
        media_id,
        data.model_dump(exclude_unset=True, exclude_none=True),
        session.library_id,
        session.role,
        file=await read_upload(file),
        actor_id=session.user_id,
    )
    db.commit()
    return item
