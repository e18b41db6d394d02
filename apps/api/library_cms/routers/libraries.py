"""Libraries router."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from library_cms.core.deps import (
    get_db, get_optional_session, require_library_context, require_roles,
)
from library_cms.db.enums import Role
from library_cms.db.store import LibraryFilters
from library_cms.schemas.auth import UserSession
from library_cms.schemas.library import LibraryCreate, LibraryRead, LibraryUpdate
from library_cms.services import library_service
from library_cms.utils.forms import parse_payload, read_upload

router = APIRouter(prefix="/api/libraries", tags=["libraries"])


@router.get("", response_model=list[LibraryRead])
def list_libraries(
    approved: bool | None = Query(None),
    featured: bool | None = Query(None),
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    session: UserSession | None = Depends(get_optional_session),
):
    """
    Public directory. Anonymous visitors and library admins only see approved
    libraries; super admins may list unapproved ones.
    """
    if session is None or session.role != Role.SUPER_ADMIN:
        approved = True
    return library_service.list_libraries(
        db, LibraryFilters(approved=approved, featured=featured, limit=limit, offset=offset)
    )


@router.get("/{library_id}", response_model=LibraryRead)
def get_library(library_id: UUID, db: Session = Depends(get_db)):
    return library_service.get_library(db, library_id)


@router.post("", response_model=LibraryRead, status_code=201)
async def create_library(
    payload: str = Form("{}"),
    logo: UploadFile | None = File(default=None),
    featured_image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles([Role.SUPER_ADMIN])),
):
    data = parse_payload(payload, LibraryCreate)
    library = library_service.create_library(
        db,
        data.model_dump(exclude_none=True),
        logo=await read_upload(logo),
        featured_image=await read_upload(featured_image),
        actor_id=session.user_id,
    )
    db.commit()
    return library


@router.patch("/{library_id}", response_model=LibraryRead)
async def update_library(
    library_id: UUID,
    payload: str = Form("{}"),
    logo: UploadFile | None = File(default=None),
    featured_image: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_library_context),
):
    data = parse_payload(payload, LibraryUpdate)
    library = library_service.update_library(
        db,
        library_id,
        data.model_dump(exclude_unset=True, exclude_none=True),
        session.library_id,
        session.role,
        logo=await read_upload(logo),
        featured_image=await read_upload(featured_image),
        actor_id=session.user_id,
    )
    db.commit()
    return library
