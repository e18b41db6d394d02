"""Media service: library-scoped CRUD and tag listing."""

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.core.policies import get_policy
from library_cms.db import store
from library_cms.db.enums import Role
from library_cms.db.models import MediaItem
from library_cms.db.store import MediaFilters
from library_cms.services.asset_upload_service import UploadedAsset
from library_cms.services.scoped_resource import ScopedResourceService, StoreOps

POLICY = get_policy("media")

_media = ScopedResourceService(
    POLICY,
    StoreOps(
        get=store.get_media_item,
        create=store.create_media_item,
        update=store.update_media_item,
    ),
)


def create_media_item(
    db: Session,
    data: dict[str, Any],
    library_id: UUID | None,
    file: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> MediaItem:
    """Create a media item from an uploaded file or an existing URL."""
    return _media.create(db, data, library_id, {"url": file}, actor_id=actor_id)


def update_media_item(
    db: Session,
    media_id: UUID,
    patch: dict[str, Any],
    actor_library_id: UUID | None,
    actor_role: Role | str | None,
    file: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> MediaItem:
    return _media.update(
        db, media_id, patch, actor_library_id, actor_role, {"url": file}, actor_id=actor_id
    )


def get_media_item(db: Session, media_id: UUID) -> MediaItem:
    return _media.get(db, media_id)


def list_media_items(db: Session, filters: MediaFilters | None = None) -> list[MediaItem]:
    return store.list_media_items(db, filters)


def list_media_tags(db: Session) -> list[str]:
    """Sorted tag union over every media item, approved or not."""
    items = store.list_media_items(db)
    return sorted({tag for item in items for tag in (item.tags or [])})
