"""Library (tenant) service."""

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.core.policies import get_policy
from library_cms.db import store
from library_cms.db.enums import Role
from library_cms.db.models import Library
from library_cms.db.store import LibraryFilters
from library_cms.services.asset_upload_service import UploadedAsset
from library_cms.services.scoped_resource import ScopedResourceService, StoreOps

POLICY = get_policy("libraries")

_libraries = ScopedResourceService(
    POLICY,
    StoreOps(get=store.get_library, create=store.create_library, update=store.update_library),
)


def create_library(
    db: Session,
    data: dict[str, Any],
    logo: UploadedAsset | None = None,
    featured_image: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> Library:
    """Register a library. New libraries wait for super admin approval."""
    return _libraries.create(
        db,
        data,
        assets={"logo_url": logo, "featured_image_url": featured_image},
        actor_id=actor_id,
    )


def update_library(
    db: Session,
    library_id: UUID,
    patch: dict[str, Any],
    actor_library_id: UUID | None,
    actor_role: Role | str | None,
    logo: UploadedAsset | None = None,
    featured_image: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> Library:
    return _libraries.update(
        db,
        library_id,
        patch,
        actor_library_id,
        actor_role,
        {"logo_url": logo, "featured_image_url": featured_image},
        actor_id=actor_id,
    )


def get_library(db: Session, library_id: UUID) -> Library:
    return _libraries.get(db, library_id)


def list_libraries(db: Session, filters: LibraryFilters | None = None) -> list[Library]:
    return store.list_libraries(db, filters)
