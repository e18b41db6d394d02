"""Event service: library-scoped CRUD plus hard delete."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.core.errors import NotFoundError
from library_cms.core.library_access import check_write_access
from library_cms.core.policies import get_policy
from library_cms.core.structured_logging import build_log_context
from library_cms.db import store
from library_cms.db.enums import Role
from library_cms.db.models import Event
from library_cms.db.store import EventFilters
from library_cms.services.asset_upload_service import UploadedAsset
from library_cms.services.scoped_resource import ScopedResourceService, StoreOps

logger = logging.getLogger(__name__)

POLICY = get_policy("events")

_events = ScopedResourceService(
    POLICY,
    StoreOps(get=store.get_event, create=store.create_event, update=store.update_event),
)


def create_event(
    db: Session,
    data: dict[str, Any],
    library_id: UUID | None,
    image: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> Event:
    return _events.create(db, data, library_id, {"image_url": image}, actor_id=actor_id)


def update_event(
    db: Session,
    event_id: UUID,
    patch: dict[str, Any],
    actor_library_id: UUID | None,
    actor_role: Role | str | None,
    image: UploadedAsset | None = None,
    actor_id: UUID | None = None,
) -> Event:
    return _events.update(
        db, event_id, patch, actor_library_id, actor_role, {"image_url": image}, actor_id=actor_id
    )


def get_event(db: Session, event_id: UUID) -> Event:
    return _events.get(db, event_id)


def list_events(db: Session, filters: EventFilters | None = None) -> list[Event]:
    return store.list_events(db, filters)


def delete_event(
    db: Session,
    event_id: UUID,
    actor_library_id: UUID | None = None,
    actor_role: Role | str | None = None,
    actor_id: UUID | None = None,
) -> bool:
    """
    Permanently delete an event.
    
    When an actor role is given, the event must exist and belong to the
    actor's library (super admins excepted). Returns True or raises.
    
    Raises:
        NotFoundError: no such event
        AuthorizationError: actor may not delete it
    """
    if actor_role is not None:
        existing = store.get_event(db, event_id)
        if existing is None:
            raise NotFoundError("Event")
        check_write_access(POLICY, actor_role, actor_library_id, existing)
    
    if not store.delete_event(db, event_id):
        raise NotFoundError("Event")
    
    logger.info(
        "events_deleted",
        extra=build_log_context(user_id=actor_id, library_id=actor_library_id, entity_id=event_id),
    )
    return True
