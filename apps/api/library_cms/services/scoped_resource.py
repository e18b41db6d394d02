"""Library-scoped CRUD shared by stories, events, media and libraries.

Create:  owner check -> asset uploads -> required assets -> workflow defaults -> persist
Update:  fetch -> ownership -> asset uploads -> workflow pinning -> required assets -> persist

Nothing is retried. An asset uploaded before a failed persist is left in storage.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping
from uuid import UUID

from sqlalchemy.orm import Session

from library_cms.core import approval
from library_cms.core.errors import NotFoundError, UpstreamIOError, ValidationError
from library_cms.core.library_access import check_write_access
from library_cms.core.policies import ResourcePolicy
from library_cms.core.structured_logging import build_log_context
from library_cms.db.enums import Role
from library_cms.services import asset_upload_service
from library_cms.services.asset_upload_service import UploadedAsset

logger = logging.getLogger(__name__)

AssetMap = Mapping[str, UploadedAsset | None]


@dataclass(frozen=True)
class StoreOps:
    """Persistence primitives for one entity type."""
    get: Callable[[Session, UUID], Any]
    create: Callable[[Session, dict[str, Any]], Any]
    update: Callable[[Session, UUID, dict[str, Any]], Any]


class ScopedResourceService:
    """Create/update/get for one library-owned resource type."""

    def __init__(self, policy: ResourcePolicy, ops: StoreOps):
        self.policy = policy
        self.ops = ops

    @property
    def _owned_by_library(self) -> bool:
        return self.policy.owner_attr == "library_id"

    def _upload_assets(self, values: dict[str, Any], assets: AssetMap | None) -> None:
        if not assets:
            return
        for slot in self.policy.assets:
            asset = assets.get(slot.field)
            if asset is None:
                continue
            asset_upload_service.validate_asset(asset)
            try:
                values[slot.field] = asset_upload_service.upload_image(asset, slot.folder)
            except Exception as exc:
                logger.exception(
                    "asset_upload_failed",
                    extra={"resource": self.policy.key, "folder": slot.folder},
                )
                raise UpstreamIOError(f"Failed to upload {slot.label}") from exc

    def _check_required_assets(self, values: dict[str, Any], existing: Any = None) -> None:
        """Required slots must resolve to a value, from the patch or else the stored record."""
        for slot in self.policy.assets:
            if not slot.required:
                continue
            value = values[slot.field] if slot.field in values else getattr(existing, slot.field, None)
            if not value:
                raise ValidationError(slot.required_message or f"{slot.label} is required")

    def create(
        self,
        db: Session,
        data: dict[str, Any],
        owner_library_id: UUID | None = None,
        assets: AssetMap | None = None,
        actor_id: UUID | None = None,
    ) -> Any:
        """
        Create a record owned by ``owner_library_id``.
        
        Raises:
            ValidationError: missing owner library or required asset
            UpstreamIOError: asset upload failed
        """
        if self._owned_by_library and not owner_library_id:
            raise ValidationError("Library ID required")
        
        values = dict(data)
        self._upload_assets(values, assets)
        self._check_required_assets(values)
        
        values = approval.initial_state(self.policy, values)
        if self._owned_by_library:
            values["library_id"] = owner_library_id
        else:
            values.pop("id", None)
        
        record = self.ops.create(db, values)
        logger.info(
            f"{self.policy.key}_created",
            extra=build_log_context(
                user_id=actor_id,
                library_id=getattr(record, self.policy.owner_attr, None),
                entity_id=record.id,
            ),
        )
        return record

    def update(
        self,
        db: Session,
        entity_id: UUID,
        patch: dict[str, Any],
        actor_library_id: UUID | None,
        actor_role: Role | str | None,
        assets: AssetMap | None = None,
        actor_id: UUID | None = None,
    ) -> Any:
        """
        Apply ``patch`` to an existing record on behalf of an actor.
        
        Raises:
            NotFoundError: no such record (checked before authorization)
            AuthorizationError: actor may not modify this record
            UpstreamIOError: upload failed, or the write did not persist
        """
        existing = self.ops.get(db, entity_id)
        if existing is None:
            raise NotFoundError(self.policy.label)
        
        check_write_access(self.policy, actor_role, actor_library_id, existing)
        
        values = dict(patch)
        self._upload_assets(values, assets)
        values = approval.apply_update(self.policy, existing, values, actor_role)
        self._check_required_assets(values, existing)
        
        updated = self.ops.update(db, entity_id, values)
        if not updated:
            raise UpstreamIOError(f"Failed to update {self.policy.label.lower()}")
        
        logger.info(
            f"{self.policy.key}_updated",
            extra=build_log_context(
                user_id=actor_id,
                library_id=getattr(updated, self.policy.owner_attr, None),
                entity_id=entity_id,
            ),
        )
        return updated

    def get(self, db: Session, entity_id: UUID) -> Any:
        """Fetch a record or raise NotFoundError."""
        record = self.ops.get(db, entity_id)
        if record is None:
            raise NotFoundError(self.policy.label)
        return record
