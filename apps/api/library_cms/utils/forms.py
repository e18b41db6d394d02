"""Helpers for multipart endpoints that carry a JSON payload plus optional files."""

import json
from typing import TypeVar
from uuid import UUID

from fastapi import UploadFile
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from library_cms.core.errors import ValidationError
from library_cms.db.enums import Role
from library_cms.schemas.auth import UserSession
from library_cms.services.asset_upload_service import UploadedAsset

ModelT = TypeVar("ModelT", bound=BaseModel)


def _field_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        key = ".".join(str(part) for part in err["loc"]) or "payload"
        errors.setdefault(key, []).append(err["msg"])
    return errors


def parse_payload(payload: str | None, model: type[ModelT]) -> ModelT:
    """
    Decode the ``payload`` form field into ``model``.
    
    Raises:
        ValidationError: invalid JSON, non-object JSON, or schema violations
    """
    try:
        raw = json.loads(payload or "{}")
    except json.JSONDecodeError as exc:
        raise ValidationError("Invalid payload JSON") from exc
    if not isinstance(raw, dict):
        raise ValidationError("Payload must be a JSON object")
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError("Validation failed", errors=_field_errors(exc)) from exc


async def read_upload(file: UploadFile | None) -> UploadedAsset | None:
    """Read an optional upload into memory. Empty file parts count as absent."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    return UploadedAsset(
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
        data=data,
    )


def resolve_owner_library(session: UserSession, requested: UUID | None) -> UUID | None:
    """Library admins always create for their own library; super admins choose."""
    if session.role == Role.SUPER_ADMIN:
        return requested
    return session.library_id
