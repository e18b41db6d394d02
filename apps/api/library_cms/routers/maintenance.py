"""Maintenance router - health, maintenance mode, windows and backups."""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from library_cms.core.deps import get_db, require_roles
from library_cms.db.enums import Role
from library_cms.schemas.auth import UserSession
from library_cms.services import maintenance_service

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])

require_super_admin = require_roles([Role.SUPER_ADMIN])


class ToggleRequest(BaseModel):
    enabled: bool
    message: str | None = None


class ScheduleRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    scheduled_start: datetime | None = None
    scheduled_end: datetime | None = None
    affected_services: list[str] | None = None


class BackupRequest(BaseModel):
    type: str


class BackupRead(BaseModel):
    id: str
    type: str
    size: str
    created_at: datetime
    status: str

    model_config = {"from_attributes": True}


class WindowRead(BaseModel):
    id: str
    title: str
    description: str | None
    scheduled_start: datetime
    scheduled_end: datetime | None
    affected_services: list[str]
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


@router.get("/health")
def maintenance_health(db: Session = Depends(get_db)) -> dict[str, Any]:
    return maintenance_service.health(db)


@router.get("/status")
def maintenance_status(
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_super_admin),
) -> dict[str, Any]:
    return maintenance_service.status(db)


@router.post("/toggle")
def toggle_maintenance(
    data: ToggleRequest,
    _: UserSession = Depends(require_super_admin),
):
    enabled = maintenance_service.toggle(data.enabled, data.message)
    return {"maintenanceMode": enabled}


@router.post("/schedule", response_model=WindowRead, status_code=201)
def schedule_maintenance(
    data: ScheduleRequest,
    _: UserSession = Depends(require_super_admin),
):
    return maintenance_service.schedule(
        data.title,
        data.scheduled_start,
        scheduled_end=data.scheduled_end,
        description=data.description,
        affected_services=data.affected_services,
    )


@router.post("/backup", response_model=BackupRead, status_code=201)
def create_backup(
    data: BackupRequest,
    _: UserSession = Depends(require_super_admin),
):
    return maintenance_service.create_backup(data.type)


@router.get("/backups", response_model=list[BackupRead])
def list_backups(_: UserSession = Depends(require_super_admin)):
    return maintenance_service.list_backups()


@router.post("/refresh")
def refresh_status(
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_super_admin),
) -> dict[str, Any]:
    return maintenance_service.refresh_status(db)
