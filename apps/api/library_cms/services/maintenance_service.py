"""Maintenance mode, scheduled windows, backups and system health.

State is process-local; each API worker keeps its own copy.
"""

import logging
import os
import random
import threading
import time
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from library_cms.core.config import settings
from library_cms.core.errors import ValidationError
from library_cms.db.enums import BackupStatus, BackupType
from library_cms.services import email_service
from library_cms.utils.datetime_parsing import ensure_utc, utc_now

logger = logging.getLogger(__name__)

BACKUP_COMPLETION_DELAY = timedelta(seconds=3)
BACKUP_SIZE_RANGES_MB = {
    BackupType.DATABASE: (800, 1299),
    BackupType.FILES: (1200, 1999),
    BackupType.FULL: (2000, 2999),
}


@dataclass
class MaintenanceWindow:
    id: str
    title: str
    scheduled_start: datetime
    scheduled_end: datetime | None = None
    description: str | None = None
    affected_services: list[str] = field(default_factory=list)
    status: str = "scheduled"
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class BackupRecord:
    id: str
    type: str
    size: str
    created_at: datetime
    status: str = BackupStatus.RUNNING.value


@dataclass
class MaintenanceState:
    enabled: bool = False
    message: str | None = None
    windows: list[MaintenanceWindow] = field(default_factory=list)
    backups: list[BackupRecord] = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


_state = MaintenanceState()


def reset_state() -> None:
    """Drop all in-memory maintenance state (used on startup and in tests)."""
    global _state
    _state = MaintenanceState()


# =============================================================================
# Health
# =============================================================================

def _format_uptime(seconds: float) -> str:
    days, rem = divmod(int(seconds), 86400)
    hours = rem // 3600
    return f"{days} days, {hours} hours"


def check_database(db: Session) -> tuple[bool, int]:
    """Ping the database. Returns (healthy, response time in ms)."""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("database_health_check_failed")
        return False, int((time.perf_counter() - started) * 1000)
    return True, int((time.perf_counter() - started) * 1000)


def _storage_status() -> str:
    if settings.STORAGE_BACKEND == "s3":
        return "healthy" if settings.S3_BUCKET else "warning"
    path = settings.LOCAL_STORAGE_PATH
    if os.path.isdir(path) and os.access(path, os.W_OK):
        return "healthy"
    return "warning"


def health(db: Session) -> dict[str, Any]:
    """Liveness summary used by /health and the maintenance status page."""
    db_ok, _ = check_database(db)
    return {
        "status": "ok" if db_ok else "degraded",
        "database": "healthy" if db_ok else "unhealthy",
        "env": settings.ENV,
        "version": settings.VERSION,
        "uptime": _format_uptime(time.monotonic() - _state.started_at),
    }


def system_health(db: Session, now: datetime | None = None) -> list[dict[str, Any]]:
    now = now or utc_now()
    uptime = _format_uptime(time.monotonic() - _state.started_at)
    db_ok, db_ms = check_database(db)
    return [
        {"service": "Web Server", "status": "healthy", "uptime": uptime, "responseTime": 0, "lastCheck": now},
        {
            "service": "Database",
            "status": "healthy" if db_ok else "unhealthy",
            "uptime": uptime,
            "responseTime": db_ms,
            "lastCheck": now,
        },
        {"service": "File Storage", "status": _storage_status(), "uptime": uptime, "responseTime": 0, "lastCheck": now},
        {
            "service": "Email Service",
            "status": "healthy" if email_service.sender_configured() else "warning",
            "uptime": uptime,
            "responseTime": 0,
            "lastCheck": now,
        },
    ]


# =============================================================================
# Backups
# =============================================================================

def _settle_backups(now: datetime) -> None:
    """Mark running backups completed once the simulated run time has passed."""
    for backup in _state.backups:
        if (
            backup.status == BackupStatus.RUNNING.value
            and now - ensure_utc(backup.created_at) >= BACKUP_COMPLETION_DELAY
        ):
            backup.status = BackupStatus.COMPLETED.value


def create_backup(backup_type: str, now: datetime | None = None) -> BackupRecord:
    """
    Start a backup of the given type.
    
    Raises:
        ValidationError: unknown backup type
    """
    if not BackupType.has_value(backup_type):
        raise ValidationError("Invalid backup type")
    
    low, high = BACKUP_SIZE_RANGES_MB[BackupType(backup_type)]
    record = BackupRecord(
        id=str(uuid.uuid4()),
        type=backup_type,
        size=f"{random.randint(low, high)} MB",
        created_at=now or utc_now(),
    )
    with _state.lock:
        _state.backups.insert(0, record)
    logger.info("backup_started", extra={"backup_id": record.id, "backup_type": backup_type})
    return record


def list_backups(now: datetime | None = None) -> list[BackupRecord]:
    """Newest first."""
    with _state.lock:
        _settle_backups(now or utc_now())
        return list(_state.backups)


# =============================================================================
# Maintenance mode & windows
# =============================================================================

def toggle(enabled: bool, message: str | None = None) -> bool:
    with _state.lock:
        _state.enabled = enabled
        _state.message = message if enabled else None
    logger.info("maintenance_mode_toggled", extra={"enabled": enabled})
    return enabled


def is_enabled() -> bool:
    return _state.enabled


def schedule(
    title: str | None,
    scheduled_start: datetime | None,
    scheduled_end: datetime | None = None,
    description: str | None = None,
    affected_services: list[str] | None = None,
) -> MaintenanceWindow:
    """
    Schedule a maintenance window.
    
    Raises:
        ValidationError: title or start missing, or end before start
    """
    if not (title or "").strip() or scheduled_start is None:
        raise ValidationError("Title and start time are required")
    start = ensure_utc(scheduled_start)
    end = ensure_utc(scheduled_end)
    if end is not None and end < start:
        raise ValidationError("End time must be after start time")
    
    window = MaintenanceWindow(
        id=str(uuid.uuid4()),
        title=title.strip(),
        description=description,
        scheduled_start=start,
        scheduled_end=end,
        affected_services=affected_services or [],
    )
    with _state.lock:
        _state.windows.append(window)
    logger.info("maintenance_window_scheduled", extra={"window_id": window.id})
    return window


def status(db: Session, now: datetime | None = None) -> dict[str, Any]:
    """Full maintenance dashboard payload."""
    now = now or utc_now()
    return {
        "maintenanceMode": _state.enabled,
        "message": _state.message,
        "systemHealth": system_health(db, now),
        "maintenanceWindows": [asdict(w) for w in _state.windows],
        "backupHistory": [asdict(b) for b in list_backups(now)],
    }


def refresh_status(db: Session) -> dict[str, Any]:
    return {"systemHealth": system_health(db)}
