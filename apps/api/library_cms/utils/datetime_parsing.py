"""Datetime helpers shared by models and services."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """
    Normalize a datetime to UTC.
    
    SQLite hands back naive datetimes even for timezone-aware columns;
    those are stored in UTC, so we attach UTC rather than converting.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def timestamp_or_epoch(value: datetime | None) -> float:
    """POSIX timestamp for sorting; missing values sort as the epoch."""
    normalized = ensure_utc(value)
    return normalized.timestamp() if normalized else 0.0


def short_day_label(value: date) -> str:
    """Chart label such as ``Oct 18``."""
    return f"{value:%b} {value.day}"
