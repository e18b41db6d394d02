"""Platform-wide settings edited by super admins.

State is process-local, like maintenance mode; each API worker keeps its own
copy and a restart returns to the defaults. ``general.maintenance_mode`` is
not stored here: reads reflect the maintenance service and writes toggle it.
"""

import logging
import threading
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from library_cms.core.errors import UpstreamIOError, ValidationError
from library_cms.core.structured_logging import build_log_context
from library_cms.schemas.platform_settings import PlatformSettings
from library_cms.services import email_service, maintenance_service

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_settings = PlatformSettings()


def reset_state() -> None:
    """Restore the default settings (used in tests)."""
    global _settings
    with _lock:
        _settings = PlatformSettings()


def get_settings() -> PlatformSettings:
    with _lock:
        current = _settings.model_copy(deep=True)
    current.general.maintenance_mode = maintenance_service.is_enabled()
    return current


def _field_errors(section: str, exc: PydanticValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        path = ".".join(str(part) for part in (section, *err["loc"]))
        errors.setdefault(path, []).append(err["msg"])
    return errors


def update_settings(updates: dict[str, Any], actor_id: UUID | None = None) -> PlatformSettings:
    """
    Merge per-section updates into the current settings.

    Each section is merged field by field, so ``{"security": {"max_login_attempts": 3}}``
    leaves the rest of ``security`` untouched. Nothing is applied unless every
    section validates.

    Raises:
        ValidationError: unknown section, unknown field or invalid value
    """
    errors: dict[str, list[str]] = {}
    merged: dict[str, Any] = {}

    with _lock:
        for section, patch in updates.items():
            if section not in PlatformSettings.model_fields:
                errors[section] = ["Unknown settings section"]
                continue
            if not isinstance(patch, dict):
                errors[section] = ["Section must be an object"]
                continue
            section_model = type(getattr(_settings, section))
            values = {**getattr(_settings, section).model_dump(), **patch}
            try:
                merged[section] = section_model.model_validate(values)
            except PydanticValidationError as exc:
                errors.update(_field_errors(section, exc))

        if errors:
            raise ValidationError("Invalid settings", errors=errors)

        for section, value in merged.items():
            setattr(_settings, section, value)

    general_patch = updates.get("general") or {}
    if "maintenance_mode" in general_patch:
        maintenance_service.toggle(merged["general"].maintenance_mode)

    logger.info(
        "platform_settings_updated",
        extra={**build_log_context(user_id=actor_id), "sections": sorted(merged)},
    )
    return get_settings()


async def send_test_email(to_email: str | None = None) -> dict[str, str]:
    """
    Send a test message through the configured email provider.

    Goes to ``to_email`` when given, otherwise to the support address.

    Raises:
        UpstreamIOError: the provider did not accept the message
    """
    current = get_settings()
    recipient = to_email or current.general.support_email
    result = await email_service.send_test_email(
        to_email=recipient,
        from_name=current.email.from_name,
    )
    if not result.get("success"):
        logger.error("settings_test_email_failed", extra={"error": result.get("error")})
        raise UpstreamIOError("Failed to send test email")
    return {"message": "Test email sent successfully"}
