"""Platform settings router - super admin only."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, EmailStr

from library_cms.core.deps import require_roles
from library_cms.db.enums import Role
from library_cms.schemas.auth import UserSession
from library_cms.schemas.platform_settings import PlatformSettings
from library_cms.services import platform_settings_service

router = APIRouter(prefix="/api/settings", tags=["settings"])

require_super_admin = require_roles([Role.SUPER_ADMIN])


class TestEmailRequest(BaseModel):
    to_email: EmailStr | None = None


@router.get("", response_model=PlatformSettings)
def get_settings(_: UserSession = Depends(require_super_admin)):
    return platform_settings_service.get_settings()


@router.post("", response_model=PlatformSettings)
def update_settings(
    updates: dict[str, Any] = Body(...),
    session: UserSession = Depends(require_super_admin),
):
    """Merge per-section changes; sections and fields not sent are kept."""
    return platform_settings_service.update_settings(updates, actor_id=session.user_id)


@router.post("/test-email")
async def send_test_email(
    data: TestEmailRequest | None = None,
    _: UserSession = Depends(require_super_admin),
) -> dict[str, str]:
    return await platform_settings_service.send_test_email(data.to_email if data else None)
