"""Pydantic schemas for platform-wide settings (super admin only)."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class GeneralSettings(_Section):
    site_name: str = Field(default="Library Digital Platform", min_length=1, max_length=255)
    site_description: str = "A comprehensive platform for library digital experiences"
    contact_email: EmailStr = "contact@library-platform.com"
    support_email: EmailStr = "support@library-platform.com"
    default_language: str = Field(default="en", min_length=2, max_length=10)
    timezone: str = "UTC"
    allow_registration: bool = True
    require_email_verification: bool = True
    # Mirrors maintenance mode; writes go through the maintenance service
    maintenance_mode: bool = False


class SecuritySettings(_Section):
    password_min_length: int = Field(default=8, ge=6, le=128)
    require_strong_passwords: bool = True
    session_timeout: int = Field(default=24, ge=1, description="Hours")
    max_login_attempts: int = Field(default=5, ge=1)
    enable_two_factor: bool = False
    allow_password_reset: bool = True


class EmailSettings(_Section):
    from_email: EmailStr = "noreply@library-platform.com"
    from_name: str = Field(default="Library Platform", min_length=1, max_length=255)
    enable_email_notifications: bool = True


class ContentSettings(_Section):
    max_file_size: int = Field(default=10, ge=1, description="Megabytes")
    allowed_file_types: list[str] = Field(
        default_factory=lambda: ["jpg", "jpeg", "png", "gif", "pdf", "mp4", "mp3"]
    )
    auto_moderation: bool = True
    require_approval: bool = True
    enable_comments: bool = True
    enable_ratings: bool = True


class AppearanceSettings(_Section):
    primary_color: str = Field(default="#2563eb", pattern=r"^#[0-9a-fA-F]{6}$")
    secondary_color: str = Field(default="#64748b", pattern=r"^#[0-9a-fA-F]{6}$")
    logo: str = ""
    favicon: str = ""
    custom_css: str = ""
    dark_mode_enabled: bool = True


class NotificationSettings(_Section):
    new_user_signup: bool = True
    new_library_application: bool = True
    content_flagged: bool = True
    system_alerts: bool = True
    weekly_reports: bool = True
    email_digest: bool = False


class PlatformSettings(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    appearance: AppearanceSettings = Field(default_factory=AppearanceSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
