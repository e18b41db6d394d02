"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "change-this-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    
    # Environment
    ENV: str = "dev"
    
    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"
    
    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    
    # Session Token (supports key rotation)
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 8
    COOKIE_NAME: str = "library_session"
    
    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"
    
    # Asset storage ("local" or "s3")
    STORAGE_BACKEND: str = "local"
    LOCAL_STORAGE_PATH: str = "/tmp/library-cms-assets"
    S3_BUCKET: str = "library-cms-assets"
    S3_REGION: str = "us-east-1"
    ASSET_PUBLIC_BASE_URL: str = "http://localhost:8000/assets"
    MAX_UPLOAD_SIZE_MB: int = 10
    
    # Outbound email (Resend)
    PLATFORM_RESEND_API_KEY: str = ""
    PLATFORM_EMAIL_FROM: str = ""
    
    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""
    
    # Logging
    LOG_LEVEL: str = "INFO"
    
    # Rate Limiting
    RATE_LIMIT_API: int = 100  # General API, per 15 minutes
    RATE_LIMIT_CONTACT: str = "3/hour"  # Public contact form
    RATE_LIMIT_REPLY: str = "10/hour"  # Outbound email replies
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
    
    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets
    
    @property
    def is_dev(self) -> bool:
        return self.ENV == "dev"
    
    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    
    def validate_for_production(self) -> None:
        """Refuse to boot a production process with the placeholder JWT secret."""
        if self.ENV == "production" and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set in production")


settings = Settings()
