"""Authentication-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel

from library_cms.db.enums import Role


class TokenPayload(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    role: str
    library_id: UUID | None = None


class UserSession(BaseModel):
    """
    Actor context for authenticated requests.
    
    Returned by the get_current_session dependency; carries everything
    the library access checks need.
    """
    user_id: UUID
    role: Role  # Validated enum
    library_id: UUID | None = None
