"""Security utilities for JWT session tokens."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from library_cms.core.config import settings


# =============================================================================
# Session Token (JWT in cookie or bearer header)
# =============================================================================

def create_session_token(
    user_id: UUID,
    role: str,
    library_id: UUID | None = None,
) -> str:
    """
    Create signed session JWT.
    
    Always signs with current secret (JWT_SECRET).
    Token carries the actor identity, role and owning library (if any).
    """
    payload = {
        "sub": str(user_id),
        "role": role,
        "library_id": str(library_id) if library_id else None,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.
    
    Tries current secret first, then previous (for rotation support).
    
    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error: jwt.InvalidTokenError | None = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore[misc]
