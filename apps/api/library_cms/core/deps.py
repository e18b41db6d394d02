"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator

import jwt
from fastapi import Depends, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from library_cms.core.config import settings
from library_cms.core.errors import AuthenticationError, AuthorizationError, ValidationError
from library_cms.core.library_access import check_library_context
from library_cms.core.security import decode_session_token
from library_cms.db.enums import Role
from library_cms.db.session import SessionLocal
from library_cms.schemas.auth import TokenPayload, UserSession


COOKIE_NAME = settings.COOKIE_NAME
BEARER_PREFIX = "Bearer "


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.
    
    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _extract_token(request: Request) -> str | None:
    token = request.cookies.get(COOKIE_NAME)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX):].strip() or None
    return None


def _session_from_token(token: str) -> UserSession:
    try:
        payload = TokenPayload.model_validate(decode_session_token(token))
    except (jwt.InvalidTokenError, PydanticValidationError):
        raise AuthenticationError("Invalid session")
    
    # Unknown roles are a permissions problem, not an identity problem
    if not Role.has_value(payload.role):
        raise AuthorizationError(f"Unknown role '{payload.role}'")
    
    return UserSession(
        user_id=payload.sub,
        role=Role(payload.role),
        library_id=payload.library_id,
    )


def get_current_session(request: Request) -> UserSession:
    """
    Resolve the actor from the session cookie or bearer token.
    
    This is the PRIMARY auth dependency for write endpoints.
    
    Raises:
        AuthenticationError: no token, or token invalid/expired
    """
    token = _extract_token(request)
    if not token:
        raise AuthenticationError()
    return _session_from_token(token)


def get_optional_session(request: Request) -> UserSession | None:
    """Like get_current_session, but anonymous visitors yield None."""
    token = _extract_token(request)
    if not token:
        return None
    return _session_from_token(token)


def require_roles(allowed_roles: list):
    """
    Dependency factory for role-based authorization.
    
    Usage:
        @router.post("/x", dependencies=[Depends(require_roles([Role.SUPER_ADMIN]))])
    """
    def dependency(session: UserSession = Depends(get_current_session)) -> UserSession:
        if session.role not in allowed_roles:
            raise AuthorizationError("Unauthorized")
        return session
    return dependency


def require_library_context(
    session: UserSession = Depends(get_current_session),
) -> UserSession:
    """
    Admin session that is allowed to write content.
    
    Library admins must carry a library id; super admins pass unconditionally.
    """
    check_library_context(session.role, session.library_id).raise_if_denied()
    return session


def require_session_library(
    session: UserSession = Depends(get_current_session),
) -> UserSession:
    """Dashboard access: any signed-in actor whose session names a library."""
    if not session.library_id:
        raise ValidationError("Library ID required")
    return session
