"""Typed application errors.

Services raise these; the exception handler in main.py turns them into
``{"detail": ..., "code": ...}`` JSON responses with the matching status.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class ValidationError(AppError):
    """Input failed a shape or required-field check."""
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class AuthenticationError(AppError):
    """Actor identity is missing or could not be resolved."""
    status_code = 401
    code = "AUTHENTICATION_ERROR"
    default_message = "Authentication required"


class AuthorizationError(AppError):
    """Actor is known but may not act on the target resource."""
    status_code = 403
    code = "AUTHORIZATION_ERROR"
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    """Referenced entity does not exist."""
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class UpstreamIOError(AppError):
    """Storage, persistence, or email collaborator failed after validation passed."""
    status_code = 500
    code = "UPSTREAM_ERROR"
    default_message = "Upstream operation failed"
