"""Library-scoped access control for content writes.

Access rules:
- super_admin: always allowed
- library_admin: allowed only on resources owned by their library;
  a session without a library is rejected before any ownership comparison
- anything else: rejected

Reads of public content are not gated here; list endpoints scope by library
through query filters instead.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from library_cms.core.errors import AuthorizationError
from library_cms.core.policies import ResourcePolicy
from library_cms.db.enums import Role

LIBRARY_CONTEXT_REQUIRED = "Library context required"
UNAUTHORIZED = "Unauthorized"


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: str | None = None

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise AuthorizationError(self.reason)


ALLOW = AccessDecision(allowed=True)


def _role_value(role: Role | str | None) -> str | None:
    return role.value if isinstance(role, Role) else role


def owner_library_id(policy: ResourcePolicy, resource: Any) -> UUID | None:
    return getattr(resource, policy.owner_attr, None)


def check_library_context(role: Role | str | None, library_id: UUID | None) -> AccessDecision:
    """Session-level precondition shared by every write path."""
    role_str = _role_value(role)
    if role_str == Role.SUPER_ADMIN.value:
        return ALLOW
    if role_str != Role.LIBRARY_ADMIN.value:
        return AccessDecision(allowed=False, reason=UNAUTHORIZED)
    if not library_id:
        return AccessDecision(allowed=False, reason=LIBRARY_CONTEXT_REQUIRED)
    return ALLOW


def can_read(role: Role | str | None, library_id: UUID | None, resource: Any) -> AccessDecision:
    """Public content is readable by anyone, signed in or not."""
    return ALLOW


def can_write(
    policy: ResourcePolicy,
    role: Role | str | None,
    library_id: UUID | None,
    resource: Any,
) -> AccessDecision:
    """Decide whether the actor may mutate ``resource``. Pure; never raises."""
    context = check_library_context(role, library_id)
    if not context.allowed or _role_value(role) == Role.SUPER_ADMIN.value:
        return context
    if str(owner_library_id(policy, resource)) != str(library_id):
        return AccessDecision(allowed=False, reason=policy.ownership_message)
    return ALLOW


def check_write_access(
    policy: ResourcePolicy,
    role: Role | str | None,
    library_id: UUID | None,
    resource: Any,
) -> None:
    """
    Raise AuthorizationError unless the actor may mutate ``resource``.
    
    Raises:
        AuthorizationError: role, library context, or ownership mismatch
    """
    can_write(policy, role, library_id, resource).raise_if_denied()
