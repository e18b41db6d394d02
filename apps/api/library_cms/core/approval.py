"""Approval workflow for library content.

New content always starts unapproved. Approval (and, for stories, featuring)
is a super admin decision made through the regular update path; library admins
can never change those flags, and no update may move content to another library.
"""

from typing import Any

from library_cms.core.policies import ResourcePolicy
from library_cms.db.enums import Role

TENANT_FIELDS = frozenset({"library_id"})


def initial_state(policy: ResourcePolicy, data: dict[str, Any]) -> dict[str, Any]:
    """
    Workflow defaults for a freshly created record.
    
    - every resource: is_approved=False regardless of input
    - stories: is_published defaults to False (caller may publish at creation),
      is_featured is always False
    - events: is_published is whatever the caller supplied, with no default
    """
    state = dict(data)
    state["is_approved"] = False
    if policy.key == "stories":
        state["is_published"] = bool(data.get("is_published", False))
        state["is_featured"] = False
    if policy.key == "libraries":
        state["is_featured"] = False
    return state


def is_privileged(role: Role | str | None) -> bool:
    role_str = role.value if isinstance(role, Role) else role
    return role_str == Role.SUPER_ADMIN.value


def apply_update(
    policy: ResourcePolicy,
    existing: Any,
    patch: dict[str, Any],
    role: Role | str | None,
) -> dict[str, Any]:
    """
    Return the patch that may actually be persisted.
    
    Tenant fields are always dropped. Approval-controlled fields are pinned to
    their current values unless the actor is a super admin.
    """
    merged = {k: v for k, v in patch.items() if k not in TENANT_FIELDS}
    if policy.owner_attr in merged and policy.owner_attr != "library_id":
        merged.pop(policy.owner_attr)
    if not is_privileged(role):
        for field_name in policy.privileged_fields:
            if hasattr(existing, field_name):
                merged[field_name] = getattr(existing, field_name)
            else:
                merged.pop(field_name, None)
    return merged
