"""Structured logging helpers."""

from typing import Any


def build_log_context(
    *,
    user_id: str | None = None,
    library_id: str | None = None,
    entity_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict for ``extra=``, skipping empty values."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = str(user_id)
    if library_id:
        context["library_id"] = str(library_id)
    if entity_id:
        context["entity_id"] = str(entity_id)
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
