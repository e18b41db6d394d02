"""Per-resource policies for library-scoped content.

Each policy names how a resource is owned (which attribute holds the owning
library id), the ownership error wording, the asset slots its create/update
paths may upload into, and which fields only a super admin may change.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AssetSlot:
    """An uploadable file that ends up as a URL column on the entity."""

    field: str
    folder: str
    label: str
    required: bool = False
    required_message: str | None = None


@dataclass(frozen=True)
class ResourcePolicy:
    """Ownership, asset and approval rules for one resource type."""

    key: str
    label: str
    owner_attr: str
    ownership_message: str
    assets: tuple[AssetSlot, ...] = ()
    privileged_fields: frozenset[str] = field(default_factory=lambda: frozenset({"is_approved"}))


POLICIES: dict[str, ResourcePolicy] = {
    "stories": ResourcePolicy(
        key="stories",
        label="Story",
        owner_attr="library_id",
        ownership_message="You can only edit stories for your library",
        assets=(AssetSlot(field="featured_image_url", folder="stories", label="story image"),),
        privileged_fields=frozenset({"is_approved", "is_featured"}),
    ),
    "events": ResourcePolicy(
        key="events",
        label="Event",
        owner_attr="library_id",
        ownership_message="You can only edit events for your library",
        assets=(AssetSlot(field="image_url", folder="events", label="event image"),),
    ),
    "media": ResourcePolicy(
        key="media",
        label="Media item",
        owner_attr="library_id",
        ownership_message="You can only edit media for your library",
        assets=(
            AssetSlot(
                field="url",
                folder="media",
                label="media file",
                required=True,
                required_message="Media URL or file is required",
            ),
        ),
    ),
    "libraries": ResourcePolicy(
        key="libraries",
        label="Library",
        owner_attr="id",
        ownership_message="You can only edit your own library",
        assets=(
            AssetSlot(field="logo_url", folder="libraries/logos", label="logo"),
            AssetSlot(field="featured_image_url", folder="libraries/featured", label="featured image"),
        ),
        privileged_fields=frozenset({"is_approved", "is_featured", "is_active"}),
    ),
}


def get_policy(resource: str) -> ResourcePolicy:
    """Fetch a resource policy or raise KeyError."""
    return POLICIES[resource]
