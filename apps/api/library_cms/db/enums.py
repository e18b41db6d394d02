"""Enum definitions for application constants."""

from enum import Enum


class Role(str, Enum):
    """
    Actor roles with increasing privilege levels.
    
    - USER: public visitor with an account; read-only
    - LIBRARY_ADMIN: manages content for exactly one library
    - SUPER_ADMIN: platform operator; may act on any library and moderates content
    """
    USER = "user"
    LIBRARY_ADMIN = "library_admin"
    SUPER_ADMIN = "super_admin"
    
    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class ResponseStatus(str, Enum):
    """Reply state of a contact message."""
    PENDING = "pending"
    RESPONDED = "responded"
    CLOSED = "closed"


class PageType(str, Enum):
    """Kinds of public pages that record analytics views."""
    LIBRARY_PROFILE = "library_profile"
    STORY = "story"
    EVENT = "event"
    GALLERY = "gallery"


class BackupType(str, Enum):
    DATABASE = "database"
    FILES = "files"
    FULL = "full"
    
    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class BackupStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


DEFAULT_RESPONSE_STATUS = ResponseStatus.PENDING
