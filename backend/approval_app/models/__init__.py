"""SQLAlchemy ORM models."""
from approval_app.models.base import Base, TimestampMixin, UUIDMixin
from approval_app.models.profile import Profile
from approval_app.models.content_item import ContentItem, ContentStatus, ContentType

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "Profile",
    "ContentItem",
    "ContentStatus",
    "ContentType",
]
