"""Content item ORM model."""
import enum
import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from approval_app.models.base import Base, TimestampMixin, UUIDMixin, pg_enum


class ContentType(str, enum.Enum):
    POST = "Post"
    STORY = "Story"
    REEL = "Reel"
    TIKTOK = "TikTok"


class ContentStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ContentItem(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "content_items"
    __table_args__ = (
        CheckConstraint(
            "status <> 'Rejected' OR length(trim(coalesce(rejection_notes, ''))) > 0",
            name="ck_content_items_rejection_notes",
        ),
    )

    caption: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_type: Mapped[ContentType] = mapped_column(
        pg_enum(ContentType, name="content_type"), nullable=False
    )
    media_url: Mapped[str] = mapped_column(String(1500), nullable=False, default="")
    status: Mapped[ContentStatus] = mapped_column(
        pg_enum(ContentStatus, name="content_status"), nullable=False, default=ContentStatus.PENDING
    )
    schedule_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    rejection_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    assigned_to: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True
    )
    created_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False)

    # Relationships
    assignee = relationship("Profile", foreign_keys=[assigned_to], lazy="selectin")
