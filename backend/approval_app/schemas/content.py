"""Content item request/response schemas."""
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, computed_field

from approval_app.models.content_item import ContentStatus, ContentType
from approval_app.schemas.profile import AssigneeSummary
from approval_app.utils import media

ALL = "all"

MISSING_ASSIGNEE = "Please select a user to assign the content to"
MISSING_NOTES = "Rejection notes are required"


class ContentItemCreate(BaseModel):
    caption: str = ""
    content_type: ContentType = ContentType.POST
    media_url: str = Field("", max_length=1500)
    schedule_date: date
    assigned_to: uuid.UUID | None = None


class RejectRequest(BaseModel):
    notes: str = ""


class ContentListFilter(BaseModel):
    """List-view predicates. Each one matches everything when set to "all"."""
    content_type: ContentType | Literal["all"] = ALL
    status: ContentStatus | Literal["all"] = ALL
    assignee: str = ALL


class ContentItemResponse(BaseModel):
    id: uuid.UUID
    caption: str
    content_type: ContentType
    media_url: str
    status: ContentStatus
    schedule_date: date
    rejection_notes: str | None = None
    rejected_at: datetime | None = None
    assigned_to: uuid.UUID
    created_by: uuid.UUID
    assigned_to_profile: AssigneeSummary | None = Field(
        None, validation_alias=AliasChoices("assignee", "assigned_to_profile")
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True, "populate_by_name": True}

    @computed_field
    @property
    def preview_url(self) -> str:
        return media.preview_url(self.media_url)

    @computed_field
    @property
    def is_video(self) -> bool:
        return media.is_video(self.media_url)
