"""Profile response schemas."""
from uuid import UUID

from pydantic import BaseModel, computed_field


class ProfileResponse(BaseModel):
    id: UUID
    email: str
    full_name: str | None = None
    is_admin: bool = False
    company_logo: str | None = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def display_name(self) -> str:
        """Name shown in headers and assignee pickers."""
        return self.full_name or self.email


class AssigneeSummary(BaseModel):
    """Joined assignee columns embedded in content items."""
    email: str
    full_name: str | None = None

    model_config = {"from_attributes": True}
