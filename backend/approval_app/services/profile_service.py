"""Viewer identity and profile visibility rules."""
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.config import settings
from approval_app.models.profile import Profile
from approval_app.repositories import profile_repository


def is_admin_profile(profile: Profile) -> bool:
    """Admins are identified by the configured admin email or the is_admin flag."""
    if settings.ADMIN_EMAIL and profile.email.lower() == settings.ADMIN_EMAIL.lower():
        return True
    return bool(profile.is_admin)


@dataclass(frozen=True)
class Viewer:
    """The authenticated profile behind a request."""
    profile: Profile
    is_admin: bool

    @classmethod
    def of(cls, profile: Profile) -> "Viewer":
        return cls(profile=profile, is_admin=is_admin_profile(profile))

    @property
    def id(self) -> uuid.UUID:
        return self.profile.id

    @property
    def scope(self) -> uuid.UUID | None:
        """Row filter for content queries: None means every row."""
        return None if self.is_admin else self.profile.id

    def can_view_profile(self, profile_id: uuid.UUID) -> bool:
        return self.is_admin or profile_id == self.profile.id


async def list_assignable_profiles(db: AsyncSession) -> list[Profile]:
    """Non-admin profiles, i.e. the clients content can be assigned to."""
    profiles = await profile_repository.list_profiles(db, is_admin=False)
    return [p for p in profiles if not is_admin_profile(p)]


async def get_profile(db: AsyncSession, profile_id: uuid.UUID) -> Profile | None:
    return await profile_repository.get_by_id(db, profile_id)
