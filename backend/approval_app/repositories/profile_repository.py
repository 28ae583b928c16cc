"""Profile data access layer."""
import uuid as _uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.models.profile import Profile


async def get_by_id(db: AsyncSession, profile_id: _uuid.UUID) -> Profile | None:
    return (await db.execute(select(Profile).where(Profile.id == profile_id))).scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> Profile | None:
    return (
        await db.execute(select(Profile).where(func.lower(Profile.email) == email.lower()))
    ).scalar_one_or_none()


async def list_profiles(db: AsyncSession, *, is_admin: bool | None = None) -> list[Profile]:
    q = select(Profile)
    if is_admin is not None:
        q = q.where(Profile.is_admin == is_admin)
    rows = (await db.execute(q.order_by(Profile.email))).scalars().all()
    return list(rows)


async def create(db: AsyncSession, profile: Profile) -> Profile:
    db.add(profile)
    await db.flush()
    return profile
