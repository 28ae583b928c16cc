"""Content business logic + approval state machine."""
import logging
import uuid

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.models.content_item import ContentItem, ContentStatus
from approval_app.repositories import content_repository, profile_repository
from approval_app.schemas.content import MISSING_ASSIGNEE, MISSING_NOTES, ContentItemCreate
from approval_app.services.profile_service import Viewer, is_admin_profile
from approval_app.utils.helpers import utc_now

logger = logging.getLogger(__name__)


# --- Approval transition rules ---

TRANSITIONS: dict[ContentStatus, set[ContentStatus]] = {
    ContentStatus.PENDING: {ContentStatus.APPROVED, ContentStatus.REJECTED},
    ContentStatus.APPROVED: set(),
    ContentStatus.REJECTED: set(),
}


def validate_transition(from_status: ContentStatus, to_status: ContentStatus) -> None:
    if to_status not in TRANSITIONS.get(from_status, set()):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change status from '{from_status.value}' to '{to_status.value}'",
        )


def notes_are_blank(notes: str | None) -> bool:
    return not (notes or "").strip()


# --- Queries ---

async def list_visible(db: AsyncSession, viewer: Viewer) -> list[ContentItem]:
    """Admins see every item; everyone else only what is assigned to them."""
    return await content_repository.list_content_items(db, assigned_to=viewer.scope)


async def get_visible(db: AsyncSession, viewer: Viewer, item_id: uuid.UUID) -> ContentItem | None:
    return await content_repository.get_by_id(db, item_id, assigned_to=viewer.scope)


# --- Mutations ---

async def create_content(db: AsyncSession, data: ContentItemCreate, viewer: Viewer) -> ContentItem:
    if data.assigned_to is None:
        raise HTTPException(status_code=400, detail=MISSING_ASSIGNEE)

    assignee = await profile_repository.get_by_id(db, data.assigned_to)
    if assignee is None or is_admin_profile(assignee):
        raise HTTPException(status_code=400, detail="Content can only be assigned to a client profile")

    item = ContentItem(
        caption=data.caption,
        content_type=data.content_type,
        media_url=data.media_url,
        schedule_date=data.schedule_date,
        assigned_to=assignee.id,
        created_by=viewer.id,
        status=ContentStatus.PENDING,
    )
    await content_repository.insert(db, item)
    logger.info("Content %s created for %s on %s", item.id, assignee.email, item.schedule_date)
    return await content_repository.get_by_id(db, item.id)


async def approve(db: AsyncSession, item: ContentItem) -> ContentItem:
    validate_transition(item.status, ContentStatus.APPROVED)
    await content_repository.update_fields(db, item, status=ContentStatus.APPROVED)
    logger.info("Content %s approved", item.id)
    return await content_repository.get_by_id(db, item.id)


async def reject(db: AsyncSession, item: ContentItem, notes: str) -> ContentItem:
    if notes_are_blank(notes):
        raise HTTPException(status_code=400, detail=MISSING_NOTES)
    validate_transition(item.status, ContentStatus.REJECTED)
    await content_repository.update_fields(
        db,
        item,
        status=ContentStatus.REJECTED,
        rejection_notes=notes,
        rejected_at=utc_now(),
    )
    logger.info("Content %s rejected", item.id)
    return await content_repository.get_by_id(db, item.id)
