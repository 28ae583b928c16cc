"""Content item data access layer."""
import uuid as _uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from approval_app.models.content_item import ContentItem


async def get_by_id(
    db: AsyncSession, item_id: _uuid.UUID, *, assigned_to: _uuid.UUID | None = None,
) -> ContentItem | None:
    q = (
        select(ContentItem)
        .options(selectinload(ContentItem.assignee))
        .where(ContentItem.id == item_id)
        .execution_options(populate_existing=True)
    )
    if assigned_to is not None:
        q = q.where(ContentItem.assigned_to == assigned_to)
    return (await db.execute(q)).scalar_one_or_none()


async def list_content_items(
    db: AsyncSession, *, assigned_to: _uuid.UUID | None = None,
) -> list[ContentItem]:
    """All items ordered by schedule date, optionally scoped to one assignee."""
    q = select(ContentItem).options(selectinload(ContentItem.assignee))
    if assigned_to is not None:
        q = q.where(ContentItem.assigned_to == assigned_to)
    q = q.order_by(ContentItem.schedule_date.asc(), ContentItem.created_at.asc(), ContentItem.id.asc())
    rows = (await db.execute(q)).scalars().all()
    return list(rows)


async def insert(db: AsyncSession, item: ContentItem) -> ContentItem:
    db.add(item)
    await db.flush()
    return item


async def update_fields(db: AsyncSession, item: ContentItem, **fields: Any) -> ContentItem:
    for key, value in fields.items():
        setattr(item, key, value)
    await db.flush()
    return item
