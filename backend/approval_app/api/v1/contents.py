"""Contents API - scoped queries, approval mutations and dashboard views."""
import uuid
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.dependencies import get_db, get_viewer, require_admin, viewer_today
from approval_app.models.content_item import ContentItem, ContentStatus, ContentType
from approval_app.schemas.common import APIResponse
from approval_app.schemas.content import ALL, ContentItemCreate, ContentItemResponse, ContentListFilter, RejectRequest
from approval_app.schemas.views import (
    CalendarDay,
    DateGroup,
    MonthGrid,
    MonthGroup,
    MonthRef,
    TypeBucket,
    YearGroup,
)
from approval_app.services import classifier, content_service
from approval_app.services.profile_service import Viewer

router = APIRouter()


def _dump(items: list[ContentItem]) -> list[ContentItemResponse]:
    return [ContentItemResponse.model_validate(i) for i in items]


async def _get_or_404(db: AsyncSession, viewer: Viewer, content_id: uuid.UUID) -> ContentItem:
    item = await content_service.get_visible(db, viewer, content_id)
    if not item:
        raise HTTPException(status_code=404, detail="Content not found")
    return item


# GET /contents - every visible item, schedule date ascending
@router.get("", response_model=APIResponse)
async def list_contents(
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    items = await content_service.list_visible(db, viewer)
    return APIResponse(
        status="success",
        data=[i.model_dump(mode="json") for i in _dump(items)],
    )


# POST /contents - admin only
@router.post("", response_model=APIResponse, status_code=status.HTTP_201_CREATED)
async def create_content(
    body: ContentItemCreate,
    admin: Viewer = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    item = await content_service.create_content(db, body, admin)
    return APIResponse(
        status="success",
        data=ContentItemResponse.model_validate(item).model_dump(mode="json"),
        message="Content created",
    )


# GET /contents/views/list
@router.get("/views/list", response_model=APIResponse)
async def list_view(
    content_type: ContentType | Literal["all"] = Query(ALL, alias="type"),
    status_filter: ContentStatus | Literal["all"] = Query(ALL, alias="status"),
    assignee: str = ALL,
    today: date = Depends(viewer_today),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    filters = ContentListFilter(content_type=content_type, status=status_filter, assignee=assignee)
    items = classifier.list_view(await content_service.list_visible(db, viewer), today, filters)
    return APIResponse(
        status="success",
        data=[i.model_dump(mode="json") for i in _dump(items)],
        message=None if items else classifier.EMPTY_LIST_MESSAGE,
    )


# GET /contents/views/by-type
@router.get("/views/by-type", response_model=APIResponse)
async def by_type_view(
    today: date = Depends(viewer_today),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    buckets = classifier.group_by_type(await content_service.list_visible(db, viewer), today)
    data = [
        TypeBucket(
            content_type=content_type,
            count=len(items),
            items=_dump(items),
            message=None if items else classifier.empty_bucket_message(content_type),
        ).model_dump(mode="json")
        for content_type, items in buckets.items()
    ]
    return APIResponse(status="success", data=data)


# GET /contents/views/calendar
@router.get("/views/calendar", response_model=APIResponse)
async def calendar_view(
    today: date = Depends(viewer_today),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    groups = classifier.group_by_date(await content_service.list_visible(db, viewer), today)
    data = [DateGroup(date=day, items=_dump(items)).model_dump(mode="json") for day, items in groups.items()]
    return APIResponse(
        status="success",
        data=data,
        message=None if data else classifier.EMPTY_CALENDAR_MESSAGE,
    )


# GET /contents/views/archive
@router.get("/views/archive", response_model=APIResponse)
async def archive_view(
    today: date = Depends(viewer_today),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    years = classifier.group_archive(await content_service.list_visible(db, viewer), today)
    data = [
        YearGroup(
            year=y.year,
            months=[MonthGroup(month=m.name, month_number=m.month, items=_dump(m.items)) for m in y.months],
        ).model_dump(mode="json")
        for y in years
    ]
    return APIResponse(
        status="success",
        data=data,
        message=None if data else classifier.EMPTY_ARCHIVE_MESSAGE,
    )


# GET /contents/views/month/{year}/{month}
@router.get("/views/month/{year}/{month}", response_model=APIResponse)
async def month_view(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    today: date = Depends(viewer_today),
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    items = await content_service.list_visible(db, viewer)
    days = classifier.month_grid(items, year, month, today)
    (prev_year, prev_month), (next_year, next_month) = classifier.adjacent_months(year, month)
    grid = MonthGrid(
        year=year,
        month=month,
        label=classifier.month_label(year, month),
        previous=MonthRef(year=prev_year, month=prev_month),
        next=MonthRef(year=next_year, month=next_month),
        days=[
            CalendarDay(date=d.day, day=d.day.day, is_today=d.is_today, count=len(d.items), items=_dump(d.items))
            for d in days
        ],
    )
    return APIResponse(status="success", data=grid.model_dump(mode="json"))


# GET /contents/{id}
@router.get("/{content_id}", response_model=APIResponse)
async def get_content(
    content_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    item = await _get_or_404(db, viewer, content_id)
    return APIResponse(
        status="success",
        data=ContentItemResponse.model_validate(item).model_dump(mode="json"),
    )


# POST /contents/{id}/approve
@router.post("/{content_id}/approve", response_model=APIResponse)
async def approve_content(
    content_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    item = await _get_or_404(db, viewer, content_id)
    updated = await content_service.approve(db, item)
    return APIResponse(
        status="success",
        data=ContentItemResponse.model_validate(updated).model_dump(mode="json"),
        message="Content approved",
    )


# POST /contents/{id}/reject
@router.post("/{content_id}/reject", response_model=APIResponse)
async def reject_content(
    content_id: uuid.UUID,
    body: RejectRequest,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    item = await _get_or_404(db, viewer, content_id)
    updated = await content_service.reject(db, item, body.notes)
    return APIResponse(
        status="success",
        data=ContentItemResponse.model_validate(updated).model_dump(mode="json"),
        message="Content rejected",
    )
