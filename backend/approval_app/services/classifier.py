"""Content classification: current vs. archived, and per-view grouping.

Every function here is pure and works on anything shaped like a content
item (ORM rows on the server, ``ContentItemResponse`` models in the client).
Input order is preserved wherever a view does not define its own order, so
callers should pass items already sorted by ``schedule_date`` ascending.
"""
import calendar
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Generic, TypeVar

from approval_app.models.content_item import ContentStatus, ContentType
from approval_app.schemas.content import ALL, ContentListFilter
from approval_app.utils.helpers import MONTH_NAMES, shift_month

T = TypeVar("T")

# Fixed bucket order for the by-type view
TYPE_ORDER: tuple[ContentType, ...] = (
    ContentType.POST,
    ContentType.STORY,
    ContentType.REEL,
    ContentType.TIKTOK,
)

EMPTY_LIST_MESSAGE = "No content items found"
EMPTY_CALENDAR_MESSAGE = "No content scheduled"
EMPTY_ARCHIVE_MESSAGE = "No archived content"


@dataclass
class Partition(Generic[T]):
    current: list[T] = field(default_factory=list)
    archived: list[T] = field(default_factory=list)


@dataclass
class ArchiveMonth(Generic[T]):
    month: int
    items: list[T] = field(default_factory=list)

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month - 1]


@dataclass
class ArchiveYear(Generic[T]):
    year: int
    months: list[ArchiveMonth[T]] = field(default_factory=list)


@dataclass
class GridDay(Generic[T]):
    day: date
    is_today: bool
    items: list[T] = field(default_factory=list)


def is_archived(item: Any, today: date) -> bool:
    """An item is archived once its schedule date is strictly before today."""
    return item.schedule_date < today


def partition(items: Iterable[T], today: date) -> Partition[T]:
    result: Partition[T] = Partition()
    for item in items:
        if is_archived(item, today):
            result.archived.append(item)
        else:
            result.current.append(item)
    return result


def assignee_email(item: Any) -> str | None:
    profile = getattr(item, "assignee", None) or getattr(item, "assigned_to_profile", None)
    return profile.email if profile is not None else None


def matches(item: Any, filters: ContentListFilter) -> bool:
    if filters.content_type != ALL and item.content_type != filters.content_type:
        return False
    if filters.status != ALL and item.status != filters.status:
        return False
    if filters.assignee != ALL and assignee_email(item) != filters.assignee:
        return False
    return True


def list_view(items: Iterable[T], today: date, filters: ContentListFilter | None = None) -> list[T]:
    filters = filters or ContentListFilter()
    return [item for item in partition(items, today).current if matches(item, filters)]


def group_by_type(items: Iterable[T], today: date) -> dict[ContentType, list[T]]:
    """Split current items into the four fixed type buckets.

    The buckets are disjoint and together hold every current item.
    """
    buckets: dict[ContentType, list[T]] = {content_type: [] for content_type in TYPE_ORDER}
    for item in partition(items, today).current:
        buckets[ContentType(item.content_type)].append(item)
    return buckets


def group_by_date(items: Iterable[T], today: date) -> dict[date, list[T]]:
    """Group current items by exact schedule date, in encounter order."""
    groups: dict[date, list[T]] = {}
    for item in partition(items, today).current:
        groups.setdefault(item.schedule_date, []).append(item)
    return groups


def group_archive(items: Iterable[T], today: date) -> list[ArchiveYear[T]]:
    """Group archived items by year (newest first) then month (calendar order)."""
    by_year: dict[int, dict[int, list[T]]] = {}
    for item in partition(items, today).archived:
        scheduled = item.schedule_date
        by_year.setdefault(scheduled.year, {}).setdefault(scheduled.month, []).append(item)

    return [
        ArchiveYear(
            year=year,
            months=[ArchiveMonth(month=m, items=by_year[year][m]) for m in sorted(by_year[year])],
        )
        for year in sorted(by_year, reverse=True)
    ]


def month_grid(items: Sequence[T], year: int, month: int, today: date) -> list[GridDay[T]]:
    """Every day of (year, month) with the items scheduled on it."""
    _, days_in_month = calendar.monthrange(year, month)
    days: list[GridDay[T]] = []
    for d in range(1, days_in_month + 1):
        current = date(year, month, d)
        days.append(GridDay(day=current, is_today=current == today))
    for item in items:
        scheduled = item.schedule_date
        if scheduled.year == year and scheduled.month == month:
            days[scheduled.day - 1].items.append(item)
    return days


def adjacent_months(year: int, month: int) -> tuple[tuple[int, int], tuple[int, int]]:
    return shift_month(year, month, -1), shift_month(year, month, 1)


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES[month - 1]} {year}"


def empty_bucket_message(content_type: ContentType) -> str:
    return f"No {content_type.value.lower()}s found"


def is_pending(item: Any) -> bool:
    return item.status == ContentStatus.PENDING
