"""Dashboard view schemas (list / by-type / calendar / archive / month grid)."""
from datetime import date

from pydantic import BaseModel

from approval_app.models.content_item import ContentType
from approval_app.schemas.content import ContentItemResponse


class TypeBucket(BaseModel):
    content_type: ContentType
    count: int
    items: list[ContentItemResponse]
    message: str | None = None


class DateGroup(BaseModel):
    date: date
    items: list[ContentItemResponse]


class MonthGroup(BaseModel):
    month: str
    month_number: int
    items: list[ContentItemResponse]


class YearGroup(BaseModel):
    year: int
    months: list[MonthGroup]


class MonthRef(BaseModel):
    year: int
    month: int


class CalendarDay(BaseModel):
    date: date
    day: int
    is_today: bool
    count: int
    items: list[ContentItemResponse]


class MonthGrid(BaseModel):
    year: int
    month: int
    label: str
    previous: MonthRef
    next: MonthRef
    days: list[CalendarDay]
