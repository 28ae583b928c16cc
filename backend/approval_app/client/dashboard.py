"""Dashboard state for admins and clients.

Server data is never patched locally: every successful write is followed by a
full re-fetch that replaces ``items`` wholesale. Writes are serialized so a
mutation and its re-fetch never interleave with another mutation.
"""
import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from pydantic import ValidationError

from approval_app.client.errors import FormValidationError
from approval_app.client.session import SessionProvider
from approval_app.models.content_item import ContentType
from approval_app.schemas.content import (
    MISSING_ASSIGNEE,
    MISSING_NOTES,
    ContentItemCreate,
    ContentItemResponse,
    ContentListFilter,
)
from approval_app.schemas.profile import ProfileResponse
from approval_app.services import classifier

logger = logging.getLogger(__name__)


@dataclass
class ContentForm:
    """Admin's new-content form."""
    caption: str = ""
    content_type: ContentType = ContentType.POST
    media_url: str = ""
    schedule_date: date | None = None
    assigned_to: str = ""


@dataclass
class PendingRejection:
    item_id: str
    notes: str = ""


@dataclass
class DashboardClient:
    session: SessionProvider
    today_provider: Callable[[], date] = date.today
    items: list[ContentItemResponse] = field(default_factory=list)
    profiles: list[ProfileResponse] = field(default_factory=list)
    form: ContentForm = field(default_factory=ContentForm)
    filters: ContentListFilter = field(default_factory=ContentListFilter)
    pending_rejection: PendingRejection | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def today(self) -> date:
        return self.today_provider()

    # ── Fetching ──

    async def refresh(self) -> list[ContentItemResponse]:
        body = await self.session.request("GET", "/contents")
        self.items = [ContentItemResponse.model_validate(i) for i in body["data"]]
        if self.session.is_admin:
            body = await self.session.request("GET", "/profiles")
            self.profiles = [ProfileResponse.model_validate(p) for p in body["data"]]
        return self.items

    # ── Views ──

    def list_view(self) -> list[ContentItemResponse]:
        return classifier.list_view(self.items, self.today, self.filters)

    def by_type(self) -> dict[ContentType, list[ContentItemResponse]]:
        return classifier.group_by_type(self.items, self.today)

    def calendar(self) -> dict[date, list[ContentItemResponse]]:
        return classifier.group_by_date(self.items, self.today)

    def archive(self) -> list[classifier.ArchiveYear[ContentItemResponse]]:
        return classifier.group_archive(self.items, self.today)

    def month_grid(self, year: int, month: int) -> list[classifier.GridDay[ContentItemResponse]]:
        return classifier.month_grid(self.items, year, month, self.today)

    def actionable(self) -> list[ContentItemResponse]:
        """Current items still awaiting a decision."""
        return [i for i in classifier.partition(self.items, self.today).current if classifier.is_pending(i)]

    # ── Mutations ──

    async def create(self) -> ContentItemResponse:
        if not self.form.assigned_to:
            raise FormValidationError(MISSING_ASSIGNEE)
        try:
            payload = ContentItemCreate(
                caption=self.form.caption,
                content_type=self.form.content_type,
                media_url=self.form.media_url,
                schedule_date=self.form.schedule_date or self.today,
                assigned_to=self.form.assigned_to,
            )
        except ValidationError as e:
            first = e.errors()[0]
            field_name = ".".join(str(part) for part in first["loc"])
            raise FormValidationError(f"Invalid {field_name}: {first['msg']}") from e
        async with self._lock:
            body = await self.session.request("POST", "/contents", json=payload.model_dump(mode="json"))
            self.form = ContentForm()
            await self.refresh()
        return ContentItemResponse.model_validate(body["data"])

    async def approve(self, item_id: str) -> None:
        async with self._lock:
            await self.session.request("POST", f"/contents/{item_id}/approve")
            await self.refresh()

    def start_rejection(self, item_id: str) -> PendingRejection:
        self.pending_rejection = PendingRejection(item_id=item_id)
        return self.pending_rejection

    def cancel_rejection(self) -> None:
        self.pending_rejection = None

    async def confirm_rejection(self, notes: str | None = None) -> None:
        pending = self.pending_rejection
        if pending is None:
            raise FormValidationError("No rejection in progress")
        if notes is not None:
            pending.notes = notes
        if not pending.notes.strip():
            raise FormValidationError(MISSING_NOTES)
        async with self._lock:
            await self.session.request("POST", f"/contents/{pending.item_id}/reject", json={"notes": pending.notes})
            self.pending_rejection = None
            await self.refresh()
        logger.info("Rejected %s", pending.item_id)
