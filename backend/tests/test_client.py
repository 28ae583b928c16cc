"""Session provider and dashboard client tests, run against the ASGI app."""
from datetime import date

import httpx
import pytest
from httpx import ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.client import (
    AuthEvent,
    ContentForm,
    DashboardClient,
    FormValidationError,
    RemoteError,
    SessionProvider,
)
from approval_app.main import app
from approval_app.models.content_item import ContentStatus, ContentType
from tests.conftest import TEST_PASSWORD, _create_profile
from tests.test_contents import _create_item

TODAY = date(2026, 10, 18)


@pytest.fixture
async def provider():
    async with SessionProvider("http://test", transport=ASGITransport(app=app)) as p:
        yield p


async def _signed_in(provider: SessionProvider, email: str) -> DashboardClient:
    await provider.sign_in(email, TEST_PASSWORD, "human-token")
    return DashboardClient(provider, today_provider=lambda: TODAY)


# --- SessionProvider ---

async def test_sign_in_emits_events_and_loads_profile(provider: SessionProvider, db_session: AsyncSession):
    profile, _ = await _create_profile(db_session, full_name="Acme")
    events: list[AuthEvent] = []
    provider.on_change(lambda event, _session: events.append(event))

    session = await provider.sign_in(profile.email, TEST_PASSWORD, "human-token")

    assert session.profile_id == str(profile.id)
    assert await provider.get_current_session() == session
    assert events == [AuthEvent.SIGNED_IN, AuthEvent.PROFILE_LOADED]
    assert provider.profile.full_name == "Acme"
    assert provider.is_admin is False


async def test_sign_in_recaptcha_failure(provider: SessionProvider, db_session: AsyncSession):
    profile, _ = await _create_profile(db_session)
    with pytest.raises(RemoteError) as exc_info:
        await provider.sign_in(profile.email, TEST_PASSWORD, "bot-token")
    assert exc_info.value.status_code == 403
    assert "reCAPTCHA" in exc_info.value.detail
    assert await provider.get_current_session() is None


async def test_sign_out_clears_state(provider: SessionProvider, db_session: AsyncSession):
    profile, _ = await _create_profile(db_session)
    await provider.sign_in(profile.email, TEST_PASSWORD, "human-token")
    events: list[AuthEvent] = []
    unsubscribe = provider.on_change(lambda event, session: events.append(event))

    await provider.sign_out()

    assert events == [AuthEvent.SIGNED_OUT]
    assert await provider.get_current_session() is None
    assert provider.profile is None
    unsubscribe()
    await provider.sign_out()
    assert events == [AuthEvent.SIGNED_OUT]


async def test_refresh_emits_token_refreshed(provider: SessionProvider, db_session: AsyncSession):
    profile, _ = await _create_profile(db_session)
    first = await provider.sign_in(profile.email, TEST_PASSWORD, "human-token")
    events: list[AuthEvent] = []
    provider.on_change(lambda event, session: events.append(event))

    second = await provider.refresh()
    assert second.refresh_token != first.refresh_token
    assert events == [AuthEvent.TOKEN_REFRESHED]


async def test_sign_out_with_expired_token_still_clears_state(provider: SessionProvider, db_session: AsyncSession):
    profile, _ = await _create_profile(db_session)
    await provider.sign_in(profile.email, TEST_PASSWORD, "human-token")
    provider._session = provider._session.model_copy(update={"access_token": "expired"})
    events: list[AuthEvent] = []
    provider.on_change(lambda event, session: events.append(event))

    await provider.sign_out()

    assert events == [AuthEvent.SIGNED_OUT]
    assert await provider.get_current_session() is None
    assert provider.profile is None


async def test_sign_in_profile_failure_leaves_no_session():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/auth/login":
            return httpx.Response(200, json={
                "status": "success",
                "data": {"profile_id": "p1", "access_token": "a", "refresh_token": "r"},
            })
        return httpx.Response(500, json={"title": "Internal Server Error", "detail": "boom"})

    events: list[AuthEvent] = []
    async with SessionProvider("http://test", transport=httpx.MockTransport(handler)) as provider:
        provider.on_change(lambda event, session: events.append(event))
        with pytest.raises(RemoteError) as exc_info:
            await provider.sign_in("a@test.com", TEST_PASSWORD, "human-token")
        assert exc_info.value.status_code == 500
        assert await provider.get_current_session() is None
        assert provider.profile is None
    assert events == []


# --- DashboardClient ---

async def test_refresh_replaces_items(provider: SessionProvider, db_session: AsyncSession):
    me, _ = await _create_profile(db_session)
    admin, _ = await _create_profile(db_session, is_admin=True)
    await _create_item(db_session, me, admin, date(2026, 10, 20))
    dashboard = await _signed_in(provider, me.email)

    await dashboard.refresh()
    assert len(dashboard.items) == 1
    assert dashboard.profiles == []

    await _create_item(db_session, me, admin, date(2026, 10, 19))
    await dashboard.refresh()
    assert [i.schedule_date for i in dashboard.items] == [date(2026, 10, 19), date(2026, 10, 20)]


async def test_local_views(provider: SessionProvider, db_session: AsyncSession):
    me, _ = await _create_profile(db_session)
    admin, _ = await _create_profile(db_session, is_admin=True)
    await _create_item(db_session, me, admin, date(2023, 3, 14))
    await _create_item(db_session, me, admin, TODAY, content_type=ContentType.TIKTOK)
    dashboard = await _signed_in(provider, me.email)
    await dashboard.refresh()

    assert len(dashboard.list_view()) == 1
    assert len(dashboard.by_type()[ContentType.TIKTOK]) == 1
    assert list(dashboard.calendar()) == [TODAY]
    archive = dashboard.archive()
    assert archive[0].year == 2023 and archive[0].months[0].name == "March"
    assert len(dashboard.actionable()) == 1
    assert len(dashboard.month_grid(2026, 10)[17].items) == 1


async def test_create_without_assignee_issues_no_request():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    async with SessionProvider("http://test", transport=httpx.MockTransport(handler)) as provider:
        dashboard = DashboardClient(provider, form=ContentForm(caption="Hi"))
        with pytest.raises(FormValidationError, match="select a user"):
            await dashboard.create()
    assert calls == []
    assert dashboard.form.caption == "Hi"


async def test_create_with_malformed_assignee_issues_no_request():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    async with SessionProvider("http://test", transport=httpx.MockTransport(handler)) as provider:
        dashboard = DashboardClient(provider, form=ContentForm(caption="Hi", assigned_to="not-a-uuid"))
        with pytest.raises(FormValidationError, match="assigned_to"):
            await dashboard.create()
    assert calls == []


async def test_admin_create_resets_form_and_refetches(provider: SessionProvider, db_session: AsyncSession):
    admin, _ = await _create_profile(db_session, is_admin=True)
    assignee, _ = await _create_profile(db_session)
    dashboard = await _signed_in(provider, admin.email)
    await dashboard.refresh()
    assert [str(p.id) for p in dashboard.profiles] == [str(assignee.id)]

    dashboard.form = ContentForm(
        caption="Launch",
        content_type=ContentType.REEL,
        schedule_date=date(2026, 10, 25),
        assigned_to=str(assignee.id),
    )
    created = await dashboard.create()

    assert created.status == ContentStatus.PENDING
    assert dashboard.form == ContentForm()
    assert [i.id for i in dashboard.items] == [created.id]


async def test_approve_then_refetch(provider: SessionProvider, db_session: AsyncSession):
    me, _ = await _create_profile(db_session)
    admin, _ = await _create_profile(db_session, is_admin=True)
    item = await _create_item(db_session, me, admin)
    dashboard = await _signed_in(provider, me.email)
    await dashboard.refresh()

    await dashboard.approve(str(item.id))
    assert dashboard.items[0].status == ContentStatus.APPROVED
    assert dashboard.actionable() == []


async def test_two_phase_rejection(provider: SessionProvider, db_session: AsyncSession):
    me, _ = await _create_profile(db_session)
    admin, _ = await _create_profile(db_session, is_admin=True)
    item = await _create_item(db_session, me, admin)
    dashboard = await _signed_in(provider, me.email)
    await dashboard.refresh()

    dashboard.start_rejection(str(item.id))
    with pytest.raises(FormValidationError, match="required"):
        await dashboard.confirm_rejection("   ")
    assert dashboard.pending_rejection is not None
    assert dashboard.items[0].status == ContentStatus.PENDING

    await dashboard.confirm_rejection("wrong caption")
    assert dashboard.pending_rejection is None
    assert dashboard.items[0].status == ContentStatus.REJECTED
    assert dashboard.items[0].rejection_notes == "wrong caption"


async def test_confirm_without_start():
    async with SessionProvider("http://test", transport=httpx.MockTransport(lambda r: httpx.Response(500))) as p:
        with pytest.raises(FormValidationError):
            await DashboardClient(p).confirm_rejection("notes")


async def test_cancel_rejection(provider: SessionProvider):
    dashboard = DashboardClient(provider)
    dashboard.start_rejection("abc")
    dashboard.cancel_rejection()
    assert dashboard.pending_rejection is None


async def test_remote_error_carries_detail(provider: SessionProvider, db_session: AsyncSession):
    me, _ = await _create_profile(db_session)
    admin, _ = await _create_profile(db_session, is_admin=True)
    item = await _create_item(db_session, me, admin, status=ContentStatus.APPROVED)
    dashboard = await _signed_in(provider, me.email)

    with pytest.raises(RemoteError) as exc_info:
        await dashboard.approve(str(item.id))
    assert exc_info.value.status_code == 400
    assert "Cannot change status" in exc_info.value.detail
