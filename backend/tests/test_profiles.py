"""Profiles API tests."""
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.config import settings
from tests.conftest import _create_profile


async def test_admin_lists_client_profiles_only(client: AsyncClient, admin_auth, db_session: AsyncSession):
    _, headers = admin_auth
    a, _ = await _create_profile(db_session, email="a_client@test.com")
    b, _ = await _create_profile(db_session, email="b_client@test.com")
    # an admin by configured email must not be assignable even without the flag
    await _create_profile(db_session, email=settings.ADMIN_EMAIL)

    resp = await client.get("/api/v1/profiles", headers=headers)
    assert resp.status_code == 200
    emails = [p["email"] for p in resp.json()["data"]]
    assert emails == [a.email, b.email]


async def test_client_cannot_list_profiles(client: AsyncClient, client_auth):
    _, headers = client_auth
    resp = await client.get("/api/v1/profiles", headers=headers)
    assert resp.status_code == 403


async def test_fetch_own_profile(client: AsyncClient, client_auth):
    profile, headers = client_auth
    resp = await client.get(f"/api/v1/profiles/{profile.id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["full_name"] == profile.full_name


async def test_client_cannot_fetch_other_profile(client: AsyncClient, client_auth, db_session: AsyncSession):
    _, headers = client_auth
    other, _ = await _create_profile(db_session)
    resp = await client.get(f"/api/v1/profiles/{other.id}", headers=headers)
    assert resp.status_code == 404


async def test_admin_fetches_any_profile(client: AsyncClient, admin_auth, db_session: AsyncSession):
    _, headers = admin_auth
    other, _ = await _create_profile(db_session)
    resp = await client.get(f"/api/v1/profiles/{other.id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == str(other.id)


async def test_fetch_missing_profile(client: AsyncClient, admin_auth):
    _, headers = admin_auth
    resp = await client.get(f"/api/v1/profiles/{uuid.uuid4()}", headers=headers)
    assert resp.status_code == 404


async def test_email_unique_ignoring_case(db_session: AsyncSession):
    await _create_profile(db_session, email="acme@test.com")
    with pytest.raises(IntegrityError):
        await _create_profile(db_session, email="ACME@test.com")
    await db_session.rollback()
