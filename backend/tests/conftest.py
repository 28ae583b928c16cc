"""Shared test fixtures with in-memory SQLite."""
import uuid

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from approval_app.dependencies import get_db
from approval_app.integrations.recaptcha import RecaptchaVerifier, get_recaptcha_verifier
from approval_app.main import app
from approval_app.models.base import Base
from approval_app.models.profile import Profile
from approval_app.services.auth_service import create_access_token, hash_password, refresh_tokens

TEST_PASSWORD = "testpass123"
RECAPTCHA_URL = "https://recaptcha.test/siteverify"

# --- SQLite compatibility: compile PostgreSQL types for SQLite ---

@compiles(UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw):
    return "VARCHAR(36)"


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
test_session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@event.listens_for(test_engine.sync_engine, "connect")
def _set_sqlite_pragma(dbapi_connection, _connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def _redis_unavailable():
    raise ConnectionError("redis disabled in tests")


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    """Keep refresh tokens on the in-memory path."""
    monkeypatch.setattr(refresh_tokens, "redis_factory", _redis_unavailable)


@pytest.fixture(autouse=True)
async def setup_db():
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    refresh_tokens.clear()


async def _override_get_db():
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# --- Fake siteverify endpoint ---
# The token itself selects the verdict so tests can drive every branch.

RECAPTCHA_VERDICTS = {
    "human-token": {"success": True, "score": 0.9, "action": "login"},
    "bot-token": {"success": False, "error-codes": ["invalid-input-response"]},
    "low-score-token": {"success": True, "score": 0.1, "action": "login"},
    "wrong-action-token": {"success": True, "score": 0.9, "action": "signup"},
}


def recaptcha_handler(request: httpx.Request) -> httpx.Response:
    form = dict(httpx.QueryParams(request.content.decode()))
    token = form.get("response", "")
    if token == "outage-token":
        return httpx.Response(503, json={"error": "unavailable"})
    verdict = RECAPTCHA_VERDICTS.get(token, {"success": False, "error-codes": ["invalid-input-response"]})
    return httpx.Response(200, json=verdict)


def make_verifier(**kwargs) -> RecaptchaVerifier:
    kwargs.setdefault("secret_key", "test-secret")
    kwargs.setdefault("verify_url", RECAPTCHA_URL)
    kwargs.setdefault("min_score", 0.5)
    kwargs.setdefault("expected_action", "login")
    return RecaptchaVerifier(transport=httpx.MockTransport(recaptcha_handler), **kwargs)


def _override_recaptcha_verifier() -> RecaptchaVerifier:
    return make_verifier()


app.dependency_overrides[get_db] = _override_get_db
app.dependency_overrides[get_recaptcha_verifier] = _override_recaptcha_verifier


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with test_session_factory() as session:
        yield session


async def _create_profile(
    db: AsyncSession,
    *,
    is_admin: bool = False,
    email: str | None = None,
    full_name: str | None = None,
    is_active: bool = True,
) -> tuple[Profile, str]:
    """Create a profile and return (profile, access_token)."""
    prefix = "admin" if is_admin else "client"
    profile = Profile(
        id=uuid.uuid4(),
        email=email or f"{prefix}_{uuid.uuid4().hex[:8]}@test.com",
        password_hash=hash_password(TEST_PASSWORD),
        full_name=full_name or f"Test {prefix.title()}",
        is_admin=is_admin,
        is_active=is_active,
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    token = create_access_token(str(profile.id), is_admin)
    return profile, token


@pytest.fixture
async def admin_auth(db_session: AsyncSession) -> tuple[Profile, dict]:
    """Return (admin_profile, auth_headers)."""
    profile, token = await _create_profile(db_session, is_admin=True)
    return profile, {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client_auth(db_session: AsyncSession) -> tuple[Profile, dict]:
    """Return (client_profile, auth_headers)."""
    profile, token = await _create_profile(db_session)
    return profile, {"Authorization": f"Bearer {token}"}
