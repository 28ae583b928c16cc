"""Seed the admin profile and one or more client profiles.

Usage (from backend/ directory):
    python scripts/seed_profiles.py --admin-password <pw> \
        --client client@acme.test:<pw>:"Acme Co" [--client ...]

Re-running is safe: existing profiles (matched by email) are left untouched.
The admin email is taken from ADMIN_EMAIL in .env.

Prerequisites:
    - DB is running and migrated (alembic upgrade head)
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Windows: asyncpg requires SelectorEventLoop
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Allow imports from backend/approval_app/
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from approval_app.config import settings
from approval_app.models.profile import Profile
from approval_app.repositories import profile_repository
from approval_app.services.auth_service import hash_password


def _parse_client(value: str) -> tuple[str, str, str | None]:
    parts = value.split(":", 2)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise argparse.ArgumentTypeError("expected email:password[:full name]")
    return parts[0], parts[1], parts[2] if len(parts) == 3 else None


async def _ensure(
    session: AsyncSession, email: str, password: str, full_name: str | None, is_admin: bool,
) -> Profile:
    existing = await profile_repository.get_by_email(session, email)
    if existing is not None:
        print(f"Profile already exists: {email} (id={existing.id})")
        return existing
    profile = await profile_repository.create(
        session,
        Profile(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            is_admin=is_admin,
        ),
    )
    print(f"Created {'admin' if is_admin else 'client'} profile: {email} (id={profile.id})")
    return profile


async def seed(session: AsyncSession, admin_password: str, clients: list[tuple[str, str, str | None]]) -> None:
    await _ensure(session, settings.ADMIN_EMAIL, admin_password, "Admin", is_admin=True)
    for email, password, full_name in clients:
        await _ensure(session, email, password, full_name, is_admin=False)
    await session.commit()

    print()
    print("─" * 60)
    print(f"Seeded successfully! Admin: {settings.ADMIN_EMAIL}, clients: {len(clients)}")
    print("─" * 60)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Create admin and client profiles")
    parser.add_argument("--admin-password", required=True)
    parser.add_argument("--client", action="append", type=_parse_client, default=[], metavar="EMAIL:PASSWORD[:NAME]")
    args = parser.parse_args()

    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        await seed(session, args.admin_password, args.client)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
