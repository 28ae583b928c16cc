"""Authentication service - password hashing, JWT and refresh tokens."""
import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.config import settings
from approval_app.models.profile import Profile
from approval_app.repositories import profile_repository
from approval_app.utils.redis_client import get_redis

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(profile_id: str, is_admin: bool = False) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": profile_id,
        "adm": is_admin,
        "iat": now,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token() -> str:
    return str(uuid.uuid4())


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


async def authenticate(db: AsyncSession, email: str, password: str) -> Profile | None:
    profile = await profile_repository.get_by_email(db, email)
    if profile and profile.is_active and verify_password(password, profile.password_hash):
        return profile
    return None


class RefreshTokenStore:
    """Single-use refresh tokens, shared across workers through Redis.

    Keys: ``refresh:{token}`` -> profile id (expires with the token) and
    ``profile_tokens:{profile_id}`` -> set of live tokens, used by logout.
    When Redis cannot be reached the store falls back to a per-process dict.
    """

    PREFIX = "refresh:"
    OWNER_PREFIX = "profile_tokens:"

    def __init__(
        self,
        ttl: timedelta | None = None,
        redis_factory: Callable[[], Awaitable[Redis]] = get_redis,
    ):
        self.ttl = ttl or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        self.redis_factory = redis_factory
        # In-memory fallback: token -> (profile_id, expires_at)
        self._tokens: dict[str, tuple[str, datetime]] = {}

    async def issue(self, profile_id: str) -> str:
        token = create_refresh_token()
        ttl_seconds = max(int(self.ttl.total_seconds()), 1)
        try:
            redis = await self.redis_factory()
            await redis.set(f"{self.PREFIX}{token}", profile_id, ex=ttl_seconds)
            await redis.sadd(f"{self.OWNER_PREFIX}{profile_id}", token)
            await redis.expire(f"{self.OWNER_PREFIX}{profile_id}", ttl_seconds)
            return token
        except Exception:
            logger.debug("Redis unavailable for issue, using in-memory fallback")
        self._tokens[token] = (profile_id, datetime.now(timezone.utc) + self.ttl)
        return token

    async def consume(self, token: str) -> str | None:
        """Return the owning profile id and forget the token (single use)."""
        try:
            redis = await self.redis_factory()
            profile_id = await redis.getdel(f"{self.PREFIX}{token}")
            if profile_id:
                await redis.srem(f"{self.OWNER_PREFIX}{profile_id}", token)
            return profile_id
        except Exception:
            logger.debug("Redis unavailable for consume, using in-memory fallback")
        entry = self._tokens.pop(token, None)
        if entry is None:
            return None
        profile_id, expires_at = entry
        if expires_at < datetime.now(timezone.utc):
            return None
        return profile_id

    async def revoke_all(self, profile_id: str) -> int:
        try:
            redis = await self.redis_factory()
            owner_key = f"{self.OWNER_PREFIX}{profile_id}"
            tokens = await redis.smembers(owner_key)
            if tokens:
                await redis.delete(*[f"{self.PREFIX}{t}" for t in tokens])
            await redis.delete(owner_key)
            return len(tokens)
        except Exception:
            logger.debug("Redis unavailable for revoke_all, using in-memory fallback")
        to_remove = [k for k, (owner, _) in self._tokens.items() if owner == profile_id]
        for key in to_remove:
            self._tokens.pop(key, None)
        return len(to_remove)

    def clear(self) -> None:
        self._tokens.clear()


refresh_tokens = RefreshTokenStore()
