"""FastAPI dependency injection utilities."""
import uuid as _uuid
from datetime import date

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.config import settings
from approval_app.database import get_db
from approval_app.models.profile import Profile
from approval_app.services.auth_service import decode_access_token
from approval_app.services.profile_service import Viewer
from approval_app.utils.helpers import local_today

security = HTTPBearer()

__all__ = ["get_db", "get_current_profile", "get_viewer", "require_admin", "viewer_today"]


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """Extract the current profile from the JWT access token."""
    try:
        payload = decode_access_token(credentials.credentials)
        profile_id = payload.get("sub")
        if profile_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        profile = await db.get(Profile, _uuid.UUID(profile_id))
        if not profile or not profile.is_active:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or inactive user")
        return profile
    except JWTError as e:
        detail = "Token expired" if "expired" in str(e).lower() else "Invalid token"
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


async def get_viewer(profile: Profile = Depends(get_current_profile)) -> Viewer:
    return Viewer.of(profile)


async def require_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if not viewer.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return viewer


def viewer_today(
    today: date | None = Query(None, description="Viewer's local date, YYYY-MM-DD"),
) -> date:
    """Start of the viewer's current day; falls back to the server timezone."""
    return today or local_today(settings.TIMEZONE)
