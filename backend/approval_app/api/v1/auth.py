"""Auth API endpoints."""
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.config import settings
from approval_app.dependencies import get_current_profile, get_db
from approval_app.integrations.recaptcha import RecaptchaError, RecaptchaVerifier, get_recaptcha_verifier
from approval_app.middleware.error_handler import AppException
from approval_app.models.profile import Profile
from approval_app.schemas.auth import LoginRequest, RefreshRequest, TokenResponse
from approval_app.schemas.common import APIResponse
from approval_app.schemas.profile import ProfileResponse
from approval_app.services import auth_service
from approval_app.services.auth_service import refresh_tokens
from approval_app.services.profile_service import is_admin_profile
from approval_app.utils.helpers import mask_email, utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


async def _issue_tokens(profile: Profile) -> TokenResponse:
    return TokenResponse(
        profile_id=str(profile.id),
        access_token=auth_service.create_access_token(str(profile.id), is_admin_profile(profile)),
        refresh_token=await refresh_tokens.issue(str(profile.id)),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def profile_payload(profile: Profile) -> dict:
    data = ProfileResponse.model_validate(profile)
    return data.model_copy(update={"is_admin": is_admin_profile(profile)}).model_dump()


@router.post("/login", response_model=APIResponse)
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    verifier: RecaptchaVerifier | None = Depends(get_recaptcha_verifier),
):
    if verifier is not None:
        try:
            await verifier.verify(body.recaptcha_token, request.client.host if request.client else None)
        except RecaptchaError as e:
            logger.info("Sign-in blocked by reCAPTCHA for %s", mask_email(body.email))
            raise AppException(status.HTTP_403_FORBIDDEN, e.detail, error_type="recaptcha_failed")

    profile = await auth_service.authenticate(db, body.email, body.password)
    if not profile:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    profile.last_login_at = utc_now()
    logger.info("Sign-in for %s", mask_email(profile.email))

    return APIResponse(status="success", data=(await _issue_tokens(profile)).model_dump())


@router.post("/refresh", response_model=APIResponse)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db)):
    profile_id = await refresh_tokens.consume(body.refresh_token)
    if not profile_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    profile = await db.get(Profile, uuid.UUID(profile_id))
    if not profile or not profile.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return APIResponse(status="success", data=(await _issue_tokens(profile)).model_dump())


@router.post("/logout", response_model=APIResponse)
async def logout(current_profile: Profile = Depends(get_current_profile)):
    # Invalidate all refresh tokens for this profile
    await refresh_tokens.revoke_all(str(current_profile.id))
    return APIResponse(status="success", message="Logged out successfully")


@router.get("/me", response_model=APIResponse)
async def me(current_profile: Profile = Depends(get_current_profile)):
    return APIResponse(status="success", data=profile_payload(current_profile))
