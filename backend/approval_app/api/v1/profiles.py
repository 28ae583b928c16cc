"""Profiles API."""
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from approval_app.api.v1.auth import profile_payload
from approval_app.dependencies import get_db, get_viewer, require_admin
from approval_app.schemas.common import APIResponse
from approval_app.services import profile_service
from approval_app.services.profile_service import Viewer

router = APIRouter()


# GET /profiles - admin only, the clients content can be assigned to
@router.get("", response_model=APIResponse)
async def list_profiles(
    _admin: Viewer = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    profiles = await profile_service.list_assignable_profiles(db)
    return APIResponse(status="success", data=[profile_payload(p) for p in profiles])


# GET /profiles/{id} - self or admin
@router.get("/{profile_id}", response_model=APIResponse)
async def get_profile(
    profile_id: uuid.UUID,
    viewer: Viewer = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
):
    if not viewer.can_view_profile(profile_id):
        raise HTTPException(status_code=404, detail="Profile not found")
    profile = await profile_service.get_profile(db, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return APIResponse(status="success", data=profile_payload(profile))
