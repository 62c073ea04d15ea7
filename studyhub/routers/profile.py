"""
FastAPI router for profile endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from studyhub.dependencies import require_auth, get_profile_service
from studyhub.schemas.profile import UpdateProfileRequest
from studyhub.services.profile import ProfileService
from common.utils import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
async def get_profile(
    user: Annotated[dict, Depends(require_auth)],
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Get the caller's profile."""
    profile = await profile_service.get_profile(user["id"], email=user.get("email"))
    return success_response({"profile": profile})


@router.put("")
async def update_profile(
    body: UpdateProfileRequest,
    user: Annotated[dict, Depends(require_auth)],
    profile_service: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Update the caller's username."""
    profile = await profile_service.update_username(
        user["id"],
        body.username,
        email=user.get("email"),
    )
    return success_response({"profile": profile}, message="Profile updated")
