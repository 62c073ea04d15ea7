"""
FastAPI router for progress endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from studyhub.dependencies import require_auth, get_progress_service
from studyhub.services.progress import ProgressService
from common.utils import success_response, NotFoundException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("")
async def list_progress(
    user: Annotated[dict, Depends(require_auth)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
):
    """Get all of the caller's progress records, most recent first."""
    records = await progress_service.get_user_progress(user["id"])
    return success_response({"progress": records})


@router.get("/{lesson_id}")
async def get_lesson_progress(
    lesson_id: str,
    user: Annotated[dict, Depends(require_auth)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
):
    """Get the caller's progress record for one lesson."""
    record = await progress_service.get_record(user["id"], lesson_id)
    if not record:
        raise NotFoundException(message="No progress for this lesson", code="PROGRESS_NOT_FOUND")
    return success_response({"progress": record})
