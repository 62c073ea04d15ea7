"""
FastAPI router for lesson endpoints.

Browsing works for anonymous visitors; recording progress requires a
signed-in learner.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from studyhub.dependencies import (
    require_auth,
    optional_auth,
    get_content_service,
    get_progress_service,
    get_accrual_engine,
)
from studyhub.pipelines import progress as progress_pipeline
from studyhub.services.content import ContentService, is_demo_id
from studyhub.services.content.demo_content import DEMO_PROGRESS
from studyhub.services.progress import ProgressAccrualEngine, ProgressService
from common.utils import success_response, NotFoundException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons", tags=["lessons"])


@router.get("")
async def list_lessons(
    content_service: Annotated[ContentService, Depends(get_content_service)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
    user: Annotated[Optional[dict], Depends(optional_auth)],
    subjectId: Optional[str] = None,
    search: Optional[str] = Query(None, max_length=100),
    difficulty: Optional[str] = Query(None, pattern="^(all|beginner|intermediate|advanced)$"),
):
    """List lessons with the caller's completion percentage for each."""
    lessons = await content_service.get_lessons(
        subject_id=subjectId,
        search=search,
        difficulty=difficulty,
    )

    progress_map = {}
    if user:
        progress_map = await progress_service.get_progress_map(user["id"])

    for lesson in lessons:
        if is_demo_id(lesson["id"]):
            lesson["progress"] = DEMO_PROGRESS.get(lesson["id"], 0)
        else:
            lesson["progress"] = progress_map.get(lesson["id"], 0)

    return success_response({"lessons": lessons})


@router.get("/{lesson_id}")
async def get_lesson(
    lesson_id: str,
    content_service: Annotated[ContentService, Depends(get_content_service)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
    user: Annotated[Optional[dict], Depends(optional_auth)],
):
    """Get a lesson with its content, videos and the caller's progress."""
    lesson = await content_service.get_lesson(lesson_id)
    if not lesson:
        raise NotFoundException(message="Lesson not found", code="LESSON_NOT_FOUND")

    progress = None
    if user and not is_demo_id(lesson_id):
        progress = await progress_service.get_record(user["id"], lesson_id)

    return success_response({"lesson": lesson, "progress": progress})


@router.post("/{lesson_id}/view")
async def record_view(
    lesson_id: str,
    user: Annotated[dict, Depends(require_auth)],
    engine: Annotated[ProgressAccrualEngine, Depends(get_accrual_engine)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
):
    """Record that the learner opened the lesson content."""
    result = await progress_pipeline.record_content_view_pipeline(
        engine=engine,
        progress_service=progress_service,
        content_service=content_service,
        user_id=user["id"],
        lesson_id=lesson_id,
    )
    return success_response(result)


@router.post("/{lesson_id}/videos/{video_id}/watched")
async def record_video_watched(
    lesson_id: str,
    video_id: str,
    user: Annotated[dict, Depends(require_auth)],
    engine: Annotated[ProgressAccrualEngine, Depends(get_accrual_engine)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
):
    """Record that the learner finished watching a video."""
    result = await progress_pipeline.record_video_watched_pipeline(
        engine=engine,
        progress_service=progress_service,
        content_service=content_service,
        user_id=user["id"],
        lesson_id=lesson_id,
        video_id=video_id,
    )
    return success_response(result)
