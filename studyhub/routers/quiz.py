"""
FastAPI router for lesson quiz endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from studyhub.config import Settings
from studyhub.dependencies import (
    require_auth,
    get_settings,
    get_quiz_service,
    get_content_service,
    get_progress_service,
    get_accrual_engine,
)
from studyhub.pipelines import quiz as quiz_pipeline
from studyhub.schemas.quiz import QuizSubmitRequest
from studyhub.services.content import ContentService
from studyhub.services.progress import ProgressAccrualEngine, ProgressService
from studyhub.services.quiz import QuizService
from common.utils import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lessons/{lesson_id}/quiz", tags=["quiz"])


@router.get("")
async def get_quiz(
    lesson_id: str,
    user: Annotated[dict, Depends(require_auth)],
    quiz_service: Annotated[QuizService, Depends(get_quiz_service)],
    app_settings: Annotated[Settings, Depends(get_settings)],
):
    """Get the lesson quiz without answers."""
    quiz = await quiz_pipeline.get_quiz_pipeline(
        quiz_service=quiz_service,
        lesson_id=lesson_id,
        time_limit_minutes=app_settings.QUIZ_TIME_LIMIT_MINUTES,
    )
    return success_response(quiz)


@router.post("/submit")
async def submit_quiz(
    lesson_id: str,
    body: QuizSubmitRequest,
    user: Annotated[dict, Depends(require_auth)],
    quiz_service: Annotated[QuizService, Depends(get_quiz_service)],
    engine: Annotated[ProgressAccrualEngine, Depends(get_accrual_engine)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
):
    """Score the submitted answers and record the result."""
    result = await quiz_pipeline.submit_quiz_pipeline(
        quiz_service=quiz_service,
        engine=engine,
        progress_service=progress_service,
        content_service=content_service,
        user_id=user["id"],
        lesson_id=lesson_id,
        answers=body.answers,
    )
    return success_response(result)
