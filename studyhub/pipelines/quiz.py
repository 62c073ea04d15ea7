"""
Quiz pipeline functions.

Stateless orchestration for fetching and submitting lesson quizzes.
"""

import logging
from datetime import datetime
from typing import Dict, Any, Optional

from common.utils.exceptions import NotFoundException
from studyhub.pipelines.progress import record_quiz_result_pipeline
from studyhub.services.content import ContentService, is_demo_id
from studyhub.services.progress import ProgressAccrualEngine, ProgressService
from studyhub.services.quiz import QuizService, public_question, score_answers

logger = logging.getLogger(__name__)


async def _require_questions(quiz_service: QuizService, lesson_id: str) -> list:
    questions = await quiz_service.get_questions(lesson_id)
    if not questions:
        raise NotFoundException(message="No quiz for this lesson", code="QUIZ_NOT_FOUND")
    return questions


async def get_quiz_pipeline(
    quiz_service: QuizService,
    lesson_id: str,
    time_limit_minutes: int,
) -> Dict[str, Any]:
    """
    Get a lesson's quiz without the answers.

    Args:
        quiz_service: For question lookup
        lesson_id: Lesson ID
        time_limit_minutes: Time allowed, reported to the client

    Returns:
        dict with lessonId, questions, timeLimitMinutes
    """
    questions = await _require_questions(quiz_service, lesson_id)

    return {
        "lessonId": lesson_id,
        "questions": [public_question(q) for q in questions],
        "timeLimitMinutes": time_limit_minutes,
        "isDemo": is_demo_id(lesson_id),
    }


async def submit_quiz_pipeline(
    quiz_service: QuizService,
    engine: ProgressAccrualEngine,
    progress_service: ProgressService,
    content_service: ContentService,
    user_id: str,
    lesson_id: str,
    answers: Dict[str, str],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Score a quiz submission and record it as lesson progress.

    Demo quizzes are scored but nothing is stored.

    Args:
        quiz_service: For question lookup
        engine: Accrual engine
        progress_service: Progress store
        content_service: For the lesson opened by a first submission
        user_id: Current user's ID
        lesson_id: Lesson ID
        answers: Dict mapping question id to chosen option label
        now: Submission time

    Returns:
        dict with correct, total, score, per-question results and progress
    """
    questions = await _require_questions(quiz_service, lesson_id)
    result = score_answers(questions, answers)

    logger.info(
        f"Quiz submitted by user {user_id} for lesson {lesson_id}: "
        f"{result.correct}/{result.total} ({result.score}%)"
    )

    progress = None
    if not is_demo_id(lesson_id):
        outcome = await record_quiz_result_pipeline(
            engine=engine,
            progress_service=progress_service,
            content_service=content_service,
            user_id=user_id,
            lesson_id=lesson_id,
            score=result.score,
            now=now,
        )
        progress = outcome["progress"]

    return {**result.to_dict(), "progress": progress}
