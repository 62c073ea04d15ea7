"""
Progress pipeline functions.

Stateless orchestration for learning events: read the stored record and
the lesson, run the accrual engine, persist when something changed.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from common.utils.exceptions import NotFoundException, ValidationException
from studyhub.services.content import ContentService, is_demo_id
from studyhub.services.progress import (
    ProgressAccrualEngine,
    ProgressService,
    ProgressSnapshot,
    AccrualResult,
    ContentViewed,
    VideoWatched,
    QuizSubmitted,
)
from studyhub.services.progress.accrual import ProgressEvent

logger = logging.getLogger(__name__)


def _reject_demo(lesson_id: str) -> None:
    if is_demo_id(lesson_id):
        raise ValidationException(
            message="Progress is not tracked for demo lessons",
            code="DEMO_LESSON",
        )


async def _get_lesson(content_service: ContentService, lesson_id: str) -> Dict[str, Any]:
    lesson = await content_service.get_lesson(lesson_id)
    if not lesson:
        raise NotFoundException(message="Lesson not found", code="LESSON_NOT_FOUND")
    return lesson


def _apply(
    engine: ProgressAccrualEngine,
    current: Optional[Dict[str, Any]],
    event: ProgressEvent,
    now: datetime,
) -> AccrualResult:
    try:
        return engine.apply(ProgressSnapshot.from_record(current), event, now)
    except ValueError as e:
        raise ValidationException(message=str(e), code="INVALID_PROGRESS_EVENT")


def _response(record: Optional[Dict[str, Any]], result: AccrualResult) -> Dict[str, Any]:
    return {
        "progress": record,
        "changed": result.changed,
        "completedNow": result.completed_now,
    }


async def record_content_view_pipeline(
    engine: ProgressAccrualEngine,
    progress_service: ProgressService,
    content_service: ContentService,
    user_id: str,
    lesson_id: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Record that a learner opened a lesson's content.

    Args:
        engine: Accrual engine
        progress_service: Progress store
        content_service: For the lesson's video count
        user_id: Current user's ID
        lesson_id: Lesson ID
        now: Event time (defaults to current UTC time)

    Returns:
        dict with progress record, changed and completedNow flags
    """
    _reject_demo(lesson_id)
    now = now or datetime.now(timezone.utc)

    lesson = await _get_lesson(content_service, lesson_id)

    # A failed read raises here, before anything can be written
    current = await progress_service.get_record(user_id, lesson_id)

    result = _apply(engine, current, ContentViewed(total_videos=len(lesson["videos"])), now)

    record = current
    if result.changed:
        record = await progress_service.save_accrual(user_id, lesson_id, result, now=now)

    return _response(record, result)


async def record_video_watched_pipeline(
    engine: ProgressAccrualEngine,
    progress_service: ProgressService,
    content_service: ContentService,
    user_id: str,
    lesson_id: str,
    video_id: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Record that a learner finished one of a lesson's videos.

    Only distinct videos that belong to the lesson count towards the
    video share.

    Returns:
        dict with progress record, changed and completedNow flags
    """
    _reject_demo(lesson_id)
    now = now or datetime.now(timezone.utc)

    lesson = await _get_lesson(content_service, lesson_id)
    video_ids = {video["id"] for video in lesson["videos"]}

    if video_id not in video_ids:
        raise NotFoundException(message="Video not found in this lesson", code="VIDEO_NOT_FOUND")

    current = await progress_service.get_record(user_id, lesson_id)

    previously_watched = set(current["watchedVideoIds"]) & video_ids if current else set()
    watched = previously_watched | {video_id}

    event = VideoWatched(total_videos=len(video_ids), distinct_watched=len(watched))
    result = _apply(engine, current, event, now)

    record = current
    if result.changed or video_id not in previously_watched:
        record = await progress_service.save_accrual(
            user_id, lesson_id, result, watched_video_id=video_id, now=now
        )

    logger.debug(
        f"User {user_id} watched {len(watched)}/{len(video_ids)} videos of lesson {lesson_id}"
    )
    return _response(record, result)


async def record_quiz_result_pipeline(
    engine: ProgressAccrualEngine,
    progress_service: ProgressService,
    content_service: ContentService,
    user_id: str,
    lesson_id: str,
    score: int,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Record a quiz score for a lesson.

    The score always overwrites the previous one; the completion
    percentage never goes down. Taking the quiz before anything else
    also counts as opening the lesson's content.

    Returns:
        dict with progress record, changed and completedNow flags
    """
    _reject_demo(lesson_id)
    now = now or datetime.now(timezone.utc)

    current = await progress_service.get_record(user_id, lesson_id)

    snapshot = ProgressSnapshot.from_record(current)
    if current is None:
        lesson = await _get_lesson(content_service, lesson_id)
        opened = engine.apply(None, ContentViewed(total_videos=len(lesson["videos"])), now)
        snapshot = ProgressSnapshot(
            completion_percentage=opened.completion_percentage,
            completed_at=opened.completed_at,
        )

    try:
        result = engine.apply(snapshot, QuizSubmitted(score=score), now)
    except ValueError as e:
        raise ValidationException(message=str(e), code="INVALID_PROGRESS_EVENT")

    if current is None:
        result = replace(result, created=True)

    record = await progress_service.save_accrual(user_id, lesson_id, result, now=now)

    if result.completed_now:
        logger.info(f"User {user_id} completed lesson {lesson_id}")

    return _response(record, result)
