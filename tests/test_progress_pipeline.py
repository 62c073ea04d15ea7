"""Tests for progress pipelines (services mocked, real accrual engine)."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from common.utils.exceptions import (
    NotFoundException,
    ServiceUnavailableException,
    ValidationException,
)
from studyhub.pipelines.progress import (
    record_content_view_pipeline,
    record_video_watched_pipeline,
    record_quiz_result_pipeline,
)


@pytest.fixture
def progress_service():
    service = MagicMock()
    service.get_record = AsyncMock(return_value=None)
    # Echo back something record-shaped built from the saved result
    service.save_accrual = AsyncMock(
        side_effect=lambda user_id, lesson_id, result, watched_video_id=None, now=None: {
            "lessonId": lesson_id,
            "completionPercentage": result.completion_percentage,
            "quizScore": result.quiz_score,
            "completedAt": result.completed_at,
        }
    )
    return service


@pytest.fixture
def content_service(sample_lesson):
    service = MagicMock()
    service.get_lesson = AsyncMock(return_value=sample_lesson)
    return service


def _record(lesson_id, pct, quiz_score=None, watched=None, completed_at=None):
    return {
        "id": "p1",
        "lessonId": lesson_id,
        "completionPercentage": pct,
        "quizScore": quiz_score,
        "watchedVideoIds": watched or [],
        "completedAt": completed_at,
    }


# ─────────────────────────────────────────────────────────────────
# record_content_view_pipeline
# ─────────────────────────────────────────────────────────────────


class TestRecordContentView:
    @pytest.mark.asyncio
    async def test_first_view_creates_record(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id, now,
    ):
        result = await record_content_view_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, now=now,
        )

        assert result["progress"]["completionPercentage"] == 30
        assert result["changed"] is True
        progress_service.save_accrual.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repeat_view_does_not_write(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        existing = _record(sample_lesson_id, 60)
        progress_service.get_record.return_value = existing

        result = await record_content_view_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id,
        )

        assert result["progress"] is existing
        assert result["changed"] is False
        progress_service.save_accrual.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_read_error_writes_nothing(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        progress_service.get_record.side_effect = ServiceUnavailableException(code="PROGRESS_STORE_UNAVAILABLE")

        with pytest.raises(ServiceUnavailableException):
            await record_content_view_pipeline(
                engine, progress_service, content_service, sample_user_id, sample_lesson_id,
            )

        progress_service.save_accrual.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_demo_lesson_rejected(self, engine, progress_service, content_service, sample_user_id):
        with pytest.raises(ValidationException):
            await record_content_view_pipeline(
                engine, progress_service, content_service, sample_user_id, "demo-2",
            )

        content_service.get_lesson.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_lesson_is_404(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        content_service.get_lesson.return_value = None

        with pytest.raises(NotFoundException):
            await record_content_view_pipeline(
                engine, progress_service, content_service, sample_user_id, sample_lesson_id,
            )


# ─────────────────────────────────────────────────────────────────
# record_video_watched_pipeline
# ─────────────────────────────────────────────────────────────────


class TestRecordVideoWatched:
    @pytest.mark.asyncio
    async def test_counts_distinct_lesson_videos(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        progress_service.get_record.return_value = _record(sample_lesson_id, 40, watched=["v1", "stale"])

        result = await record_video_watched_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, "v2",
        )

        # 2 of 3 videos: 30 + round(20) = 50
        assert result["progress"]["completionPercentage"] == 50
        assert progress_service.save_accrual.call_args.kwargs["watched_video_id"] == "v2"

    @pytest.mark.asyncio
    async def test_new_video_is_recorded_even_without_percentage_change(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        progress_service.get_record.return_value = _record(sample_lesson_id, 100, quiz_score=90, watched=["v1"])

        result = await record_video_watched_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, "v3",
        )

        assert result["changed"] is False
        progress_service.save_accrual.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rewatch_writes_nothing(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        progress_service.get_record.return_value = _record(sample_lesson_id, 40, watched=["v1"])

        await record_video_watched_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, "v1",
        )

        progress_service.save_accrual.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_video_is_404(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        with pytest.raises(NotFoundException):
            await record_video_watched_pipeline(
                engine, progress_service, content_service, sample_user_id, sample_lesson_id, "v9",
            )

        progress_service.get_record.assert_not_awaited()


# ─────────────────────────────────────────────────────────────────
# record_quiz_result_pipeline
# ─────────────────────────────────────────────────────────────────


class TestRecordQuizResult:
    @pytest.mark.asyncio
    async def test_completes_lesson(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id, now,
    ):
        progress_service.get_record.return_value = _record(sample_lesson_id, 60)

        result = await record_quiz_result_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, 80,
            now=now,
        )

        assert result["completedNow"] is True
        assert result["progress"]["completionPercentage"] == 100
        assert result["progress"]["quizScore"] == 80
        assert result["progress"]["completedAt"] == now

    @pytest.mark.asyncio
    async def test_invalid_score_is_validation_error(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        with pytest.raises(ValidationException) as exc_info:
            await record_quiz_result_pipeline(
                engine, progress_service, content_service, sample_user_id, sample_lesson_id, 120,
            )

        assert exc_info.value.code == "INVALID_PROGRESS_EVENT"
        progress_service.save_accrual.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_record_does_not_load_lesson(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id, now,
    ):
        progress_service.get_record.return_value = _record(sample_lesson_id, 30)

        result = await record_quiz_result_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, 50,
            now=now,
        )

        content_service.get_lesson.assert_not_awaited()
        assert result["progress"]["completionPercentage"] == 70

    @pytest.mark.asyncio
    async def test_quiz_first_on_lesson_without_videos_completes(
        self, engine, progress_service, content_service, sample_lesson,
        sample_user_id, sample_lesson_id, now,
    ):
        content_service.get_lesson.return_value = {**sample_lesson, "videos": []}

        result = await record_quiz_result_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, 90,
            now=now,
        )

        assert result["completedNow"] is True
        assert result["progress"]["completionPercentage"] == 100
        assert result["progress"]["completedAt"] == now
        progress_service.save_accrual.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_quiz_first_on_lesson_with_videos_counts_content(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id, now,
    ):
        result = await record_quiz_result_pipeline(
            engine, progress_service, content_service, sample_user_id, sample_lesson_id, 90,
            now=now,
        )

        assert result["completedNow"] is False
        assert result["progress"]["completionPercentage"] == 70
        assert result["progress"]["quizScore"] == 90
        saved = progress_service.save_accrual.call_args[0][2]
        assert saved.created is True

    @pytest.mark.asyncio
    async def test_quiz_first_on_missing_lesson_is_404(
        self, engine, progress_service, content_service, sample_user_id, sample_lesson_id,
    ):
        content_service.get_lesson.return_value = None

        with pytest.raises(NotFoundException) as exc_info:
            await record_quiz_result_pipeline(
                engine, progress_service, content_service, sample_user_id, sample_lesson_id, 90,
            )

        assert exc_info.value.code == "LESSON_NOT_FOUND"
        progress_service.save_accrual.assert_not_awaited()
