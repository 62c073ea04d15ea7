"""Tests for dashboard statistics and the dashboard pipeline."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from common.utils.exceptions import ServiceUnavailableException
from studyhub.pipelines.dashboard import get_dashboard_pipeline
from studyhub.services.dashboard import calculate_dashboard_stats, find_next_lesson


T0 = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)


def _row(lesson_id, pct, quiz_score=None, minutes=0):
    return {
        "lessonId": lesson_id,
        "completionPercentage": pct,
        "quizScore": quiz_score,
        "updatedAt": T0 + timedelta(minutes=minutes),
    }


ORDERED = [
    {"id": "l1", "title": "Arrays"},
    {"id": "l2", "title": "Stacks"},
    {"id": "l3", "title": "Queues"},
]


class TestCalculateDashboardStats:
    def test_empty_progress(self):
        stats = calculate_dashboard_stats([])

        assert stats == {
            "completedLessons": 0,
            "averageQuizScore": 0,
            "lessonsStarted": 0,
            "inProgress": [],
            "recentActivity": [],
        }

    def test_counts_and_average(self):
        progress = [
            _row("l1", 100, quiz_score=80, minutes=1),
            _row("l2", 100, quiz_score=85, minutes=2),
            _row("l3", 45, minutes=3),
        ]

        stats = calculate_dashboard_stats(progress)

        assert stats["completedLessons"] == 2
        assert stats["lessonsStarted"] == 3
        assert stats["averageQuizScore"] == 83  # 82.5 rounds up
        assert [row["lessonId"] for row in stats["inProgress"]] == ["l3"]

    def test_recent_activity_is_newest_first_and_capped(self):
        progress = [_row(f"l{i}", 30, minutes=i) for i in range(8)]
        progress.append({"lessonId": "undated", "completionPercentage": 30})

        stats = calculate_dashboard_stats(progress)

        assert [row["lessonId"] for row in stats["recentActivity"]] == ["l7", "l6", "l5", "l4", "l3"]


class TestFindNextLesson:
    def test_continues_most_recent_unfinished(self):
        progress = [
            _row("l1", 60, minutes=1),
            _row("l3", 30, minutes=5),
            _row("l2", 100, minutes=9),
        ]

        next_lesson = find_next_lesson(progress, ORDERED)

        assert next_lesson == {
            "lessonId": "l3",
            "title": "Queues",
            "completionPercentage": 30,
            "reason": "continue",
        }

    def test_starts_first_unstarted_lesson(self):
        progress = [_row("l1", 100)]

        next_lesson = find_next_lesson(progress, ORDERED)

        assert next_lesson["lessonId"] == "l2"
        assert next_lesson["reason"] == "start"

    def test_none_when_everything_finished(self):
        progress = [_row(lesson["id"], 100) for lesson in ORDERED]

        assert find_next_lesson(progress, ORDERED) is None


class TestGetDashboardPipeline:
    @pytest.mark.asyncio
    async def test_joins_lesson_summaries(self, sample_user_id):
        progress_service = MagicMock()
        progress_service.get_user_progress = AsyncMock(return_value=[_row("l1", 100, quiz_score=90)])
        content_service = MagicMock()
        content_service.get_lesson_summaries = AsyncMock(return_value={"l1": {"id": "l1", "title": "Arrays"}})
        content_service.get_ordered_lesson_ids = AsyncMock(return_value=ORDERED)

        dashboard = await get_dashboard_pipeline(progress_service, content_service, sample_user_id)

        content_service.get_lesson_summaries.assert_awaited_once_with(["l1"])
        assert dashboard["recentActivity"][0]["lesson"]["title"] == "Arrays"
        assert dashboard["averageQuizScore"] == 90
        assert dashboard["nextLesson"]["lessonId"] == "l2"

    @pytest.mark.asyncio
    async def test_store_outage_propagates(self, sample_user_id):
        progress_service = MagicMock()
        progress_service.get_user_progress = AsyncMock(
            side_effect=ServiceUnavailableException(code="PROGRESS_STORE_UNAVAILABLE")
        )
        content_service = MagicMock()

        with pytest.raises(ServiceUnavailableException):
            await get_dashboard_pipeline(progress_service, content_service, sample_user_id)
