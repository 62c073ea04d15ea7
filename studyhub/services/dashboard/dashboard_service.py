"""
Dashboard statistics.

Pure functions over a learner's progress rows; the fetch sequence lives
in studyhub.pipelines.dashboard.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from studyhub.services.progress.accrual import MAX_PERCENTAGE, round_half_up

RECENT_ACTIVITY_LIMIT = 5

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _by_recency(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda row: row.get("updatedAt") or _EPOCH, reverse=True)


def calculate_dashboard_stats(progress: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Summarize progress rows for the dashboard.

    Args:
        progress: Progress records, optionally joined with a "lesson" summary

    Returns:
        dict with completedLessons, averageQuizScore, lessonsStarted,
        inProgress and recentActivity
    """
    ordered = _by_recency(progress)

    completed = [row for row in ordered if row.get("completionPercentage", 0) >= MAX_PERCENTAGE]
    in_progress = [row for row in ordered if row.get("completionPercentage", 0) < MAX_PERCENTAGE]

    scores = [row["quizScore"] for row in ordered if row.get("quizScore") is not None]
    average = round_half_up(sum(scores), len(scores)) if scores else 0

    return {
        "completedLessons": len(completed),
        "averageQuizScore": average,
        "lessonsStarted": len(ordered),
        "inProgress": in_progress,
        "recentActivity": ordered[:RECENT_ACTIVITY_LIMIT],
    }


def find_next_lesson(
    progress: List[Dict[str, Any]],
    ordered_lessons: List[Dict[str, Any]],
) -> Optional[Dict[str, Any]]:
    """
    Pick the lesson a learner should continue with.

    The most recently touched unfinished lesson wins; otherwise the first
    lesson in course order the learner has not started.

    Args:
        progress: The learner's progress records
        ordered_lessons: Lessons ({id, title}) in course order

    Returns:
        dict with lessonId, title and reason ("continue" or "start"), or
        None when everything is finished
    """
    titles = {lesson["id"]: lesson.get("title", "") for lesson in ordered_lessons}

    for row in _by_recency(progress):
        if row.get("completionPercentage", 0) < MAX_PERCENTAGE:
            lesson_id = row["lessonId"]
            return {
                "lessonId": lesson_id,
                "title": titles.get(lesson_id, ""),
                "completionPercentage": row.get("completionPercentage", 0),
                "reason": "continue",
            }

    started = {row["lessonId"] for row in progress}
    for lesson in ordered_lessons:
        if lesson["id"] not in started:
            return {
                "lessonId": lesson["id"],
                "title": lesson.get("title", ""),
                "completionPercentage": 0,
                "reason": "start",
            }

    return None
