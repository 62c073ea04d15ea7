"""
Dashboard pipeline functions.

Stateless orchestration for building the learner dashboard.
"""

import logging
from typing import Dict, Any

from studyhub.services.content import ContentService
from studyhub.services.dashboard import calculate_dashboard_stats, find_next_lesson
from studyhub.services.progress import ProgressService

logger = logging.getLogger(__name__)


async def get_dashboard_pipeline(
    progress_service: ProgressService,
    content_service: ContentService,
    user_id: str,
) -> Dict[str, Any]:
    """
    Build dashboard data for a learner.

    Store failures propagate; an outage is never shown as an empty
    dashboard.

    Args:
        progress_service: Progress store
        content_service: For lesson titles and course order
        user_id: Current user's ID

    Returns:
        dict with stats, progress rows (joined with lesson summaries) and
        the next lesson to study
    """
    # 1. Progress rows, most recent first
    progress = await progress_service.get_user_progress(user_id)

    # 2. Join lesson summaries
    summaries = await content_service.get_lesson_summaries([row["lessonId"] for row in progress])
    rows = [{**row, "lesson": summaries.get(row["lessonId"])} for row in progress]

    # 3. Course order for picking the next lesson
    ordered_lessons = await content_service.get_ordered_lesson_ids()

    stats = calculate_dashboard_stats(rows)
    stats["nextLesson"] = find_next_lesson(rows, ordered_lessons)

    logger.debug(
        f"Dashboard for user {user_id}: {stats['completedLessons']} completed, "
        f"{len(stats['inProgress'])} in progress"
    )
    return stats
