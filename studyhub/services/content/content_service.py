"""
Content service for subjects and lessons.

Reads the learning catalogue from MongoDB and falls back to the built-in
demo catalogue when the database is empty.
"""

import logging
from typing import Optional, List, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.database import id_filter, to_object_id
from studyhub.services.content.demo_content import (
    DEMO_LESSONS,
    DEMO_SUBJECTS,
    demo_lesson,
    is_demo_id,
)

logger = logging.getLogger(__name__)


def filter_lessons(
    lessons: List[Dict[str, Any]],
    search: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Filter lessons by a search term (title or tags) and difficulty.

    Args:
        lessons: Formatted lessons
        search: Case-insensitive substring of the title or any tag
        difficulty: Difficulty level, or None / "all" for any

    Returns:
        Matching lessons in their original order
    """
    term = (search or "").strip().lower()

    def matches(lesson: Dict[str, Any]) -> bool:
        if difficulty and difficulty != "all" and lesson.get("difficultyLevel") != difficulty:
            return False
        if not term:
            return True
        if term in (lesson.get("title") or "").lower():
            return True
        return any(term in tag.lower() for tag in lesson.get("tags") or [])

    return [lesson for lesson in lessons if matches(lesson)]


def filter_subjects(
    subjects: List[Dict[str, Any]],
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Filter subjects by a case-insensitive name or description match."""
    term = (search or "").strip().lower()
    if not term:
        return subjects
    return [
        s for s in subjects
        if term in (s.get("name") or "").lower()
        or term in (s.get("description") or "").lower()
    ]


class ContentService:
    """
    Handles subject and lesson retrieval.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize ContentService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._subjects_collection = db["subjects"]
        self._lessons_collection = db["lessons"]

    async def get_subjects(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Get all subjects ordered by orderIndex.

        Args:
            search: Optional name/description filter

        Returns:
            List of formatted subjects (demo subjects if none are stored)
        """
        cursor = self._subjects_collection.find({}).sort("orderIndex", 1)
        items = await cursor.to_list(length=200)

        if items:
            subjects = [self._format_subject(item) for item in items]
        else:
            logger.warning("No subjects stored, serving demo subjects")
            subjects = [dict(s) for s in DEMO_SUBJECTS]

        return filter_subjects(subjects, search)

    async def get_lessons(
        self,
        subject_id: Optional[str] = None,
        search: Optional[str] = None,
        difficulty: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get lessons ordered by orderIndex.

        Args:
            subject_id: Restrict to one subject
            search: Title/tag filter
            difficulty: Difficulty filter

        Returns:
            List of lesson summaries (without body content)
        """
        query: Dict[str, Any] = {}
        if subject_id:
            query["subjectId"] = subject_id

        cursor = self._lessons_collection.find(query, {"content": 0}).sort("orderIndex", 1)
        items = await cursor.to_list(length=500)

        if items:
            lessons = [self._format_lesson_summary(item) for item in items]
        elif subject_id in (None, "dsa"):
            logger.warning("No lessons stored, serving demo lessons")
            lessons = [{**lesson, "subjectId": "dsa", "videoCount": 0} for lesson in DEMO_LESSONS]
        else:
            lessons = []

        return filter_lessons(lessons, search, difficulty)

    async def get_lesson(self, lesson_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a single lesson with its content and videos.

        Args:
            lesson_id: Lesson ID (demo ids resolve to demo lessons)

        Returns:
            Formatted lesson or None if it doesn't exist
        """
        if is_demo_id(lesson_id):
            return demo_lesson(lesson_id)

        item = await self._lessons_collection.find_one(id_filter(lesson_id))
        if not item:
            return None

        return self._format_lesson(item)

    async def get_ordered_lesson_ids(self) -> List[Dict[str, Any]]:
        """Get id and title of every stored lesson, in course order."""
        cursor = self._lessons_collection.find({}, {"title": 1, "orderIndex": 1}).sort("orderIndex", 1)
        items = await cursor.to_list(length=500)
        return [{"id": str(item["_id"]), "title": item.get("title", "")} for item in items]

    async def get_lesson_summaries(self, lesson_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """
        Get lesson summaries for a set of ids.

        Returns:
            Dict mapping lesson id to summary
        """
        if not lesson_ids:
            return {}

        ids: List[Any] = []
        for lesson_id in lesson_ids:
            converted = to_object_id(lesson_id)
            ids.append(converted)
            if converted != lesson_id:
                ids.append(lesson_id)

        cursor = self._lessons_collection.find(
            {"_id": {"$in": ids}},
            {"title": 1, "difficultyLevel": 1, "subjectId": 1},
        )
        items = await cursor.to_list(length=len(ids))

        return {
            str(item["_id"]): {
                "id": str(item["_id"]),
                "title": item.get("title", ""),
                "difficultyLevel": item.get("difficultyLevel", "beginner"),
                "subjectId": item.get("subjectId"),
            }
            for item in items
        }

    def _format_subject(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Format subject document for response."""
        return {
            "id": str(item["_id"]),
            "name": item.get("name", ""),
            "description": item.get("description"),
            "icon": item.get("icon"),
            "color": item.get("color"),
            "orderIndex": item.get("orderIndex", 0),
        }

    def _format_lesson_summary(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Format lesson document for list responses."""
        return {
            "id": str(item["_id"]),
            "subjectId": item.get("subjectId"),
            "title": item.get("title", ""),
            "difficultyLevel": item.get("difficultyLevel", "beginner"),
            "tags": item.get("tags", []),
            "orderIndex": item.get("orderIndex", 0),
            "videoCount": len(item.get("videos") or []),
        }

    def _format_lesson(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Format lesson document with content and videos."""
        lesson = self._format_lesson_summary(item)
        lesson["content"] = item.get("content", "")
        lesson["videos"] = [
            {
                "id": str(video.get("id", index)),
                "title": video.get("title", ""),
                "url": video.get("url", ""),
            }
            for index, video in enumerate(item.get("videos") or [])
        ]
        lesson["isDemo"] = False
        return lesson
