"""
Lesson progress persistence.

Stores one record per (userId, lessonId) in the `progress` collection.
Writes go through an upsert that uses $max on the completion percentage,
so concurrent sessions for the same learner can never lower it.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from common.utils.exceptions import ServiceUnavailableException
from studyhub.services.progress.accrual import AccrualResult

logger = logging.getLogger(__name__)

STORE_UNAVAILABLE = "PROGRESS_STORE_UNAVAILABLE"


def _store_unavailable() -> ServiceUnavailableException:
    return ServiceUnavailableException(
        message="Progress store is unavailable, try again shortly",
        code=STORE_UNAVAILABLE,
        retry_after=5,
    )


class ProgressService:
    """
    Reads and writes lesson progress records.

    Store failures surface as ServiceUnavailableException. A failed read
    is never treated as "no record", since that would reset progress.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize ProgressService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._collection = db["progress"]

    async def ensure_indexes(self) -> None:
        """Create the unique (userId, lessonId) index the upsert relies on."""
        await self._collection.create_index(
            [("userId", ASCENDING), ("lessonId", ASCENDING)],
            unique=True,
            name="user_lesson_unique",
        )
        await self._collection.create_index(
            [("userId", ASCENDING), ("updatedAt", DESCENDING)],
            name="user_recent",
        )

    async def get_record(self, user_id: str, lesson_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the progress record for one lesson.

        Args:
            user_id: User ID
            lesson_id: Lesson ID

        Returns:
            Formatted record, or None if the learner has none

        Raises:
            ServiceUnavailableException: The store could not be read
        """
        try:
            record = await self._collection.find_one({"userId": user_id, "lessonId": lesson_id})
        except PyMongoError as e:
            logger.error(f"Progress read failed for user {user_id}, lesson {lesson_id}: {e}")
            raise _store_unavailable()

        return self._format_record(record) if record else None

    async def get_user_progress(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Get all progress records for a user, most recently updated first.

        Args:
            user_id: User ID

        Returns:
            List of formatted records
        """
        try:
            cursor = self._collection.find({"userId": user_id}).sort("updatedAt", -1)
            items = await cursor.to_list(length=1000)
        except PyMongoError as e:
            logger.error(f"Progress list failed for user {user_id}: {e}")
            raise _store_unavailable()

        return [self._format_record(item) for item in items]

    async def get_progress_map(self, user_id: str) -> Dict[str, int]:
        """
        Get completion percentage per lesson.

        Returns:
            Dict mapping lessonId to completionPercentage
        """
        records = await self.get_user_progress(user_id)
        return {r["lessonId"]: r["completionPercentage"] for r in records}

    async def get_in_progress(self, user_id: str) -> List[Dict[str, Any]]:
        """Get started but unfinished lessons, most recently updated first."""
        try:
            cursor = self._collection.find({
                "userId": user_id,
                "completionPercentage": {"$lt": 100},
            }).sort("updatedAt", -1)
            items = await cursor.to_list(length=100)
        except PyMongoError as e:
            logger.error(f"In-progress lookup failed for user {user_id}: {e}")
            raise _store_unavailable()

        return [self._format_record(item) for item in items]

    async def save_accrual(
        self,
        user_id: str,
        lesson_id: str,
        result: AccrualResult,
        watched_video_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Persist an accrual result.

        Args:
            user_id: User ID
            lesson_id: Lesson ID
            result: Values proposed by the accrual engine
            watched_video_id: Video to add to the watched set
            now: Update timestamp (defaults to current UTC time)

        Returns:
            The record as stored after the update
        """
        now = now or datetime.now(timezone.utc)

        update: Dict[str, Any] = {
            "$max": {"completionPercentage": result.completion_percentage},
            "$set": {"updatedAt": now},
            "$setOnInsert": {
                "userId": user_id,
                "lessonId": lesson_id,
                "createdAt": now,
            },
        }

        if result.quiz_score is not None:
            update["$set"]["quizScore"] = result.quiz_score

        # Earliest completion wins if two sessions finish together
        if result.completed_at is not None:
            update["$min"] = {"completedAt": result.completed_at}

        if watched_video_id is not None:
            update["$addToSet"] = {"watchedVideoIds": watched_video_id}

        try:
            record = await self._collection.find_one_and_update(
                {"userId": user_id, "lessonId": lesson_id},
                update,
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Progress write failed for user {user_id}, lesson {lesson_id}: {e}")
            raise _store_unavailable()

        logger.info(
            f"Progress saved for user {user_id}, lesson {lesson_id}: "
            f"{record.get('completionPercentage')}%"
        )
        return self._format_record(record)

    def _format_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Format progress document for response."""
        return {
            "id": str(record["_id"]),
            "userId": record.get("userId"),
            "lessonId": record.get("lessonId"),
            "completionPercentage": record.get("completionPercentage", 0),
            "quizScore": record.get("quizScore"),
            "watchedVideoIds": list(record.get("watchedVideoIds") or []),
            "completedAt": record.get("completedAt"),
            "createdAt": record.get("createdAt"),
            "updatedAt": record.get("updatedAt"),
        }
