"""
Lesson discussion service.

Stores discussion posts (collection: discussionPosts), one document per
post. Replies reference their parent through parentId.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.database import to_object_id
from common.utils.exceptions import ValidationException
from studyhub.services.content.demo_content import is_demo_id

logger = logging.getLogger(__name__)

MAX_POST_LENGTH = 2000
ANONYMOUS = "Anonymous"


class DiscussionService:
    """Handles posting and listing lesson discussion posts."""

    def __init__(self, db: AsyncIOMotorDatabase, max_post_length: int = MAX_POST_LENGTH):
        self._db = db
        self._collection = db["discussionPosts"]
        self._profiles_collection = db["profiles"]
        self._max_post_length = max_post_length

    async def create_post(
        self,
        lesson_id: str,
        user_id: str,
        content: str,
        parent_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a post (or a reply when parent_id is given)."""
        if is_demo_id(lesson_id):
            raise ValidationException(
                message="Discussion is not available for demo lessons",
                code="DEMO_LESSON",
            )

        content = content.strip() if content else ""

        if not content:
            raise ValidationException(
                message="Post content cannot be empty",
                code="EMPTY_POST",
            )

        if len(content) > self._max_post_length:
            raise ValidationException(
                message=f"Post cannot exceed {self._max_post_length} characters",
                code="POST_TOO_LONG",
            )

        now = datetime.now(timezone.utc)
        post_doc = {
            "lessonId": lesson_id,
            "userId": user_id,
            "content": content,
            "parentId": parent_id,
            "createdAt": now,
        }

        result = await self._collection.insert_one(post_doc)
        post_doc["_id"] = result.inserted_id

        logger.info(f"Discussion post created on lesson {lesson_id} by user {user_id}")

        usernames = await self._get_usernames([user_id])
        return self._format_post(post_doc, usernames)

    async def get_posts(
        self,
        lesson_id: str,
        limit: int = 50,
    ) -> List[Dict[str, Any]]:
        """Get top-level posts for a lesson, newest first, with usernames."""
        if is_demo_id(lesson_id):
            return []

        cursor = self._collection.find(
            {"lessonId": lesson_id, "parentId": None}
        ).sort("createdAt", -1).limit(limit)
        items = await cursor.to_list(length=limit)

        usernames = await self._get_usernames(list({item.get("userId") for item in items}))
        return [self._format_post(item, usernames) for item in items]

    async def get_replies(self, post_id: str) -> List[Dict[str, Any]]:
        """Get replies to a post, oldest first."""
        cursor = self._collection.find(
            {"parentId": {"$in": [post_id, to_object_id(post_id)]}}
        ).sort("createdAt", 1)
        items = await cursor.to_list(length=200)

        usernames = await self._get_usernames(list({item.get("userId") for item in items}))
        return [self._format_post(item, usernames) for item in items]

    async def _get_usernames(self, user_ids: List[str]) -> Dict[str, str]:
        """Look up usernames for a set of user ids."""
        user_ids = [uid for uid in user_ids if uid]
        if not user_ids:
            return {}

        cursor = self._profiles_collection.find(
            {"userId": {"$in": user_ids}},
            {"userId": 1, "username": 1},
        )
        profiles = await cursor.to_list(length=len(user_ids))

        return {
            p["userId"]: p["username"]
            for p in profiles
            if p.get("username")
        }

    def _format_post(self, item: Dict[str, Any], usernames: Dict[str, str]) -> Dict[str, Any]:
        """Format post document for API response."""
        created_at = item.get("createdAt")
        if isinstance(created_at, datetime):
            created_at = created_at.isoformat()

        parent_id = item.get("parentId")

        return {
            "id": str(item["_id"]),
            "lessonId": item.get("lessonId"),
            "userId": item.get("userId"),
            "username": usernames.get(item.get("userId"), ANONYMOUS),
            "content": item.get("content", ""),
            "parentId": str(parent_id) if parent_id is not None else None,
            "createdAt": created_at,
        }
