"""
Profile service.

Learners sign in through the hosted identity provider; the profile
document only holds the display name shown next to discussion posts.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from common.utils.exceptions import ValidationException

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30

_USERNAME_PATTERN = re.compile(r"^[\w.\- ]+$")


class ProfileService:
    """
    Manages learner profiles.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize ProfileService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._collection = db["profiles"]

    async def get_profile(self, user_id: str, email: Optional[str] = None) -> Dict[str, Any]:
        """
        Get a learner's profile.

        Falls back to the token email, with its local part as username,
        when no profile has been saved yet.

        Args:
            user_id: User ID (token subject)
            email: Email from the access token

        Returns:
            dict with userId, username, email, updatedAt
        """
        profile = await self._collection.find_one({"userId": user_id})

        if not profile:
            return {
                "userId": user_id,
                "username": email.split("@")[0] if email else None,
                "email": email,
                "updatedAt": None,
            }

        return self._format_profile(profile, email)

    async def update_username(
        self,
        user_id: str,
        username: str,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Set the learner's username.

        Args:
            user_id: User ID
            username: New username
            email: Email from the access token, stored on first save

        Returns:
            Updated profile

        Raises:
            ValidationException: Username length or characters invalid
        """
        username = self.validate_username(username)
        now = datetime.now(timezone.utc)

        update: Dict[str, Any] = {
            "$set": {"username": username, "updatedAt": now},
            "$setOnInsert": {"userId": user_id, "createdAt": now},
        }
        if email:
            update["$set"]["email"] = email

        profile = await self._collection.find_one_and_update(
            {"userId": user_id},
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

        logger.info(f"Profile updated for user {user_id}")
        return self._format_profile(profile, email)

    def validate_username(self, username: Optional[str]) -> str:
        """
        Validate a username.

        Returns:
            The trimmed username

        Raises:
            ValidationException: If invalid, with reason
        """
        username = (username or "").strip()

        if len(username) < USERNAME_MIN_LENGTH:
            raise ValidationException(
                message=f"Username must be at least {USERNAME_MIN_LENGTH} characters",
                code="USERNAME_TOO_SHORT",
            )

        if len(username) > USERNAME_MAX_LENGTH:
            raise ValidationException(
                message=f"Username cannot exceed {USERNAME_MAX_LENGTH} characters",
                code="USERNAME_TOO_LONG",
            )

        if not _USERNAME_PATTERN.match(username):
            raise ValidationException(
                message="Username may only contain letters, digits, spaces, '.', '-' and '_'",
                code="INVALID_USERNAME",
            )

        return username

    def _format_profile(self, profile: Dict[str, Any], email: Optional[str]) -> Dict[str, Any]:
        return {
            "userId": profile.get("userId"),
            "username": profile.get("username"),
            "email": profile.get("email") or email,
            "updatedAt": profile.get("updatedAt"),
        }
