"""
Change notifications over MongoDB change streams.

Yields one signal per matching change and nothing else; listeners re-run
their read path to get fresh data. Change streams need a replica set or
sharded cluster; on a standalone server opening the feed raises
OperationFailure.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)

WATCHED_OPERATIONS = ["insert", "update", "replace"]


@dataclass(frozen=True)
class ChangeSignal:
    """Something changed in a watched collection."""
    collection: str
    operation: str


class ChangeFeed:
    """
    Opens filtered change streams for SSE listeners.

    Keeps no subscription state; each call owns its own stream, closed
    when the consumer stops iterating.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db

    async def watch(
        self,
        collection_name: str,
        match: Dict[str, Any],
    ) -> AsyncIterator[ChangeSignal]:
        """
        Yield a signal for every change whose document matches.

        Args:
            collection_name: Collection to watch
            match: Equality filters on the changed document's fields
        """
        pipeline: List[Dict[str, Any]] = [
            {"$match": {
                "operationType": {"$in": WATCHED_OPERATIONS},
                **{f"fullDocument.{key}": value for key, value in match.items()},
            }},
        ]

        collection = self._db[collection_name]
        async with collection.watch(pipeline, full_document="updateLookup") as stream:
            logger.debug(f"Watching {collection_name} for {match}")
            async for change in stream:
                yield ChangeSignal(
                    collection=collection_name,
                    operation=change.get("operationType", ""),
                )

    def progress_changes(self, user_id: str) -> AsyncIterator[ChangeSignal]:
        """Signals for changes to one learner's progress records."""
        return self.watch("progress", {"userId": user_id})

    def discussion_changes(self, lesson_id: str) -> AsyncIterator[ChangeSignal]:
        """Signals for new or edited posts on one lesson."""
        return self.watch("discussionPosts", {"lessonId": lesson_id})
