"""
FastAPI router for lesson discussion endpoints.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from pymongo.errors import PyMongoError

from studyhub.config import Settings
from studyhub.dependencies import (
    require_auth,
    get_settings,
    get_discussion_service,
    get_change_feed,
)
from studyhub.schemas.discussion import CreatePostRequest
from studyhub.services.discussion import DiscussionService
from studyhub.services.realtime import ChangeFeed
from common.streaming import SSE_HEADERS, format_sse, with_keepalive
from common.utils import success_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["discussions"])


@router.get("/lessons/{lesson_id}/discussion")
async def list_posts(
    lesson_id: str,
    discussion_service: Annotated[DiscussionService, Depends(get_discussion_service)],
    limit: int = Query(50, ge=1, le=100),
):
    """Get a lesson's top-level posts, newest first."""
    posts = await discussion_service.get_posts(lesson_id, limit=limit)
    return success_response({"posts": posts})


@router.post("/lessons/{lesson_id}/discussion")
async def create_post(
    lesson_id: str,
    body: CreatePostRequest,
    user: Annotated[dict, Depends(require_auth)],
    discussion_service: Annotated[DiscussionService, Depends(get_discussion_service)],
):
    """Post to a lesson's discussion."""
    post = await discussion_service.create_post(
        lesson_id=lesson_id,
        user_id=user["id"],
        content=body.content,
        parent_id=body.parentId,
    )
    return success_response({"post": post})


@router.get("/discussion/posts/{post_id}/replies")
async def list_replies(
    post_id: str,
    discussion_service: Annotated[DiscussionService, Depends(get_discussion_service)],
):
    """Get replies to a post, oldest first."""
    replies = await discussion_service.get_replies(post_id)
    return success_response({"replies": replies})


@router.get("/lessons/{lesson_id}/discussion/stream")
async def stream_posts(
    lesson_id: str,
    discussion_service: Annotated[DiscussionService, Depends(get_discussion_service)],
    change_feed: Annotated[ChangeFeed, Depends(get_change_feed)],
    app_settings: Annotated[Settings, Depends(get_settings)],
):
    """Stream a lesson's posts, re-sent whenever a post is added."""

    async def snapshot() -> str:
        posts = await discussion_service.get_posts(lesson_id)
        return format_sse({"type": "posts", "data": posts})

    async def generate():
        try:
            yield await snapshot()
            async for _ in change_feed.discussion_changes(lesson_id):
                yield await snapshot()
        except PyMongoError as e:
            logger.warning(f"Discussion stream for lesson {lesson_id} stopped: {e}")
            yield format_sse({"type": "error", "message": "Live updates unavailable"})

    return StreamingResponse(
        with_keepalive(generate(), interval=app_settings.STREAM_KEEPALIVE_SECONDS),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
