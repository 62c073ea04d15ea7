"""
FastAPI router for Dashboard endpoints.

Provides a consolidated dashboard view for the frontend, plus an event
stream that re-sends it whenever the learner's progress changes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pymongo.errors import PyMongoError

from studyhub.config import Settings
from studyhub.dependencies import (
    require_auth,
    get_settings,
    get_progress_service,
    get_content_service,
    get_change_feed,
)
from studyhub.pipelines.dashboard import get_dashboard_pipeline
from studyhub.services.content import ContentService
from studyhub.services.progress import ProgressService
from studyhub.services.realtime import ChangeFeed
from common.streaming import SSE_HEADERS, format_sse, with_keepalive
from common.utils import success_response, APIException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def get_dashboard(
    user: Annotated[dict, Depends(require_auth)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
):
    """
    Get dashboard data for the current user.

    Returns completed lessons, average quiz score, lessons in progress,
    recent activity and the suggested next lesson.
    """
    stats = await get_dashboard_pipeline(
        progress_service=progress_service,
        content_service=content_service,
        user_id=user["id"],
    )
    return success_response(stats)


@router.get("/stream")
async def stream_dashboard(
    user: Annotated[dict, Depends(require_auth)],
    progress_service: Annotated[ProgressService, Depends(get_progress_service)],
    content_service: Annotated[ContentService, Depends(get_content_service)],
    change_feed: Annotated[ChangeFeed, Depends(get_change_feed)],
    app_settings: Annotated[Settings, Depends(get_settings)],
):
    """Stream dashboard data, re-sent on every progress change."""
    user_id = user["id"]

    async def snapshot() -> str:
        stats = await get_dashboard_pipeline(
            progress_service=progress_service,
            content_service=content_service,
            user_id=user_id,
        )
        return format_sse({"type": "dashboard", "data": stats})

    async def generate():
        try:
            yield await snapshot()
            async for _ in change_feed.progress_changes(user_id):
                yield await snapshot()
        except (PyMongoError, APIException) as e:
            logger.warning(f"Dashboard stream for user {user_id} stopped: {e}")
            yield format_sse({"type": "error", "message": "Live updates unavailable"})

    return StreamingResponse(
        with_keepalive(generate(), interval=app_settings.STREAM_KEEPALIVE_SECONDS),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
