"""
FastAPI router for AI tutor endpoints.

Replies are streamed as server-sent events:
    data: {"type": "delta", "content": "..."}   one per text fragment
    data: {"type": "error", "message": "..."}   the model call failed
    data: [DONE]                                reply complete
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from studyhub.config import Settings
from studyhub.dependencies import require_auth, get_settings, get_tutor_service
from studyhub.schemas.tutor import TutorChatRequest
from studyhub.services.tutor import TutorService
from common.ai import AIProviderError
from common.streaming import DONE_RECORD, SSE_HEADERS, format_sse, with_keepalive
from common.utils import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tutor", tags=["tutor"])


@router.get("/subjects")
async def list_tutor_subjects(
    tutor_service: Annotated[TutorService, Depends(get_tutor_service)],
):
    """List subjects the tutor can help with."""
    return success_response({"subjects": tutor_service.get_subjects()})


@router.post("/chat")
async def tutor_chat(
    body: TutorChatRequest,
    user: Annotated[dict, Depends(require_auth)],
    tutor_service: Annotated[TutorService, Depends(get_tutor_service)],
    app_settings: Annotated[Settings, Depends(get_settings)],
):
    """Send a conversation and get a streaming tutor reply."""
    # Validation errors are raised here, before the stream starts
    messages = tutor_service.validate_messages(body.to_provider_messages())

    async def generate():
        delta_count = 0
        try:
            async for text in tutor_service.stream_reply(messages, body.subject):
                delta_count += 1
                yield format_sse({"type": "delta", "content": text})
        except AIProviderError as e:
            # The partial reply is dropped; the client shows the error instead
            logger.warning(
                f"Tutor stream failed for user {user['id']} after {delta_count} deltas: {e}"
            )
            yield format_sse({
                "type": "error",
                "message": str(e),
                "status": e.status_code,
            })
            return

        yield DONE_RECORD

    return StreamingResponse(
        with_keepalive(generate(), interval=app_settings.STREAM_KEEPALIVE_SECONDS),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
