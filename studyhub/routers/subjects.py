"""
FastAPI router for subject endpoints.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from studyhub.dependencies import get_content_service
from studyhub.services.content import ContentService
from common.utils import success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("")
async def list_subjects(
    content_service: Annotated[ContentService, Depends(get_content_service)],
    search: Optional[str] = Query(None, max_length=100),
):
    """List subjects in display order."""
    subjects = await content_service.get_subjects(search=search)
    return success_response({"subjects": subjects})
