"""
Pydantic models for lesson discussion request validation.
"""

from typing import Optional
from pydantic import BaseModel


class CreatePostRequest(BaseModel):
    """Request body for a discussion post or reply."""
    # Length limits are enforced by DiscussionService (configurable)
    content: str
    parentId: Optional[str] = None
