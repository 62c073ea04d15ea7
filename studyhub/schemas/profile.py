"""
Pydantic models for profile request validation.
"""

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    """Request body for updating the learner profile."""
    username: str = Field(..., max_length=100)
