"""
Pydantic models for quiz request validation.
"""

from typing import Dict
from pydantic import BaseModel, Field


class QuizSubmitRequest(BaseModel):
    """Request body for submitting quiz answers."""
    # Maps question id to the chosen option label ("A", "B", ...)
    answers: Dict[str, str] = Field(default_factory=dict)
