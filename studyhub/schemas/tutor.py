"""
Pydantic models for AI tutor request validation.
"""

from typing import List, Dict
from pydantic import BaseModel, Field


class TutorMessage(BaseModel):
    """One conversation turn."""
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str


class TutorChatRequest(BaseModel):
    """Request body for a streamed tutor reply."""
    messages: List[TutorMessage] = Field(..., min_length=1)
    subject: str = "dsa"

    def to_provider_messages(self) -> List[Dict[str, str]]:
        return [{"role": m.role, "content": m.content} for m in self.messages]
