"""
AI tutor service.

Builds the tutoring prompt for a subject and streams the model's reply
through an AIProvider.
"""

import logging
from typing import AsyncIterator, Optional, List, Dict

from common.ai import AIProvider
from common.utils.exceptions import ValidationException

logger = logging.getLogger(__name__)


TUTOR_SUBJECTS = [
    {"value": "dsa", "label": "Data Structures & Algorithms"},
    {"value": "math", "label": "Mathematics"},
    {"value": "physics", "label": "Physics"},
    {"value": "chemistry", "label": "Chemistry"},
    {"value": "programming", "label": "Programming"},
]

ALLOWED_ROLES = ("user", "assistant")

MAX_HISTORY_MESSAGES = 40
MAX_MESSAGE_LENGTH = 4000


def subject_label(subject: Optional[str]) -> str:
    """Display label for a subject value; unknown values are used as-is."""
    for item in TUTOR_SUBJECTS:
        if item["value"] == subject:
            return item["label"]
    return subject or TUTOR_SUBJECTS[0]["label"]


class TutorService:
    """
    Streams tutoring replies for a conversation.
    """

    SYSTEM_PROMPT = """You are a patient, encouraging tutor for {subject}.

Your teaching style:
- Explain concepts step by step, starting from what the student already knows
- Use small, concrete examples (code snippets for programming topics)
- Check understanding with a short follow-up question when useful
- Point out common mistakes and misconceptions
- Keep answers focused; prefer short paragraphs and lists

If a question is outside {subject}, answer briefly and steer back to the subject.
Never just hand over answers to graded quiz questions; guide the student to them."""

    def __init__(self, provider: AIProvider, max_tokens: int = 1024):
        """
        Initialize TutorService.

        Args:
            provider: Chat-completion provider
            max_tokens: Maximum reply tokens
        """
        self._provider = provider
        self._max_tokens = max_tokens

    def get_subjects(self) -> List[Dict[str, str]]:
        return [dict(item) for item in TUTOR_SUBJECTS]

    def build_system_prompt(self, subject: Optional[str]) -> str:
        return self.SYSTEM_PROMPT.format(subject=subject_label(subject))

    def validate_messages(self, messages: List[Dict[str, str]]) -> List[Dict[str, str]]:
        """
        Check a conversation before sending it to the model.

        Keeps the most recent MAX_HISTORY_MESSAGES turns.

        Raises:
            ValidationException: Empty conversation, bad role or oversize turn
        """
        if not messages:
            raise ValidationException(
                message="At least one message is required",
                code="EMPTY_CONVERSATION",
            )

        cleaned = []
        for message in messages[-MAX_HISTORY_MESSAGES:]:
            role = message.get("role")
            content = (message.get("content") or "").strip()

            if role not in ALLOWED_ROLES:
                raise ValidationException(
                    message=f"Invalid message role: {role}",
                    code="INVALID_ROLE",
                )
            if len(content) > MAX_MESSAGE_LENGTH:
                raise ValidationException(
                    message=f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters",
                    code="MESSAGE_TOO_LONG",
                )
            if content:
                cleaned.append({"role": role, "content": content})

        if not cleaned or cleaned[-1]["role"] != "user":
            raise ValidationException(
                message="Conversation must end with a user message",
                code="MISSING_USER_MESSAGE",
            )

        return cleaned

    async def stream_reply(
        self,
        messages: List[Dict[str, str]],
        subject: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """
        Stream the tutor's reply to a conversation.

        Args:
            messages: Validated conversation turns
            subject: Subject value from TUTOR_SUBJECTS

        Yields:
            Text fragments of the reply

        Raises:
            AIProviderError: The endpoint failed before or during the reply
        """
        label = subject_label(subject)
        logger.info(f"Tutor reply requested for {label} ({len(messages)} messages)")

        async for text in self._provider.stream_chat(
            messages=messages,
            system_prompt=self.build_system_prompt(subject),
            max_tokens=self._max_tokens,
            subject=label,
        ):
            yield text
