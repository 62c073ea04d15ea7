"""
StudyHub application settings.

Extends the base settings with StudyHub-specific configuration.
"""

from typing import Optional
from common.config import BaseAppSettings

from studyhub.services.progress.accrual import MilestoneWeights


class Settings(BaseAppSettings):
    """StudyHub-specific settings."""

    # ==========================================================================
    # Progress Weights (percent, must sum to 100)
    # ==========================================================================
    PROGRESS_CONTENT_WEIGHT: int = 30
    PROGRESS_VIDEO_WEIGHT: int = 30
    PROGRESS_QUIZ_WEIGHT: int = 40

    # ==========================================================================
    # AI Tutor
    # ==========================================================================
    # OpenAI-compatible chat-completion endpoint (or the hosted tutor function)
    TUTOR_CHAT_URL: str = "https://api.openai.com/v1/chat/completions"
    TUTOR_API_KEY: Optional[str] = None
    TUTOR_MODEL: Optional[str] = "gpt-4o-mini"
    TUTOR_TIMEOUT_SECONDS: float = 60.0
    TUTOR_MAX_TOKENS: int = 1024

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    QUIZ_TIME_LIMIT_MINUTES: int = 10

    # Seconds of silence before an SSE keepalive comment is sent
    STREAM_KEEPALIVE_SECONDS: float = 15.0

    # Discussion posts
    MAX_POST_LENGTH: int = 2000

    def milestone_weights(self) -> MilestoneWeights:
        """Build validated milestone weights from settings."""
        return MilestoneWeights(
            content=self.PROGRESS_CONTENT_WEIGHT,
            video=self.PROGRESS_VIDEO_WEIGHT,
            quiz=self.PROGRESS_QUIZ_WEIGHT,
        )

    def collect_errors(self) -> list:
        errors = super().collect_errors()

        try:
            self.milestone_weights()
        except ValueError as e:
            errors.append(str(e))

        if not self.TUTOR_API_KEY:
            errors.append("TUTOR_API_KEY is required for the AI tutor")

        return errors


# Global settings instance
settings = Settings()
