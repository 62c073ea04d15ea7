"""Progress services."""

from studyhub.services.progress.accrual import (
    ProgressAccrualEngine,
    MilestoneWeights,
    ProgressSnapshot,
    AccrualResult,
    ContentViewed,
    VideoWatched,
    QuizSubmitted,
    round_half_up,
)
from studyhub.services.progress.progress_service import ProgressService

__all__ = [
    "ProgressAccrualEngine",
    "MilestoneWeights",
    "ProgressSnapshot",
    "AccrualResult",
    "ContentViewed",
    "VideoWatched",
    "QuizSubmitted",
    "round_half_up",
    "ProgressService",
]
