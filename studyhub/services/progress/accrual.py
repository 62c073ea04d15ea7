"""
Progress accrual engine.

Computes lesson completion percentages from learning events. A lesson's
100% is split between three milestones: reading the content, watching
its videos, and completing its quiz. The engine is pure arithmetic: it
takes the stored record (or None) and an event, and proposes the new
values. Persisting them is the caller's job.

Rules:
- ContentViewed creates the record with the content share; repeat views
  change nothing.
- VideoWatched grants a share of the video weight proportional to the
  distinct videos watched, on top of the content share (and the quiz
  share once a quiz has been submitted).
- QuizSubmitted always overwrites the score and grants the full quiz
  share on top of the non-quiz progress already earned.
- The percentage never decreases and never leaves [0, 100].
- completedAt is set only on the transition from below 100 to 100.

Example:
    engine = ProgressAccrualEngine(MilestoneWeights(content=30, video=30, quiz=40))
    result = engine.apply(None, ContentViewed(), now)
    result.completion_percentage  # 30
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

MAX_PERCENTAGE = 100


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half up (for non-negative operands)."""
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return (2 * numerator + denominator) // (2 * denominator)


@dataclass(frozen=True)
class MilestoneWeights:
    """Percentage share of each milestone. Shares sum to 100."""
    content: int = 30
    video: int = 30
    quiz: int = 40

    def __post_init__(self):
        for name in ("content", "video", "quiz"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} weight must be a non-negative integer, got {value!r}")
        total = self.content + self.video + self.quiz
        if total != MAX_PERCENTAGE:
            raise ValueError(f"Milestone weights must sum to 100, got {total}")

    @property
    def non_quiz(self) -> int:
        return self.content + self.video


# ─────────────────────────────────────────────────────────────────
# Events
# ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContentViewed:
    """
    The learner opened the lesson content.

    total_videos is optional; when the lesson is known to have no videos
    the video milestone is granted along with the content.
    """
    total_videos: Optional[int] = None


@dataclass(frozen=True)
class VideoWatched:
    """The learner finished a video; counts are per lesson."""
    total_videos: int
    distinct_watched: int


@dataclass(frozen=True)
class QuizSubmitted:
    """The learner submitted the lesson quiz."""
    score: int


ProgressEvent = Union[ContentViewed, VideoWatched, QuizSubmitted]


# ─────────────────────────────────────────────────────────────────
# Snapshots and results
# ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProgressSnapshot:
    """The fields of a stored progress record the engine depends on."""
    completion_percentage: int
    quiz_score: Optional[int] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Optional[dict]) -> Optional["ProgressSnapshot"]:
        """Build a snapshot from a formatted progress record."""
        if record is None:
            return None
        return cls(
            completion_percentage=int(record.get("completionPercentage") or 0),
            quiz_score=record.get("quizScore"),
            completed_at=record.get("completedAt"),
        )


@dataclass(frozen=True)
class AccrualResult:
    """Proposed record values after an event."""
    completion_percentage: int
    quiz_score: Optional[int]
    completed_at: Optional[datetime]
    created: bool  # No record existed before this event
    changed: bool  # Something needs to be written
    completed_now: bool  # This event took the lesson to 100%


class ProgressAccrualEngine:
    """
    Applies learning events to progress snapshots.

    Holds nothing but the milestone weights; every call is independent.
    """

    def __init__(self, weights: Optional[MilestoneWeights] = None):
        self._weights = weights or MilestoneWeights()

    @property
    def weights(self) -> MilestoneWeights:
        return self._weights

    def apply(
        self,
        current: Optional[ProgressSnapshot],
        event: ProgressEvent,
        now: datetime,
    ) -> AccrualResult:
        """
        Compute the record values that follow from an event.

        Args:
            current: Stored progress, or None if the learner has none yet
            event: ContentViewed, VideoWatched or QuizSubmitted
            now: Timestamp used if the lesson becomes complete

        Returns:
            AccrualResult with the proposed values

        Raises:
            ValueError: Event fields out of range or unknown event type
        """
        if isinstance(event, ContentViewed):
            return self._on_content_viewed(current, event, now)
        if isinstance(event, VideoWatched):
            return self._on_video_watched(current, event, now)
        if isinstance(event, QuizSubmitted):
            return self._on_quiz_submitted(current, event, now)
        raise ValueError(f"Unsupported progress event: {type(event).__name__}")

    def video_share(self, total_videos: int, distinct_watched: int) -> int:
        """Portion of the video weight earned by watching some videos."""
        if total_videos <= 0:
            raise ValueError("total_videos must be positive")
        if distinct_watched < 0:
            raise ValueError("distinct_watched cannot be negative")
        watched = min(distinct_watched, total_videos)
        return round_half_up(self._weights.video * watched, total_videos)

    def _on_content_viewed(
        self,
        current: Optional[ProgressSnapshot],
        event: ContentViewed,
        now: datetime,
    ) -> AccrualResult:
        if current is not None:
            return self._unchanged(current)

        percentage = self._weights.content
        if event.total_videos == 0:
            percentage += self._weights.video

        return self._result(None, percentage, None, now)

    def _on_video_watched(
        self,
        current: Optional[ProgressSnapshot],
        event: VideoWatched,
        now: datetime,
    ) -> AccrualResult:
        share = self.video_share(event.total_videos, event.distinct_watched)
        quiz_score = current.quiz_score if current else None
        quiz_share = self._weights.quiz if quiz_score is not None else 0

        candidate = self._weights.content + share + quiz_share

        if current is not None and candidate <= current.completion_percentage:
            return self._unchanged(current)

        return self._result(current, candidate, quiz_score, now)

    def _on_quiz_submitted(
        self,
        current: Optional[ProgressSnapshot],
        event: QuizSubmitted,
        now: datetime,
    ) -> AccrualResult:
        score = event.score
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= MAX_PERCENTAGE:
            raise ValueError(f"Quiz score must be an integer in [0, 100], got {event.score!r}")

        earned = 0
        if current is not None:
            earned = current.completion_percentage
            if current.quiz_score is not None:
                earned = max(0, earned - self._weights.quiz)

        candidate = min(earned, self._weights.non_quiz) + self._weights.quiz

        return self._result(current, candidate, event.score, now, force_write=True)

    def _result(
        self,
        current: Optional[ProgressSnapshot],
        candidate: int,
        quiz_score: Optional[int],
        now: datetime,
        force_write: bool = False,
    ) -> AccrualResult:
        """Clamp a candidate against the stored value and decide completion."""
        previous = current.completion_percentage if current else 0
        percentage = max(previous, min(MAX_PERCENTAGE, max(0, candidate)))

        completed_now = percentage == MAX_PERCENTAGE and previous < MAX_PERCENTAGE
        if completed_now:
            completed_at = now
        else:
            completed_at = current.completed_at if current else None

        changed = (
            current is None
            or force_write
            or percentage != previous
            or completed_now
        )

        return AccrualResult(
            completion_percentage=percentage,
            quiz_score=quiz_score,
            completed_at=completed_at,
            created=current is None,
            changed=changed,
            completed_now=completed_now,
        )

    @staticmethod
    def _unchanged(current: ProgressSnapshot) -> AccrualResult:
        return AccrualResult(
            completion_percentage=current.completion_percentage,
            quiz_score=current.quiz_score,
            completed_at=current.completed_at,
            created=False,
            changed=False,
            completed_now=False,
        )
