"""
StudyHub Services.

All service classes organized by feature.
"""

# Content services
from studyhub.services.content.content_service import ContentService

# Progress services
from studyhub.services.progress.accrual import ProgressAccrualEngine, MilestoneWeights
from studyhub.services.progress.progress_service import ProgressService

# Quiz services
from studyhub.services.quiz.quiz_service import QuizService

# Discussion / profile services
from studyhub.services.discussion.discussion_service import DiscussionService
from studyhub.services.profile.profile_service import ProfileService

# AI tutor services
from studyhub.services.tutor.tutor_service import TutorService

# Real-time services
from studyhub.services.realtime.change_feed import ChangeFeed

__all__ = [
    "ContentService",
    "ProgressAccrualEngine",
    "MilestoneWeights",
    "ProgressService",
    "QuizService",
    "DiscussionService",
    "ProfileService",
    "TutorService",
    "ChangeFeed",
]
