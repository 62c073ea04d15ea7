"""
StudyHub Routers.

FastAPI routers for all API endpoints.
"""

from studyhub.routers.subjects import router as subjects_router
from studyhub.routers.lessons import router as lessons_router
from studyhub.routers.quiz import router as quiz_router
from studyhub.routers.progress import router as progress_router
from studyhub.routers.dashboard import router as dashboard_router
from studyhub.routers.tutor import router as tutor_router
from studyhub.routers.discussions import router as discussions_router
from studyhub.routers.profile import router as profile_router

__all__ = [
    "subjects_router",
    "lessons_router",
    "quiz_router",
    "progress_router",
    "dashboard_router",
    "tutor_router",
    "discussions_router",
    "profile_router",
]
