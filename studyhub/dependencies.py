"""
FastAPI dependencies for the StudyHub application.

Provides dependency injection for all services.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.ai import AIProvider, HTTPChatProvider
from common.auth import JWTAuth, create_auth_dependency, create_optional_auth_dependency
from studyhub.config import Settings, settings as default_settings

# Content services
from studyhub.services.content.content_service import ContentService

# Progress services
from studyhub.services.progress.accrual import ProgressAccrualEngine
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


# ─────────────────────────────────────────────────────────────────
# Global service instances (initialized at startup)
# ─────────────────────────────────────────────────────────────────

_settings: Optional[Settings] = None

# Auth
_jwt_auth: Optional[JWTAuth] = None

# Content
_content_service: Optional[ContentService] = None

# Progress
_accrual_engine: Optional[ProgressAccrualEngine] = None
_progress_service: Optional[ProgressService] = None

# Quiz
_quiz_service: Optional[QuizService] = None

# Discussion / profile
_discussion_service: Optional[DiscussionService] = None
_profile_service: Optional[ProfileService] = None

# AI tutor
_ai_provider: Optional[AIProvider] = None
_tutor_service: Optional[TutorService] = None

# Real-time
_change_feed: Optional[ChangeFeed] = None


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_auth_services(app_settings: Settings) -> None:
    """Initialize auth services."""
    global _jwt_auth

    _jwt_auth = JWTAuth(
        secret=app_settings.AUTH_JWT_SECRET or "",
        algorithm=app_settings.AUTH_JWT_ALGORITHM,
        audience=app_settings.AUTH_JWT_AUDIENCE,
    )


def init_content_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize content and quiz services."""
    global _content_service, _quiz_service

    _content_service = ContentService(db=db)
    _quiz_service = QuizService(db=db)


def init_progress_services(db: AsyncIOMotorDatabase, app_settings: Settings) -> None:
    """Initialize progress services."""
    global _accrual_engine, _progress_service

    _accrual_engine = ProgressAccrualEngine(app_settings.milestone_weights())
    _progress_service = ProgressService(db=db)


def init_community_services(db: AsyncIOMotorDatabase, app_settings: Settings) -> None:
    """Initialize discussion, profile and change-feed services."""
    global _discussion_service, _profile_service, _change_feed

    _discussion_service = DiscussionService(db=db, max_post_length=app_settings.MAX_POST_LENGTH)
    _profile_service = ProfileService(db=db)
    _change_feed = ChangeFeed(db=db)


def init_ai_services(
    app_settings: Settings,
    provider: Optional[AIProvider] = None,
) -> None:
    """
    Initialize the AI tutor.

    Args:
        app_settings: Application settings
        provider: Chat provider override; defaults to an HTTPChatProvider
                  for TUTOR_CHAT_URL
    """
    global _ai_provider, _tutor_service

    _ai_provider = provider or HTTPChatProvider(
        url=app_settings.TUTOR_CHAT_URL,
        api_key=app_settings.TUTOR_API_KEY,
        model=app_settings.TUTOR_MODEL,
        timeout=app_settings.TUTOR_TIMEOUT_SECONDS,
    )
    _tutor_service = TutorService(
        provider=_ai_provider,
        max_tokens=app_settings.TUTOR_MAX_TOKENS,
    )


def init_all_services(
    db: AsyncIOMotorDatabase,
    app_settings: Optional[Settings] = None,
    ai_provider: Optional[AIProvider] = None,
) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
        app_settings: Settings (defaults to the global settings)
        ai_provider: Chat provider override for the tutor
    """
    global _settings
    _settings = app_settings or default_settings

    init_auth_services(_settings)
    init_content_services(db)
    init_progress_services(db, _settings)
    init_community_services(db, _settings)
    init_ai_services(_settings, ai_provider)


async def shutdown_services() -> None:
    """Release clients held by services."""
    global _ai_provider

    if isinstance(_ai_provider, HTTPChatProvider):
        await _ai_provider.aclose()
    _ai_provider = None


# ─────────────────────────────────────────────────────────────────
# Settings getter
# ─────────────────────────────────────────────────────────────────

def get_settings() -> Settings:
    """Get the settings services were initialized with."""
    return _settings or default_settings


# ─────────────────────────────────────────────────────────────────
# Auth getters
# ─────────────────────────────────────────────────────────────────

def get_jwt_auth() -> JWTAuth:
    """Get JWT auth provider."""
    if _jwt_auth is None:
        raise RuntimeError("Auth services not initialized.")
    return _jwt_auth


require_auth = create_auth_dependency(get_jwt_auth)
optional_auth = create_optional_auth_dependency(get_jwt_auth)


# ─────────────────────────────────────────────────────────────────
# Content getters
# ─────────────────────────────────────────────────────────────────

def get_content_service() -> ContentService:
    """Get content service instance."""
    if _content_service is None:
        raise RuntimeError("Content services not initialized.")
    return _content_service


def get_quiz_service() -> QuizService:
    """Get quiz service instance."""
    if _quiz_service is None:
        raise RuntimeError("Content services not initialized.")
    return _quiz_service


# ─────────────────────────────────────────────────────────────────
# Progress getters
# ─────────────────────────────────────────────────────────────────

def get_accrual_engine() -> ProgressAccrualEngine:
    """Get progress accrual engine."""
    if _accrual_engine is None:
        raise RuntimeError("Progress services not initialized.")
    return _accrual_engine


def get_progress_service() -> ProgressService:
    """Get progress service instance."""
    if _progress_service is None:
        raise RuntimeError("Progress services not initialized.")
    return _progress_service


# ─────────────────────────────────────────────────────────────────
# Community getters
# ─────────────────────────────────────────────────────────────────

def get_discussion_service() -> DiscussionService:
    """Get discussion service instance."""
    if _discussion_service is None:
        raise RuntimeError("Community services not initialized.")
    return _discussion_service


def get_profile_service() -> ProfileService:
    """Get profile service instance."""
    if _profile_service is None:
        raise RuntimeError("Community services not initialized.")
    return _profile_service


def get_change_feed() -> ChangeFeed:
    """Get change feed instance."""
    if _change_feed is None:
        raise RuntimeError("Community services not initialized.")
    return _change_feed


# ─────────────────────────────────────────────────────────────────
# AI getters
# ─────────────────────────────────────────────────────────────────

def get_tutor_service() -> TutorService:
    """Get tutor service instance."""
    if _tutor_service is None:
        raise RuntimeError("AI services not initialized.")
    return _tutor_service
