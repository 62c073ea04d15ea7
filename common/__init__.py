"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across projects:

- database: Async MongoDB connection with Motor
- auth: Bearer-token verification (JWT)
- ai: Pluggable chat-completion providers
- streaming: Event-stream decoding and SSE formatting
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import AuthProvider, JWTAuth, create_auth_dependency
from common.ai import AIProvider, AIProviderError, HTTPChatProvider
from common.streaming import StreamDecoder, ContentDelta
from common.utils import (
    success_response,
    error_response,
    APIException,
    UnauthorizedException,
    NotFoundException,
    ValidationException,
    ServiceUnavailableException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "AuthProvider",
    "JWTAuth",
    "create_auth_dependency",
    # AI
    "AIProvider",
    "AIProviderError",
    "HTTPChatProvider",
    # Streaming
    "StreamDecoder",
    "ContentDelta",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "UnauthorizedException",
    "NotFoundException",
    "ValidationException",
    "ServiceUnavailableException",
    # Config
    "BaseAppSettings",
]
