"""
AI module - Pluggable chat-completion providers.
"""

from common.ai.base import AIProvider, AIProviderError
from common.ai.http_chat import HTTPChatProvider

__all__ = ["AIProvider", "AIProviderError", "HTTPChatProvider"]
