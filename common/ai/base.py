"""
Abstract AI provider interface.

Defines the contract that chat-completion providers must implement.
This allows swapping the tutor backend (hosted edge function, OpenAI,
any OpenAI-compatible gateway) without changing application code.

Example:
    from common.ai import AIProvider, HTTPChatProvider

    def get_ai_provider(settings) -> AIProvider:
        return HTTPChatProvider(
            url=settings.TUTOR_CHAT_URL,
            api_key=settings.TUTOR_API_KEY,
        )
"""

from abc import ABC, abstractmethod
from typing import AsyncGenerator, Optional, List, Dict, Any


class AIProviderError(Exception):
    """Raised when the chat-completion endpoint fails or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class AIProvider(ABC):
    """
    Abstract AI provider interface.

    Supports both streaming and non-streaming chat completions.
    """

    @abstractmethod
    async def chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """
        Send a conversation and get the full reply.

        Args:
            messages: Conversation so far
                Format: [{"role": "user"|"assistant", "content": "..."}]
            system_prompt: Optional system instructions
            max_tokens: Maximum tokens in the response
            temperature: Sampling temperature (0-1)
            **kwargs: Provider-specific options

        Returns:
            The AI's response text

        Raises:
            AIProviderError: If the request fails
        """
        pass

    @abstractmethod
    async def stream_chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> AsyncGenerator[str, None]:
        """
        Stream a reply in text fragments.

        Args:
            messages: Conversation so far
            system_prompt: Optional system instructions
            max_tokens: Maximum tokens in the response
            temperature: Sampling temperature (0-1)
            **kwargs: Provider-specific options

        Yields:
            Text fragments as they are generated

        Raises:
            AIProviderError: If the request fails before or during streaming
        """
        pass

