"""
Chat-completion provider over plain HTTP.

Talks to any endpoint that accepts an OpenAI-style chat-completion body
and answers with either a JSON completion or an event stream of
`data: {...}` records. The stream is parsed by StreamDecoder, so the
provider works against hosted edge functions and gateways that do not
ship an SDK.

Example:
    provider = HTTPChatProvider(
        url="https://example.functions.host/v1/ai-tutor",
        api_key="publishable-key",
    )
    async for text in provider.stream_chat(
        messages=[{"role": "user", "content": "What is a stack?"}],
        system_prompt="You are a patient tutor.",
    ):
        print(text, end="")
"""

import logging
from typing import AsyncGenerator, Optional, List, Dict, Any

import httpx

from common.ai.base import AIProvider, AIProviderError
from common.streaming import StreamDecoder, decode_stream

logger = logging.getLogger(__name__)


class HTTPChatProvider(AIProvider):
    """
    Chat-completion provider backed by httpx.

    One AsyncClient is shared across requests; each streamed reply gets
    its own StreamDecoder.
    """

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize HTTP chat provider.

        Args:
            url: Chat-completion endpoint URL
            api_key: Bearer key sent in the Authorization header
            model: Model name to request (omitted when None)
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx client (tests, proxies)
        """
        self.url = url
        self.model = model
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def _build_body(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str],
        max_tokens: int,
        temperature: float,
        stream: bool,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        full_messages: List[Dict[str, str]] = []

        if system_prompt:
            full_messages.append({"role": "system", "content": system_prompt})

        full_messages.extend(messages)

        body: Dict[str, Any] = {
            "messages": full_messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stream": stream,
        }

        model = kwargs.get("model", self.model)
        if model:
            body["model"] = model

        # Pass-through fields understood by the tutor endpoint
        for key in ["subject", "stop", "top_p", "seed"]:
            if key in kwargs:
                body[key] = kwargs[key]

        return body

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Best-effort extraction of the endpoint's error message."""
        try:
            data = response.json()
        except ValueError:
            return f"Chat request failed with status {response.status_code}"

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict):
                error = error.get("message")
            if error:
                return str(error)

        return f"Chat request failed with status {response.status_code}"

    async def chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> str:
        """Send a conversation and return the complete reply."""
        body = self._build_body(
            messages, system_prompt, max_tokens, temperature, stream=False, **kwargs
        )

        try:
            response = await self._client.post(self.url, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Chat request to {self.url} failed: {e}")
            raise AIProviderError(f"Chat endpoint unreachable: {e}") from e

        if response.status_code >= 400:
            raise AIProviderError(self._error_message(response), status_code=response.status_code)

        data = response.json()
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            raise AIProviderError("Malformed chat completion response")

    async def stream_chat(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> AsyncGenerator[str, None]:
        """Stream a reply, yielding text fragments as records complete."""
        body = self._build_body(
            messages, system_prompt, max_tokens, temperature, stream=True, **kwargs
        )
        decoder = StreamDecoder()

        try:
            async with self._client.stream(
                "POST", self.url, json=body, headers=self._headers()
            ) as response:
                if response.status_code >= 400:
                    await response.aread()
                    raise AIProviderError(
                        self._error_message(response),
                        status_code=response.status_code,
                    )

                async for delta in decode_stream(response.aiter_bytes(), decoder):
                    yield delta.content
        except httpx.HTTPError as e:
            logger.error(f"Chat stream from {self.url} failed: {e}")
            raise AIProviderError(f"Chat stream interrupted: {e}") from e

        logger.debug(f"Chat stream finished ({len(decoder.accumulated_text)} chars)")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
