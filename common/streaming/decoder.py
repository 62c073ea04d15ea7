"""
Incremental decoder for chat-completion event streams.

Chat-completion endpoints deliver their reply as newline-delimited
server-sent-event records:

    : keepalive
    data: {"choices":[{"delta":{"content":"Hel"}}]}
    data: {"choices":[{"delta":{"content":"lo"}}]}
    data: [DONE]

The transport splits that text into chunks at arbitrary positions, so a
record (or a multi-byte character) may arrive in pieces. StreamDecoder
buffers the unconsumed tail, turns every complete `data:` record into a
ContentDelta and stops at the `[DONE]` sentinel.

Example:
    decoder = StreamDecoder()
    async for chunk in response.aiter_bytes():
        for delta in decoder.feed(chunk):
            print(delta.content, end="")
        if decoder.done:
            break
    decoder.finish()
"""

import codecs
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, List, Optional, Union

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
COMMENT_MARKER = ":"
DONE_SENTINEL = "[DONE]"


class StreamPhase(str, Enum):
    """Lifecycle of a decoding session."""
    STREAMING = "streaming"
    DONE = "done"


@dataclass
class ContentDelta:
    """An incremental fragment of assistant text."""
    content: str
    index: int  # Position of the fragment within its stream


@dataclass
class StreamState:
    """Mutable state owned by exactly one decoding session."""
    buffer: str = ""
    accumulated_text: str = ""
    done: bool = False
    delta_count: int = field(default=0)


def extract_delta_content(payload: Any) -> Optional[str]:
    """
    Pull `choices[0].delta.content` out of a parsed payload.

    Every level may be missing or of the wrong type; any such shape
    yields None rather than an error.
    """
    if not isinstance(payload, dict):
        return None

    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None

    first = choices[0]
    if not isinstance(first, dict):
        return None

    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None

    content = delta.get("content")
    if not isinstance(content, str):
        return None

    return content


class StreamDecoder:
    """
    Turns raw stream chunks into an ordered sequence of ContentDelta.

    States are STREAMING and DONE. DONE is entered on the `[DONE]`
    sentinel or when the transport reports end of stream via finish(),
    and is terminal: later feed() calls produce nothing.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._state = StreamState()
        self._byte_decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state.done

    @property
    def phase(self) -> StreamPhase:
        return StreamPhase.DONE if self._state.done else StreamPhase.STREAMING

    @property
    def accumulated_text(self) -> str:
        return self._state.accumulated_text

    @property
    def buffer(self) -> str:
        return self._state.buffer

    def feed(self, chunk: Union[str, bytes]) -> List[ContentDelta]:
        """
        Consume one transport chunk.

        Args:
            chunk: Text, or raw bytes decoded incrementally so that a
                character split across chunks is reassembled.

        Returns:
            Deltas completed by this chunk, in arrival order (may be empty)
        """
        if self._state.done:
            return []

        if isinstance(chunk, bytes):
            chunk = self._byte_decoder.decode(chunk)

        self._state.buffer += chunk
        return self._drain()

    def finish(self) -> List[ContentDelta]:
        """
        Signal that the transport has no more data.

        Whatever is still buffered is an incomplete record and is
        dropped. No events are ever produced here.
        """
        if not self._state.done:
            self._state.buffer += self._byte_decoder.decode(b"", final=True)
            if self._state.buffer:
                logger.warning(
                    f"Stream ended with {len(self._state.buffer)} unconsumed characters"
                )
            self._state.done = True
        return []

    def _drain(self) -> List[ContentDelta]:
        """Extract and process every complete line currently buffered."""
        deltas: List[ContentDelta] = []
        state = self._state

        while True:
            newline_index = state.buffer.find("\n")
            if newline_index == -1:
                break

            line = state.buffer[:newline_index]
            state.buffer = state.buffer[newline_index + 1:]

            if line.endswith("\r"):
                line = line[:-1]

            if not line.strip() or line.startswith(COMMENT_MARKER):
                continue

            if not line.startswith(DATA_PREFIX):
                continue

            token = line[len(DATA_PREFIX):].strip()

            if token == DONE_SENTINEL:
                state.done = True
                break

            try:
                payload = json.loads(token)
            except json.JSONDecodeError:
                # Incomplete record: put it back and wait for more data
                logger.debug(f"Re-buffering unparsable record ({len(token)} chars)")
                state.buffer = line + "\n" + state.buffer
                break

            content = extract_delta_content(payload)
            if not content:
                continue

            state.accumulated_text += content
            deltas.append(ContentDelta(content=content, index=state.delta_count))
            state.delta_count += 1

        return deltas


async def decode_stream(
    chunks: AsyncIterator[Union[str, bytes]],
    decoder: Optional[StreamDecoder] = None,
) -> AsyncIterator[ContentDelta]:
    """
    Drive a decoder over an async chunk source.

    Stops pulling from the source as soon as the sentinel is seen.
    Breaking out of the returned iterator stops delivery; the decoder
    is private to this call unless one is passed in.

    Args:
        chunks: Async iterator of transport chunks
        decoder: Optional decoder to use (for inspecting state afterwards)

    Yields:
        ContentDelta events in stream order
    """
    decoder = decoder or StreamDecoder()

    async for chunk in chunks:
        for delta in decoder.feed(chunk):
            yield delta
        if decoder.done:
            break

    decoder.finish()
