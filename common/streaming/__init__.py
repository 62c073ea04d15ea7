"""
Streaming module - Incremental decoding of chat-completion event streams
and formatting of outgoing server-sent events.
"""

from common.streaming.decoder import (
    StreamDecoder,
    StreamState,
    StreamPhase,
    ContentDelta,
    decode_stream,
    extract_delta_content,
)
from common.streaming.sse import (
    DONE_RECORD,
    KEEPALIVE_RECORD,
    SSE_HEADERS,
    format_sse,
    with_keepalive,
)

__all__ = [
    # Decoding
    "StreamDecoder",
    "StreamState",
    "StreamPhase",
    "ContentDelta",
    "decode_stream",
    "extract_delta_content",
    # Outgoing events
    "DONE_RECORD",
    "KEEPALIVE_RECORD",
    "SSE_HEADERS",
    "format_sse",
    "with_keepalive",
]
