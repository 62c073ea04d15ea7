"""
Server-sent-event helpers for outgoing streams.

Formats records the same way the chat endpoints we consume do, so the
browser can read our streams with the same parser.
"""

import asyncio
import json
from typing import Any, AsyncIterator, Optional

DONE_RECORD = "data: [DONE]\n\n"
KEEPALIVE_RECORD = ": keepalive\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "X-Accel-Buffering": "no",
}


def format_sse(payload: Any) -> str:
    """Serialize a payload as one `data:` record."""
    return f"data: {json.dumps(payload, default=str)}\n\n"


async def with_keepalive(
    source: AsyncIterator[str],
    interval: float = 15.0,
) -> AsyncIterator[str]:
    """
    Relay records from an async source, adding keepalive comments.

    A keepalive comment is yielded whenever the source stays silent for
    `interval` seconds; the pending read is kept, not restarted. Closing
    the relay closes the source.
    """
    iterator = source.__aiter__()
    pending_next: Optional[asyncio.Future] = None

    try:
        while True:
            if pending_next is None:
                pending_next = asyncio.ensure_future(iterator.__anext__())

            done, _ = await asyncio.wait({pending_next}, timeout=interval)

            if not done:
                yield KEEPALIVE_RECORD
                continue

            finished, pending_next = pending_next, None
            try:
                record = finished.result()
            except StopAsyncIteration:
                break

            yield record
    finally:
        if pending_next is not None and not pending_next.done():
            pending_next.cancel()
            # The source cannot be closed while its __anext__ is running
            await asyncio.wait({pending_next})
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()
