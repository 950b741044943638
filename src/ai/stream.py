"""
Incremental parser for the chat-completion event stream.

The upstream sends newline-delimited ``data: {json}`` frames and ends with
``data: [DONE]``. Chunks may split a frame (or a UTF-8 sequence) anywhere.
"""

import codecs
import json
import logging
from typing import AsyncIterable, AsyncIterator, Optional

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class StreamCancellation:
    """Cooperative stop flag, checked between deltas."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class _Done(Exception):
    pass


def _parse_line(line: str) -> Optional[str]:
    """
    Content delta of one complete line, or None if the line carries none.

    Raises:
        _Done: On the ``[DONE]`` sentinel
    """
    if line.endswith("\r"):
        line = line[:-1]
    if line.startswith(":") or not line.strip():
        return None
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):].strip()
    if payload == DONE_SENTINEL:
        raise _Done()

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning(f"Skipping malformed stream frame: {payload[:80]}")
        return None

    try:
        content = parsed["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    return content or None


async def iter_content_deltas(
    chunks: AsyncIterable[bytes],
    cancellation: Optional[StreamCancellation] = None
) -> AsyncIterator[str]:
    """
    Yield each content delta as it arrives.

    Stops at the ``[DONE]`` sentinel, at stream end, or once ``cancellation``
    is set. A partial trailing line is kept until its newline arrives.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    buffer = ""

    try:
        async for chunk in chunks:
            if cancellation and cancellation.cancelled:
                return
            buffer += decoder.decode(chunk)

            while "\n" in buffer:
                line, buffer = buffer.split("\n", 1)
                content = _parse_line(line)
                if content:
                    yield content
                    if cancellation and cancellation.cancelled:
                        return

        buffer += decoder.decode(b"", final=True)
        if buffer:
            content = _parse_line(buffer)
            if content:
                yield content
    except _Done:
        return


async def accumulate(
    chunks: AsyncIterable[bytes],
    cancellation: Optional[StreamCancellation] = None
) -> str:
    """Concatenate every delta into the full generated text."""
    parts = []
    async for delta in iter_content_deltas(chunks, cancellation):
        parts.append(delta)
    return "".join(parts)
