"""
Server-sent event re-assembly for streamed coaching replies.

The chat endpoint relays the gateway's SSE body untouched. Consumers (the
CLI, tests) decode it incrementally: UTF-8 chunks are decoded with a
streaming decoder, split on newlines with the trailing partial line carried
over, and every ``data: `` line holding JSON contributes its
``choices[0].delta.content`` fragment.
"""

import codecs
import json
import logging
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

DONE_MARKER = "[DONE]"


class SSEDeltaDecoder:
    """Incremental decoder turning raw SSE byte chunks into content fragments."""

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one chunk and return the content fragments it completed."""
        self._buffer += self._decoder.decode(chunk)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return [fragment for fragment in map(_line_fragment, lines) if fragment]

    def flush(self) -> list[str]:
        """Consume whatever is left once the stream has ended."""
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""
        fragment = _line_fragment(remainder)
        return [fragment] if fragment else []


def _line_fragment(line: str) -> Optional[str]:
    line = line.rstrip("\r")
    if not line.strip() or line.startswith(":"):
        return None
    if not line.startswith("data: "):
        return None

    payload = line[6:].strip()
    if payload == DONE_MARKER:
        return None

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError:
        logger.warning(f"Skipping malformed SSE data line: {payload[:200]}")
        return None

    try:
        content = parsed["choices"][0]["delta"].get("content")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
    return content if isinstance(content, str) and content else None


def iter_deltas(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield content fragments from a synchronous iterable of byte chunks."""
    decoder = SSEDeltaDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.flush()


async def aiter_deltas(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield content fragments from an async iterable of byte chunks."""
    decoder = SSEDeltaDecoder()
    async for chunk in chunks:
        for fragment in decoder.feed(chunk):
            yield fragment
    for fragment in decoder.flush():
        yield fragment


def assemble_message(chunks: Iterable[bytes]) -> str:
    """Concatenate every fragment of a complete SSE body."""
    return "".join(iter_deltas(chunks))


def encode_delta(content: str) -> bytes:
    """Encode one fragment as an OpenAI-style SSE ``data:`` event."""
    payload = {"choices": [{"index": 0, "delta": {"content": content}}]}
    return f"data: {json.dumps(payload)}\n\n".encode("utf-8")
