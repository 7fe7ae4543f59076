"""Newline-delimited JSON progress stream."""

import asyncio
from collections.abc import AsyncIterator

from common.logging import setup_logging
from domain.models import SummaryResult
from response_models import (
    ErrorFrame,
    ProgressFrame,
    ResultFrame,
    StreamFrame,
    stream_frame_adapter,
)

logger = setup_logging()

STREAM_MEDIA_TYPE = "application/json; charset=utf-8"
STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
}


def encode_frame(frame: StreamFrame) -> bytes:
    """Serializes one frame as a newline-terminated JSON line."""
    return (frame.model_dump_json(by_alias=True) + "\n").encode("utf-8")


class ProgressStreamEmitter:
    """
    Buffers frames for a single streamed HTTP response.

    Any number of progress frames may be written, followed by exactly one
    terminal result or error frame. Once the stream is closed, either by a
    terminal frame or because the consumer went away, further writes are
    dropped.
    """

    def __init__(self):
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def progress(self, message: str, **meta) -> None:
        self._write(ProgressFrame(message=message, **meta))

    def result(self, payload: SummaryResult) -> None:
        self._write(ResultFrame(payload=payload), terminal=True)

    def error(self, message: str) -> None:
        self._write(ErrorFrame(message=message), terminal=True)

    def close(self) -> None:
        """Ends the stream; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

    def _write(self, frame: StreamFrame, terminal: bool = False) -> None:
        if self._closed:
            logger.info("Dropped frame after stream close", extra={"frame_type": frame.type})
            return
        self._queue.put_nowait(encode_frame(frame))
        if terminal:
            self.close()

    async def stream(self) -> AsyncIterator[bytes]:
        """Yields encoded frames until the stream is closed."""
        try:
            while True:
                chunk = await self._queue.get()
                if chunk is None:
                    return
                yield chunk
        finally:
            self.close()
            logger.info("Progress stream closed")


class FrameDecoder:
    """Reassembles frames from arbitrarily split response chunks."""

    def __init__(self):
        self._buffer = b""

    def feed(self, chunk: bytes) -> list[StreamFrame]:
        self._buffer += chunk
        frames: list[StreamFrame] = []
        while b"\n" in self._buffer:
            line, self._buffer = self._buffer.split(b"\n", 1)
            if line.strip():
                frames.append(stream_frame_adapter.validate_json(line))
        return frames

    @property
    def pending(self) -> bytes:
        """Bytes received after the last complete frame."""
        return self._buffer
