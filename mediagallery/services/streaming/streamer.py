"""Whole-file and byte-range streaming of media files."""

import asyncio
import hashlib
import stat
from collections.abc import AsyncIterator
from email.utils import formatdate
from enum import Enum
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from mediagallery.exceptions import MediaNotFoundError, StreamInterruptedError
from mediagallery.services.streaming.ranges import ByteRange, content_type_for, parse_range_header
from mediagallery.utils.logger import logger

DEFAULT_CHUNK_SIZE = 64 * 1024


class StreamState(str, Enum):
    """Lifecycle of a prepared media response."""

    STREAMING = "streaming"
    NOT_MODIFIED = "not_modified"
    CLOSED = "closed"


def make_etag(path: Path, size: int, mtime_ns: int) -> str:
    """Strong validator derived from path, size and modification time."""
    digest = hashlib.md5(f"{path}_{size}_{mtime_ns}".encode(), usedforsecurity=False)
    return f'"{digest.hexdigest()}"'


def _etag_matches(if_none_match: str | None, etag: str) -> bool:
    if not if_none_match:
        return False
    candidates = [c.strip() for c in if_none_match.split(",")]
    return "*" in candidates or etag in candidates or f"W/{etag}" in candidates


class MediaStream:
    """Response for one media request: status, headers and a byte iterator.

    Owns its file handle. The handle is closed when iteration finishes, when
    the consumer stops early (client disconnect), or on ``aclose()``;
    closing twice is a no-op.
    """

    def __init__(
        self,
        path: Path,
        status_code: int,
        headers: dict[str, str],
        handle: Any = None,
        start: int = 0,
        length: int = 0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.path = path
        self.status_code = status_code
        self.headers = headers
        self.start = start
        self.length = length
        self._handle = handle
        self._chunk_size = chunk_size
        self._state = StreamState.STREAMING if handle is not None else StreamState.NOT_MODIFIED
        self.bytes_sent = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def media_type(self) -> str | None:
        return self.headers.get("Content-Type")

    @property
    def closed(self) -> bool:
        return self._state == StreamState.CLOSED

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield exactly ``length`` bytes starting at ``start``.

        Stops early only if the file shrank since it was resolved.
        """
        if self._state != StreamState.STREAMING:
            return

        try:
            await self._handle.seek(self.start)
            remaining = self.length
            while remaining > 0:
                chunk = await self._handle.read(min(self._chunk_size, remaining))
                if not chunk:
                    logger.warning(
                        f"Short read on {self.path}: {self.bytes_sent}/{self.length} bytes sent"
                    )
                    break
                remaining -= len(chunk)
                self.bytes_sent += len(chunk)
                yield chunk
        except (asyncio.CancelledError, GeneratorExit):
            # Client went away; not an application error
            interrupted = StreamInterruptedError(str(self.path), self.bytes_sent, self.length)
            logger.debug(str(interrupted))
            raise
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._state == StreamState.CLOSED:
            return
        self._state = StreamState.CLOSED
        if self._handle is not None:
            handle, self._handle = self._handle, None
            await handle.close()


class RangeStreamer:
    """Serves files whole (200) or as a byte window (206).

    Stateless apart from configuration: every ``serve`` call stats the file
    and opens its own handle, so concurrent requests never share state.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize the streamer.

        Args:
            chunk_size: Bytes read from disk per iteration
        """
        self._chunk_size = chunk_size

    async def serve(
        self,
        path: Path,
        range_header: str | None = None,
        if_none_match: str | None = None,
        extra_headers: dict[str, str] | None = None,
    ) -> MediaStream:
        """Resolve ``path`` and prepare the response stream.

        Args:
            path: File to serve
            range_header: Raw ``Range`` header, if any
            if_none_match: Raw ``If-None-Match`` header, honoured only without a range
            extra_headers: Headers added to every response for this request

        Returns:
            MediaStream with status 200, 206 or 304

        Raises:
            MediaNotFoundError: If the path is missing or not a regular file
            RangeNotSatisfiableError: If the range cannot be served
        """
        path = Path(path)
        try:
            st = await aiofiles.os.stat(path)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise MediaNotFoundError(path.name) from e
        if not stat.S_ISREG(st.st_mode):
            raise MediaNotFoundError(path.name)

        size = st.st_size
        etag = make_etag(path, size, st.st_mtime_ns)
        headers = {
            "Accept-Ranges": "bytes",
            "Content-Type": content_type_for(path),
            "ETag": etag,
            "Last-Modified": formatdate(st.st_mtime, usegmt=True),
        }
        if extra_headers:
            headers.update(extra_headers)

        byte_range: ByteRange | None = None
        if range_header:
            byte_range = parse_range_header(range_header, size)
        elif _etag_matches(if_none_match, etag):
            logger.debug(f"Not modified: {path.name}")
            return MediaStream(path, 304, headers)

        try:
            handle = await aiofiles.open(path, "rb")
        except (FileNotFoundError, IsADirectoryError) as e:
            raise MediaNotFoundError(path.name) from e

        if byte_range is None:
            headers["Content-Length"] = str(size)
            logger.debug(f"Streaming {path.name} ({size} bytes)")
            return MediaStream(
                path, 200, headers, handle, start=0, length=size, chunk_size=self._chunk_size
            )

        headers["Content-Range"] = byte_range.content_range
        headers["Content-Length"] = str(byte_range.length)
        logger.debug(f"Streaming {path.name} {byte_range.content_range}")
        return MediaStream(
            path,
            206,
            headers,
            handle,
            start=byte_range.start,
            length=byte_range.length,
            chunk_size=self._chunk_size,
        )
