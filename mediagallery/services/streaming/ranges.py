"""Range header parsing and content-type resolution."""

import re
from dataclasses import dataclass
from pathlib import Path

from mediagallery.exceptions import RangeNotSatisfiableError

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".mov": "video/quicktime",
}

# Single range with a mandatory start: "bytes=500-999" or "bytes=500-"
_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d+)\s*-\s*(\d*)\s*$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ByteRange:
    """Inclusive byte window of a file of ``total`` bytes."""

    start: int
    end: int
    total: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total}"


def content_type_for(path: str | Path) -> str:
    """Content type of a media file by extension."""
    return CONTENT_TYPES.get(Path(path).suffix.lower(), DEFAULT_CONTENT_TYPE)


def parse_range_header(header: str, total: int) -> ByteRange:
    """Parse a ``Range`` header against a file of ``total`` bytes.

    ``end`` defaults to the last byte and is clamped to it.

    Args:
        header: Raw header value, e.g. ``bytes=0-99``
        total: File size in bytes

    Returns:
        ByteRange to serve

    Raises:
        RangeNotSatisfiableError: If the header is malformed, names several
            ranges, or the window starts past the end of the file

    Examples:
        >>> parse_range_header("bytes=0-49", 200).content_range
        'bytes 0-49/200'
        >>> parse_range_header("bytes=150-", 200).length
        50
    """
    match = _RANGE_RE.match(header)
    if match is None:
        raise RangeNotSatisfiableError(header, total)

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else total - 1
    end = min(end, total - 1)

    if start >= total or start > end:
        raise RangeNotSatisfiableError(header, total)

    return ByteRange(start=start, end=end, total=total)
