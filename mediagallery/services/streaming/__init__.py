"""Range streaming: whole-file and partial-content delivery of media files."""

from mediagallery.services.streaming.ranges import (
    CONTENT_TYPES,
    ByteRange,
    content_type_for,
    parse_range_header,
)
from mediagallery.services.streaming.streamer import (
    MediaStream,
    RangeStreamer,
    StreamState,
    make_etag,
)

__all__ = [
    "CONTENT_TYPES",
    "ByteRange",
    "MediaStream",
    "RangeStreamer",
    "StreamState",
    "content_type_for",
    "make_etag",
    "parse_range_header",
]
