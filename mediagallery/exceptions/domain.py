"""
Domain exceptions for the gallery service layer.

These exceptions are raised by the index cache and the range streamer to
represent failures without coupling to HTTP status codes.
"""

from typing import Self


class GalleryError(Exception):
    """Base exception for all gallery-specific errors."""

    def with_context(self, detail: str) -> Self:
        """Add context information to the exception.

        Args:
            detail: Additional details about the error

        Returns:
            Self with updated message
        """
        self.args = (detail,)
        return self


# Base domain exceptions
class EntityNotFoundError(GalleryError):
    """Raised when a requested entity does not exist."""

    pass


class ValidationError(GalleryError):
    """Raised when request input fails validation."""

    pass


# Index cache exceptions
class DirectoryAccessError(GalleryError):
    """Raised when the media root cannot be listed at refresh time."""

    def __init__(self, directory: str, reason: str | None = None):
        self.directory = directory
        message = f"Media directory '{directory}' is not accessible"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MediaNotFoundError(EntityNotFoundError):
    """Raised when a media name or path does not resolve to a regular file."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Media '{name}' not found")


class InvalidPaginationError(ValidationError):
    """Raised when page or page size is not a positive integer."""

    def __init__(self, page: int, page_size: int):
        super().__init__(f"Invalid pagination: page={page}, limit={page_size} (both must be >= 1)")


# Streaming exceptions
class RangeNotSatisfiableError(GalleryError):
    """Raised when a Range header is malformed or outside the file."""

    def __init__(self, range_header: str, total: int):
        self.range_header = range_header
        self.total = total
        super().__init__(f"Range '{range_header}' not satisfiable for {total} bytes")


class StreamInterruptedError(GalleryError):
    """Client went away mid-transfer.

    Never propagated out of the streamer; it exists so the event is named in logs.
    """

    def __init__(self, path: str, sent: int, expected: int):
        self.path = path
        self.sent = sent
        self.expected = expected
        super().__init__(f"Stream of '{path}' interrupted after {sent}/{expected} bytes")
