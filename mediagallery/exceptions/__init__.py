"""
Exceptions for the media gallery.

Domain exceptions are raised by services; the API layer converts them to HTTP
responses in ``mediagallery.api.exception_handlers``.
"""

from mediagallery.exceptions.domain import (
    DirectoryAccessError,
    EntityNotFoundError,
    GalleryError,
    InvalidPaginationError,
    MediaNotFoundError,
    RangeNotSatisfiableError,
    StreamInterruptedError,
    ValidationError,
)

__all__ = [
    "DirectoryAccessError",
    "EntityNotFoundError",
    "GalleryError",
    "InvalidPaginationError",
    "MediaNotFoundError",
    "RangeNotSatisfiableError",
    "StreamInterruptedError",
    "ValidationError",
]
