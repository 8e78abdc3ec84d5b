"""Gallery index cache: TTL-refreshed snapshot of a media directory."""

from mediagallery.services.gallery.cache import DirectoryIndexCache, build_snapshot
from mediagallery.services.gallery.derivatives import DerivativeLocator
from mediagallery.services.gallery.models import (
    CacheEntry,
    CacheStats,
    GalleryItem,
    GalleryPage,
    IndexSnapshot,
    LettersResponse,
    MediaKind,
    PageResult,
    Pagination,
    TagsResponse,
)
from mediagallery.services.gallery.ordering import natural_key
from mediagallery.services.gallery.refresh import GalleryRefreshService
from mediagallery.services.gallery.tags import derive_tags, load_tag_file

__all__ = [
    "CacheEntry",
    "CacheStats",
    "DerivativeLocator",
    "DirectoryIndexCache",
    "GalleryItem",
    "GalleryPage",
    "GalleryRefreshService",
    "IndexSnapshot",
    "LettersResponse",
    "MediaKind",
    "PageResult",
    "Pagination",
    "TagsResponse",
    "build_snapshot",
    "derive_tags",
    "load_tag_file",
    "natural_key",
]
