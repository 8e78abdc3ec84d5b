"""Models for the gallery index cache."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".webm", ".mov"})
SUPPORTED_EXTENSIONS = IMAGE_EXTENSIONS | VIDEO_EXTENSIONS


class MediaKind(str, Enum):
    """Kind of media a file holds, derived from its extension."""

    IMAGE = "image"
    VIDEO = "video"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str) -> "MediaKind":
        suffix = Path(name).suffix.lower()
        if suffix in IMAGE_EXTENSIONS:
            return cls.IMAGE
        if suffix in VIDEO_EXTENSIONS:
            return cls.VIDEO
        return cls.OTHER


def is_supported_media(name: str) -> bool:
    """Check whether a filename has one of the indexed media extensions."""
    return Path(name).suffix.lower() in SUPPORTED_EXTENSIONS


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One indexed file, as it was at the last refresh."""

    name: str
    path: Path
    size: int
    modified_at: datetime
    media_kind: MediaKind
    tags: frozenset[str] = field(default_factory=frozenset)

    @property
    def extension(self) -> str:
        return self.path.suffix.lower().lstrip(".")


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """Fully built view of the media directory.

    Swapped in as a single reference on refresh, so readers holding one
    never observe a partially built index.
    """

    entries: dict[str, CacheEntry] = field(repr=False)
    ordered: tuple[CacheEntry, ...] = field(repr=False)
    letters: tuple[str, ...]
    tags: tuple[str, ...]
    built_at: float = field(default_factory=time.time)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class PageResult:
    """One page of a filtered listing."""

    items: tuple[CacheEntry, ...]
    page: int
    page_size: int
    total: int
    total_all: int
    total_pages: int
    has_more: bool
    letter: str | None = None
    tag: str | None = None


class GalleryItem(BaseModel):
    """Listing entry as returned to the gallery UI."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    url: str
    thumbnail_url: str = Field(alias="thumbnailUrl")
    size: int
    modified: datetime
    type: str
    kind: MediaKind
    tags: list[str] = Field(default_factory=list)


class Pagination(BaseModel):
    """Pagination block of a listing response."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    total_all: int = Field(alias="totalAll")
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")
    has_more: bool = Field(alias="hasMore")
    current_letter: str | None = Field(default=None, alias="currentLetter")
    current_tag: str | None = Field(default=None, alias="currentTag")


class GalleryPage(BaseModel):
    """Response body of ``GET /gallery/images``."""

    images: list[GalleryItem]
    pagination: Pagination


class LettersResponse(BaseModel):
    letters: list[str]
    total: int


class TagsResponse(BaseModel):
    tags: list[str]
    total: int


class CacheStats(BaseModel):
    """Snapshot statistics for ``GET /gallery/stats``."""

    entries: int
    images: int
    videos: int
    letters: int
    tags: int
    refreshing: bool
    ttl_seconds: float
    last_refresh_age_seconds: float | None = None
