"""Lookup of pre-generated thumbnails and video posters.

Derivatives are produced by an external resize job into the thumbnail
directory; this module only decides which file to serve.
"""

from pathlib import Path

import aiofiles.os
from cachetools import TTLCache

from mediagallery.exceptions import MediaNotFoundError
from mediagallery.services.gallery.models import MediaKind
from mediagallery.utils.logger import logger


class DerivativeLocator:
    """Resolves ``?thumbnail`` / ``?poster`` requests to a file on disk.

    A gallery page asks for many thumbnails at once, so existence checks are
    memoized for ``ttl_seconds``; a derivative generated later shows up after
    the TTL.
    """

    def __init__(
        self,
        thumbnail_dir: Path,
        placeholder: Path | None = None,
        ttl_seconds: float = 300.0,
        max_entries: int = 4096,
    ):
        """Initialize the locator.

        Args:
            thumbnail_dir: Directory holding ``<name>`` thumbnails and ``<stem>.jpg`` posters
            placeholder: Image served when a video has no poster
            ttl_seconds: How long an existence check is trusted
            max_entries: Maximum number of memoized lookups
        """
        self._thumbnail_dir = thumbnail_dir
        self._placeholder = placeholder
        self._exists: TTLCache[Path, bool] = TTLCache(maxsize=max_entries, ttl=ttl_seconds)

    async def _is_file(self, path: Path) -> bool:
        cached: bool | None = self._exists.get(path)
        if cached is not None:
            return cached
        found = await aiofiles.os.path.isfile(path)
        self._exists[path] = found
        return found

    def thumbnail_path(self, name: str) -> Path:
        return self._thumbnail_dir / name

    def poster_path(self, name: str) -> Path:
        return self._thumbnail_dir / f"{Path(name).stem}.jpg"

    async def locate(self, name: str, original: Path, thumbnail: bool, poster: bool) -> Path:
        """Pick the file to serve for a media request.

        Images without a thumbnail fall back to the original; videos without
        a poster fall back to the placeholder.

        Args:
            name: Requested media name
            original: Resolved path of the media file itself
            thumbnail: ``?thumbnail=true`` was requested
            poster: ``?poster=true`` was requested

        Returns:
            Path of the file to stream

        Raises:
            MediaNotFoundError: If a poster is missing and no placeholder is configured
        """
        kind = MediaKind.from_name(name)

        if thumbnail and kind == MediaKind.IMAGE:
            candidate = self.thumbnail_path(name)
            return candidate if await self._is_file(candidate) else original

        if poster and kind == MediaKind.VIDEO:
            candidate = self.poster_path(name)
            if await self._is_file(candidate):
                return candidate
            if self._placeholder is not None:
                logger.debug(f"No poster for {name}, using placeholder")
                return self._placeholder
            raise MediaNotFoundError(name).with_context(f"No poster for '{name}'")

        return original

    def clear(self) -> None:
        self._exists.clear()
