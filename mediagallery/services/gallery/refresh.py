"""Background service keeping the gallery index warm."""

import asyncio
import contextlib

from mediagallery.exceptions import DirectoryAccessError
from mediagallery.services.gallery.cache import DirectoryIndexCache
from mediagallery.settings import settings
from mediagallery.utils.logger import logger


class GalleryRefreshService:
    """Periodic ``ensure_fresh()`` so listing requests rarely pay for a rebuild.

    Runs an ``asyncio.Task`` loop on a configurable interval. The cache still
    decides whether a rebuild is due, so a short interval only costs a TTL check.
    """

    def __init__(
        self,
        cache: DirectoryIndexCache,
        refresh_interval: float | None = None,
    ):
        """Initialize the refresh service.

        Args:
            cache: The index cache to keep fresh
            refresh_interval: Interval between refresh checks in seconds
        """
        self._cache = cache
        self.refresh_interval = refresh_interval or settings.refresh_interval_seconds
        self.is_running = False
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the background refresh loop."""
        if self.is_running:
            logger.warning("Gallery refresh service already running")
            return

        self.is_running = True
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info("Gallery refresh service started")

    async def stop(self) -> None:
        """Stop the background refresh loop."""
        self.is_running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        logger.info("Gallery refresh service stopped")

    async def _refresh_loop(self) -> None:
        """Main refresh loop, runs until ``is_running`` is False."""
        while self.is_running:
            try:
                await self.refresh_once()
            except asyncio.CancelledError:
                raise
            except DirectoryAccessError as e:
                logger.warning(f"Gallery background refresh failed: {e}")
            except Exception as e:
                logger.error(f"Error in gallery background refresh: {e}")
            await asyncio.sleep(self.refresh_interval)

    async def refresh_once(self) -> int:
        """Run a single freshness check.

        Returns:
            Number of entries in the index afterwards
        """
        snapshot = await self._cache.ensure_fresh()
        logger.debug(f"Gallery refresh check: {len(snapshot)} entries")
        return len(snapshot)
