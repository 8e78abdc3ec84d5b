"""In-memory index of a media directory, rebuilt on a time-to-live basis."""

import asyncio
import math
import os
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path

from mediagallery.exceptions import DirectoryAccessError, InvalidPaginationError, MediaNotFoundError
from mediagallery.services.gallery.models import (
    CacheEntry,
    CacheStats,
    IndexSnapshot,
    MediaKind,
    PageResult,
    is_supported_media,
)
from mediagallery.services.gallery.ordering import sort_entries
from mediagallery.services.gallery.tags import derive_tags, load_tag_file, merge_tags
from mediagallery.settings import Settings
from mediagallery.utils.logger import logger

EMPTY_SNAPSHOT = IndexSnapshot(entries={}, ordered=(), letters=(), tags=(), built_at=0.0)


def build_snapshot(entries: Mapping[str, CacheEntry]) -> IndexSnapshot:
    """Build an immutable snapshot with its derived indexes.

    Args:
        entries: Mapping of name to entry; copied, never retained

    Returns:
        IndexSnapshot ready to be swapped in
    """
    entries = dict(entries)
    letters = sorted({name[0].upper() for name in entries if name})
    tags = sorted({tag for entry in entries.values() for tag in entry.tags})
    return IndexSnapshot(
        entries=entries,
        ordered=sort_entries(entries.values()),
        letters=tuple(letters),
        tags=tuple(tags),
    )


class DirectoryIndexCache:
    """Queryable, periodically refreshed snapshot of one media directory.

    A single rebuild task at a time builds the index off the event loop and
    publishes it with one reference assignment; readers never lock and always see a complete
    snapshot. While a rebuild runs, other callers of ``ensure_fresh`` get the
    current (possibly stale) snapshot back at once instead of waiting.
    """

    def __init__(
        self,
        root: Path,
        ttl_seconds: float = 300.0,
        seed_tags: Mapping[str, tuple[str, ...]] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            root: Directory whose files are indexed (single level)
            ttl_seconds: Maximum snapshot age before ``ensure_fresh`` rebuilds
            seed_tags: Optional filename -> tags mapping merged into derived tags
            clock: Monotonic time source, injectable for tests
        """
        self._root = Path(root)
        self._ttl_seconds = ttl_seconds
        self._seed_tags = dict(seed_tags or {})
        self._clock = clock
        self._snapshot: IndexSnapshot = EMPTY_SNAPSHOT
        self._last_refreshed_at: float | None = None
        self._rebuild_task: asyncio.Task[IndexSnapshot] | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "DirectoryIndexCache":
        """Create a cache configured from application settings."""
        return cls(
            root=settings.media_root_path,
            ttl_seconds=settings.cache_ttl_seconds,
            seed_tags=load_tag_file(settings.tag_file_path),
        )

    @property
    def root(self) -> Path:
        return self._root

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def snapshot(self) -> IndexSnapshot:
        """Current snapshot; never partially built."""
        return self._snapshot

    @property
    def refreshing(self) -> bool:
        return self._rebuild_task is not None

    @property
    def last_refreshed_at(self) -> float | None:
        return self._last_refreshed_at

    def is_stale(self) -> bool:
        if self._last_refreshed_at is None:
            return True
        return self._clock() - self._last_refreshed_at > self._ttl_seconds

    def invalidate(self) -> None:
        """Force the next ``ensure_fresh`` to rebuild; the current data keeps serving."""
        self._last_refreshed_at = None

    async def ensure_fresh(self) -> IndexSnapshot:
        """Rebuild the index if it is older than the TTL.

        At most one rebuild is in flight. Callers arriving while one runs get
        the current snapshot without waiting. A rebuild, once started, runs to
        completion even if the caller that triggered it is cancelled.

        Returns:
            The snapshot current after this call

        Raises:
            DirectoryAccessError: If the directory cannot be listed and the
                index was never populated
        """
        if self._rebuild_task is not None or not self.is_stale():
            return self._snapshot

        task = asyncio.create_task(self._rebuild())
        self._rebuild_task = task
        task.add_done_callback(self._rebuild_done)
        return await asyncio.shield(task)

    def _rebuild_done(self, task: "asyncio.Task[IndexSnapshot]") -> None:
        self._rebuild_task = None
        if not task.cancelled() and task.exception() is not None:
            # Already surfaced to the triggering caller (if it is still waiting)
            logger.debug(f"Gallery rebuild finished with error: {task.exception()}")

    async def _rebuild(self) -> IndexSnapshot:
        started = time.perf_counter()
        try:
            entries = await asyncio.to_thread(self._scan_directory)
        except DirectoryAccessError as e:
            if self._snapshot is EMPTY_SNAPSHOT:
                logger.error(f"Gallery index unavailable: {e}")
                raise
            logger.warning(f"Gallery refresh failed, serving stale index: {e}")
            return self._snapshot

        snapshot = build_snapshot(entries)
        self._snapshot = snapshot
        self._last_refreshed_at = self._clock()
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.bind(
            metrics=True, component="index", entries=len(snapshot), duration_ms=round(elapsed_ms, 1)
        ).info(f"Indexed {len(snapshot)} media files in {self._root} ({elapsed_ms:.1f} ms)")
        return snapshot

    def _scan_directory(self) -> dict[str, CacheEntry]:
        """List and stat the media root (synchronous, call via to_thread).

        Returns:
            Mapping of filename to entry for every supported regular file

        Raises:
            DirectoryAccessError: If the root cannot be listed
        """
        entries: dict[str, CacheEntry] = {}
        try:
            with os.scandir(self._root) as it:
                dir_entries = list(it)
        except OSError as e:
            raise DirectoryAccessError(str(self._root), e.strerror or str(e)) from e

        for dir_entry in dir_entries:
            name = dir_entry.name
            if not is_supported_media(name):
                continue
            try:
                if not dir_entry.is_file():
                    continue
                stat = dir_entry.stat()
            except OSError as e:
                # Removed or unreadable between listing and stat
                logger.warning(f"Skipping {name}: {e}")
                continue

            entries[name] = CacheEntry(
                name=name,
                path=Path(dir_entry.path).absolute(),
                size=stat.st_size,
                modified_at=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
                media_kind=MediaKind.from_name(name),
                tags=merge_tags(derive_tags(name), self._seed_tags.get(name)),
            )

        logger.debug(f"Scanned {len(dir_entries)} directory entries, kept {len(entries)}")
        return entries

    def list_page(
        self,
        page: int,
        page_size: int,
        letter: str | None = None,
        tag: str | None = None,
        snapshot: IndexSnapshot | None = None,
    ) -> PageResult:
        """Return one page of the naturally ordered, optionally filtered entries.

        Args:
            page: 1-based page number
            page_size: Entries per page
            letter: Keep names starting with this prefix (case-insensitive)
            tag: Keep entries carrying this tag (case-insensitive)
            snapshot: Snapshot to read; the current one when omitted

        Returns:
            PageResult with the page slice and pagination totals

        Raises:
            InvalidPaginationError: If page or page_size is below 1
        """
        if page < 1 or page_size < 1:
            raise InvalidPaginationError(page, page_size)

        snap = snapshot if snapshot is not None else self._snapshot
        letter = letter or None
        tag = (tag.strip().lower() or None) if tag else None

        matching: tuple[CacheEntry, ...] | list[CacheEntry] = snap.ordered
        if letter is not None:
            prefix = letter.casefold()
            matching = [e for e in matching if e.name.casefold().startswith(prefix)]
        if tag is not None:
            matching = [e for e in matching if tag in e.tags]

        total = len(matching)
        start = (page - 1) * page_size
        items = tuple(matching[start : start + page_size])
        return PageResult(
            items=items,
            page=page,
            page_size=page_size,
            total=total,
            total_all=len(snap),
            total_pages=math.ceil(total / page_size),
            has_more=start + page_size < total,
            letter=letter,
            tag=tag,
        )

    def list_letters(self) -> tuple[list[str], int]:
        """Distinct uppercase first characters of all names, and the entry count."""
        snap = self._snapshot
        return list(snap.letters), len(snap)

    def list_tags(self) -> list[str]:
        return list(self._snapshot.tags)

    def resolve(self, name: str) -> CacheEntry:
        """Look up an entry by exact name.

        Raises:
            MediaNotFoundError: If no entry has that name
        """
        entry = self._snapshot.entries.get(name)
        if entry is None:
            raise MediaNotFoundError(name)
        return entry

    def stats(self) -> CacheStats:
        snap = self._snapshot
        kinds = [e.media_kind for e in snap.entries.values()]
        age = None
        if self._last_refreshed_at is not None:
            age = self._clock() - self._last_refreshed_at
        return CacheStats(
            entries=len(snap),
            images=kinds.count(MediaKind.IMAGE),
            videos=kinds.count(MediaKind.VIDEO),
            letters=len(snap.letters),
            tags=len(snap.tags),
            refreshing=self.refreshing,
            ttl_seconds=self._ttl_seconds,
            last_refresh_age_seconds=age,
        )

    async def shutdown(self) -> None:
        """Wait for an in-flight rebuild, then drop the index."""
        task = self._rebuild_task
        if task is not None:
            try:
                await task
            except DirectoryAccessError as e:
                logger.debug(f"Rebuild in flight at shutdown failed: {e}")
        self._snapshot = EMPTY_SNAPSHOT
        self._last_refreshed_at = None
        logger.info("Gallery index cache shutdown complete")
