"""Tests for thumbnail and poster lookup."""

from pathlib import Path

import pytest

from mediagallery.exceptions import MediaNotFoundError
from mediagallery.services.gallery import DerivativeLocator


@pytest.fixture
def thumbs(media_dir: Path) -> Path:
    path = media_dir / ".thumbnails"
    path.mkdir()
    return path


@pytest.fixture
def locator(thumbs: Path) -> DerivativeLocator:
    return DerivativeLocator(thumbnail_dir=thumbs, ttl_seconds=300.0)


class TestThumbnails:
    """``?thumbnail=true`` on images."""

    @pytest.mark.asyncio
    async def test_existing_thumbnail(
        self, locator: DerivativeLocator, thumbs: Path, media_dir: Path
    ) -> None:
        """A pre-generated thumbnail is served instead of the original."""
        (thumbs / "Apple.jpg").write_bytes(b"t")
        path = await locator.locate("Apple.jpg", media_dir / "Apple.jpg", True, False)
        assert path == thumbs / "Apple.jpg"

    @pytest.mark.asyncio
    async def test_missing_thumbnail_falls_back(
        self, locator: DerivativeLocator, media_dir: Path
    ) -> None:
        """Without a thumbnail the original is served."""
        original = media_dir / "Banana.jpg"
        assert await locator.locate("Banana.jpg", original, True, False) == original

    @pytest.mark.asyncio
    async def test_lookups_are_memoized(
        self, locator: DerivativeLocator, thumbs: Path, media_dir: Path
    ) -> None:
        """A thumbnail created after a miss shows up only once the memo is cleared."""
        original = media_dir / "Banana.jpg"
        assert await locator.locate("Banana.jpg", original, True, False) == original

        (thumbs / "Banana.jpg").write_bytes(b"t")
        assert await locator.locate("Banana.jpg", original, True, False) == original

        locator.clear()
        assert await locator.locate("Banana.jpg", original, True, False) == thumbs / "Banana.jpg"

    @pytest.mark.asyncio
    async def test_thumbnail_flag_on_video_is_ignored(
        self, locator: DerivativeLocator, media_dir: Path
    ) -> None:
        """Videos asked for a thumbnail get the original file."""
        original = media_dir / "clip.mp4"
        assert await locator.locate("clip.mp4", original, True, False) == original


class TestPosters:
    """``?poster=true`` on videos."""

    @pytest.mark.asyncio
    async def test_existing_poster(
        self, locator: DerivativeLocator, thumbs: Path, media_dir: Path
    ) -> None:
        """The poster is the video stem with a .jpg extension."""
        (thumbs / "clip.jpg").write_bytes(b"p")
        path = await locator.locate("clip.mp4", media_dir / "clip.mp4", False, True)
        assert path == thumbs / "clip.jpg"

    @pytest.mark.asyncio
    async def test_placeholder(self, thumbs: Path, tmp_path: Path, media_dir: Path) -> None:
        """Without a poster the placeholder image is served."""
        placeholder = tmp_path / "placeholder.jpg"
        placeholder.write_bytes(b"ph")
        locator = DerivativeLocator(thumbnail_dir=thumbs, placeholder=placeholder)
        path = await locator.locate("clip.mp4", media_dir / "clip.mp4", False, True)
        assert path == placeholder

    @pytest.mark.asyncio
    async def test_no_poster_no_placeholder(
        self, locator: DerivativeLocator, media_dir: Path
    ) -> None:
        """Without poster or placeholder the request is a 404."""
        with pytest.raises(MediaNotFoundError):
            await locator.locate("clip.mp4", media_dir / "clip.mp4", False, True)
