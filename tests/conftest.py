"""Shared fixtures: a small media directory and an app client over it."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mediagallery.api.app import create_app
from mediagallery.services.gallery import DirectoryIndexCache
from mediagallery.settings import Settings

BANANA_BYTES = bytes(range(200))


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """Media root holding Apple.jpg (100 B), Banana.jpg (200 B) and apple2.jpg (50 B)."""
    root = tmp_path / "media"
    root.mkdir()
    (root / "Apple.jpg").write_bytes(b"a" * 100)
    (root / "Banana.jpg").write_bytes(BANANA_BYTES)
    (root / "apple2.jpg").write_bytes(b"c" * 50)
    return root


@pytest.fixture
def cache(media_dir: Path) -> DirectoryIndexCache:
    """Index cache over the media directory with the default TTL."""
    return DirectoryIndexCache(root=media_dir, ttl_seconds=300.0)


@pytest.fixture
def test_settings(media_dir: Path) -> Settings:
    """Settings pointing at the temporary media directory."""
    return Settings(
        media_root=str(media_dir),
        cache_ttl_seconds=300.0,
        background_refresh=False,
        default_page_size=20,
        max_page_size=1000,
    )


@pytest_asyncio.fixture
async def client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """API client bound to an app built from ``test_settings``."""
    app = create_app(test_settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
