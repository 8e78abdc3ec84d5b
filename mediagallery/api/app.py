"""
Main API application module for the media gallery.

This module creates and configures the FastAPI application with the gallery
router, exception handlers, and the index cache lifecycle.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediagallery import __version__
from mediagallery.api.exception_handlers import setup_exception_handlers
from mediagallery.api.routers import gallery
from mediagallery.exceptions import DirectoryAccessError
from mediagallery.services.gallery import (
    DerivativeLocator,
    DirectoryIndexCache,
    GalleryRefreshService,
)
from mediagallery.services.streaming import RangeStreamer
from mediagallery.settings import Settings
from mediagallery.settings import settings as default_settings
from mediagallery.utils.logger import logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Warms the index cache and starts the background refresh service if enabled.
    """
    cache: DirectoryIndexCache = app.state.index_cache
    app_settings: Settings = app.state.settings

    try:
        snapshot = await cache.ensure_fresh()
        logger.info(f"Gallery index warmed with {len(snapshot)} entries from {cache.root}")
    except DirectoryAccessError as e:
        # Listing requests retry on their own; startup must not fail on a missing volume
        logger.warning(f"Gallery warm-up skipped: {e}")

    refresh_service: GalleryRefreshService | None = None
    if app_settings.background_refresh:
        refresh_service = GalleryRefreshService(
            cache, refresh_interval=app_settings.refresh_interval_seconds
        )
        await refresh_service.start()

    logger.info("Application startup complete")

    try:
        yield
    finally:
        if refresh_service is not None:
            await refresh_service.stop()
        await cache.shutdown()
        logger.info("Application shutdown")


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app from; the module settings when omitted

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or default_settings
    setup_logging(app_settings)

    app = FastAPI(
        title="Media Gallery",
        description="Paginated media listings and range-request streaming",
        version=__version__,
        debug=app_settings.debug,
        lifespan=lifespan,
        root_path=app_settings.root_url if app_settings.root_url != "/" else "",
    )

    app.state.settings = app_settings
    app.state.index_cache = DirectoryIndexCache.from_settings(app_settings)
    app.state.range_streamer = RangeStreamer(chunk_size=app_settings.stream_chunk_size)
    app.state.derivatives = DerivativeLocator(
        thumbnail_dir=app_settings.thumbnail_dir,
        placeholder=app_settings.placeholder_image_path,
        ttl_seconds=app_settings.cache_ttl_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["Range", "Accept", "Content-Type", "If-None-Match"],
        expose_headers=["Content-Range", "Accept-Ranges", "Content-Length", "ETag"],
    )

    setup_exception_handlers(app)

    app.include_router(gallery.router, prefix="/gallery", tags=["Gallery"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    return app


# Create default application instance
app = create_app()
