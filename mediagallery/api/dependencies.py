"""
Common dependencies for gallery API endpoints.

The index cache and the streamer are created once per application in
``create_app`` and kept on ``app.state``; these helpers hand them to routes.
"""

from typing import Annotated

from fastapi import Depends, Query, Request

from ..services.gallery import DerivativeLocator, DirectoryIndexCache
from ..services.streaming import RangeStreamer
from ..settings import Settings


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    app_settings: Settings = request.app.state.settings
    return app_settings


def get_index_cache(request: Request) -> DirectoryIndexCache:
    """Gallery index cache owned by the application."""
    cache: DirectoryIndexCache = request.app.state.index_cache
    return cache


def get_derivative_locator(request: Request) -> DerivativeLocator:
    """Thumbnail and poster lookup owned by the application."""
    locator: DerivativeLocator = request.app.state.derivatives
    return locator


def get_range_streamer(request: Request) -> RangeStreamer:
    """Range streamer owned by the application."""
    streamer: RangeStreamer = request.app.state.range_streamer
    return streamer


async def pagination_parameters(
    request: Request,
    page: int = Query(1, description="1-based page number"),
    limit: int | None = Query(None, description="Maximum number of items to return"),
) -> dict[str, int]:
    """
    Get pagination query parameters.

    Values below 1 are passed through so the index cache reports them as
    an invalid pagination request; ``limit`` is capped at the configured maximum.

    Args:
        request: FastAPI request object
        page: Page number
        limit: Page size

    Returns:
        Dictionary with page and limit parameters
    """
    app_settings = get_app_settings(request)
    if limit is None:
        limit = app_settings.default_page_size
    limit = min(limit, app_settings.max_page_size)
    return {"page": page, "limit": limit}


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
IndexCacheDep = Annotated[DirectoryIndexCache, Depends(get_index_cache)]
RangeStreamerDep = Annotated[RangeStreamer, Depends(get_range_streamer)]
DerivativeLocatorDep = Annotated[DerivativeLocator, Depends(get_derivative_locator)]
PaginationDep = Annotated[dict[str, int], Depends(pagination_parameters)]
