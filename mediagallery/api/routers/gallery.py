"""
Gallery router.

Listing endpoints read the TTL-refreshed index cache; media endpoints resolve
a name through the cache and hand the file to the range streamer.
"""

from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Header, Query, Request
from fastapi.responses import Response, StreamingResponse
from starlette.background import BackgroundTask

from mediagallery.api.dependencies import (
    DerivativeLocatorDep,
    IndexCacheDep,
    PaginationDep,
    RangeStreamerDep,
)
from mediagallery.exceptions import MediaNotFoundError
from mediagallery.services.gallery import (
    CacheEntry,
    CacheStats,
    DirectoryIndexCache,
    GalleryItem,
    GalleryPage,
    LettersResponse,
    MediaKind,
    Pagination,
    TagsResponse,
)
from mediagallery.services.gallery.models import is_supported_media
from mediagallery.services.streaming import MediaStream

router = APIRouter()

VIDEO_HEADERS = {
    "Cache-Control": "no-cache",
    "Cross-Origin-Resource-Policy": "cross-origin",
}


def _media_url(request: Request, name: str) -> str:
    root_path = request.scope.get("root_path", "").rstrip("/")
    return f"{root_path}{request.app.url_path_for('get_media', name=name)}"


def _to_item(request: Request, entry: CacheEntry) -> GalleryItem:
    url = _media_url(request, quote(entry.name))
    if entry.media_kind == MediaKind.VIDEO:
        thumbnail_url = f"{url}?poster=true"
    else:
        thumbnail_url = f"{url}?thumbnail=true"
    return GalleryItem(
        name=entry.name,
        url=url,
        thumbnail_url=thumbnail_url,
        size=entry.size,
        modified=entry.modified_at,
        type=entry.extension,
        kind=entry.media_kind,
        tags=sorted(entry.tags),
    )


def _is_plain_filename(name: str) -> bool:
    return bool(name) and name not in {".", ".."} and "/" not in name and "\\" not in name


def resolve_media_path(cache: DirectoryIndexCache, name: str) -> Path:
    """Map a media name to a path under the media root.

    Cache hits win; otherwise the name is tried directly under the root so
    media files added since the last refresh can be served. The fallback
    applies the same extension filter as the index and never serves dotfiles.

    Raises:
        MediaNotFoundError: If the name is not indexed and is not a plain,
            visible media filename
    """
    try:
        return cache.resolve(name).path
    except MediaNotFoundError:
        if not _is_plain_filename(name) or name.startswith(".") or not is_supported_media(name):
            raise
        return cache.root / name


def _to_response(stream: MediaStream) -> Response:
    if stream.status_code == 304:
        return Response(
            status_code=304,
            headers={k: v for k, v in stream.headers.items() if k != "Content-Type"},
            background=BackgroundTask(stream.aclose),
        )
    return StreamingResponse(
        stream.iter_bytes(),
        status_code=stream.status_code,
        headers=stream.headers,
        background=BackgroundTask(stream.aclose),
    )


@router.get("/images", response_model=GalleryPage)
async def list_images(
    request: Request,
    cache: IndexCacheDep,
    pagination: PaginationDep,
    letter: str | None = Query(None, description="Only names starting with this letter"),
    tag: str | None = Query(None, description="Only entries carrying this tag"),
) -> GalleryPage:
    """List one page of indexed media.

    Args:
        request: FastAPI request (for building media URLs)
        cache: Gallery index cache
        pagination: Page and limit parameters
        letter: Optional first-letter filter
        tag: Optional tag filter

    Returns:
        Page of media entries with pagination totals
    """
    snapshot = await cache.ensure_fresh()
    result = cache.list_page(
        pagination["page"], pagination["limit"], letter=letter, tag=tag, snapshot=snapshot
    )
    return GalleryPage(
        images=[_to_item(request, entry) for entry in result.items],
        pagination=Pagination(
            total=result.total,
            total_all=result.total_all,
            page=result.page,
            limit=result.page_size,
            total_pages=result.total_pages,
            has_more=result.has_more,
            current_letter=result.letter,
            current_tag=result.tag,
        ),
    )


@router.get("/letters", response_model=LettersResponse)
async def list_letters(cache: IndexCacheDep) -> LettersResponse:
    """First letters present in the gallery and the total number of entries."""
    await cache.ensure_fresh()
    letters, total = cache.list_letters()
    return LettersResponse(letters=letters, total=total)


@router.get("/tags", response_model=TagsResponse)
async def list_tags(cache: IndexCacheDep) -> TagsResponse:
    """All tags present in the gallery."""
    await cache.ensure_fresh()
    tags = cache.list_tags()
    return TagsResponse(tags=tags, total=len(tags))


@router.get("/stats", response_model=CacheStats)
async def cache_stats(cache: IndexCacheDep) -> CacheStats:
    """Index cache statistics; does not trigger a refresh."""
    return cache.stats()


@router.get("/images/{name}", name="get_media")
async def get_media(
    name: str,
    cache: IndexCacheDep,
    streamer: RangeStreamerDep,
    derivatives: DerivativeLocatorDep,
    thumbnail: bool = Query(False),
    poster: bool = Query(False),
    range_header: str | None = Header(None, alias="Range"),
    if_none_match: str | None = Header(None, alias="If-None-Match"),
) -> Response:
    """Serve an image or video, honouring ``Range`` requests.

    Args:
        name: Media filename
        cache: Gallery index cache
        streamer: Range streamer
        derivatives: Thumbnail and poster lookup
        thumbnail: Serve the pre-generated thumbnail of an image when present
        poster: Serve the pre-generated poster frame of a video
        range_header: Raw ``Range`` header
        if_none_match: Raw ``If-None-Match`` header

    Returns:
        200, 206 or 304 streaming response
    """
    path = resolve_media_path(cache, name)
    if thumbnail or poster:
        path = await derivatives.locate(name, path, thumbnail, poster)
    stream = await streamer.serve(path, range_header=range_header, if_none_match=if_none_match)
    return _to_response(stream)


@router.get("/video/{name}")
async def get_video(
    name: str,
    cache: IndexCacheDep,
    streamer: RangeStreamerDep,
    range_header: str | None = Header(None, alias="Range"),
) -> Response:
    """Serve a video with range support and cross-origin friendly headers.

    Args:
        name: Video filename
        cache: Gallery index cache
        streamer: Range streamer
        range_header: Raw ``Range`` header

    Returns:
        200 or 206 streaming response
    """
    if MediaKind.from_name(name) != MediaKind.VIDEO:
        raise MediaNotFoundError(name)
    path = resolve_media_path(cache, name)
    stream = await streamer.serve(path, range_header=range_header, extra_headers=VIDEO_HEADERS)
    return _to_response(stream)
