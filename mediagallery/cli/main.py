#!/usr/bin/env python3
"""Media gallery CLI - run the server or inspect a media directory."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from mediagallery.exceptions import DirectoryAccessError, InvalidPaginationError
from mediagallery.services.gallery import DirectoryIndexCache, load_tag_file
from mediagallery.settings import settings
from mediagallery.utils.logger import logger, setup_logging


def init_project(path: str, media_root: str | None = None) -> None:
    """Write a starter settings.toml into the specified directory."""
    project_path = Path(path).resolve()
    project_path.mkdir(parents=True, exist_ok=True)

    media = media_root or settings.media_root
    settings_content = f"""# Media gallery configuration

# Server settings
port = {settings.port}
host = "{settings.host}"
debug = false

# Media settings
media_root = "{media}"
# tag_file = "data/image-tags.json"
# placeholder_image = "static/video-thumbnail.jpg"

# Cache settings
cache_ttl_seconds = {settings.cache_ttl_seconds}
background_refresh = false

# Listing settings
default_page_size = {settings.default_page_size}
max_page_size = {settings.max_page_size}
"""

    settings_file = project_path / "settings.toml"
    if settings_file.exists():
        logger.warning(f"Settings file already exists: {settings_file}")
        return
    settings_file.write_text(settings_content)
    logger.info(f"Created settings file: {settings_file}")


def run_server(host: str | None = None, port: int | None = None) -> None:
    """Run the gallery development server."""
    import uvicorn

    host = host or settings.host or "127.0.0.1"
    port = port or settings.port or 3000

    logger.info(f"Starting media gallery at http://{host}:{port}")

    uvicorn.run(
        "mediagallery.api.app:app",
        host=host,
        port=port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )


async def scan_directory(
    root: str | None,
    page: int | None = None,
    limit: int | None = None,
    letter: str | None = None,
    tag: str | None = None,
) -> dict[str, object]:
    """Index a directory once and summarize it.

    Args:
        root: Directory to scan; the configured media root when omitted
        page: Optional page to include in the summary
        limit: Page size for ``page``
        letter: Letter filter for ``page``
        tag: Tag filter for ``page``

    Returns:
        JSON-serializable summary
    """
    cache = DirectoryIndexCache(
        root=Path(root) if root else settings.media_root_path,
        ttl_seconds=settings.cache_ttl_seconds,
        seed_tags=load_tag_file(settings.tag_file_path),
    )
    await cache.ensure_fresh()
    letters, total = cache.list_letters()
    summary: dict[str, object] = {
        "root": str(cache.root),
        "total": total,
        "letters": letters,
        "tags": cache.list_tags(),
    }
    if page is not None:
        result = cache.list_page(page, limit or settings.default_page_size, letter, tag)
        summary["page"] = {
            "page": result.page,
            "total": result.total,
            "totalPages": result.total_pages,
            "hasMore": result.has_more,
            "names": [entry.name for entry in result.items],
        }
    return summary


def main() -> None:
    """Main CLI entry point."""
    setup_logging(settings)

    parser = argparse.ArgumentParser(
        prog="mediagallery", description="Media gallery - directory index and range streaming"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init command
    init_parser = subparsers.add_parser("init", help="Write a starter settings.toml")
    init_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory for settings.toml (default: current directory)",
    )
    init_parser.add_argument("--media-root", type=str, default=None, help="Media directory")

    # run command
    run_parser = subparsers.add_parser("run", help="Run the development server")
    run_parser.add_argument(
        "--host", type=str, default=None, help="Host to bind to (default: from settings)"
    )
    run_parser.add_argument(
        "--port", type=int, default=None, help="Port to bind to (default: from settings)"
    )

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Index a media directory and print a summary")
    scan_parser.add_argument("root", nargs="?", default=None, help="Directory to index")
    scan_parser.add_argument("--page", type=int, default=None, help="Also list this page")
    scan_parser.add_argument("--limit", type=int, default=None, help="Page size")
    scan_parser.add_argument("--letter", type=str, default=None, help="First-letter filter")
    scan_parser.add_argument("--tag", type=str, default=None, help="Tag filter")

    args = parser.parse_args()

    if args.command == "init":
        init_project(args.path, args.media_root)
    elif args.command == "run":
        run_server(args.host, args.port)
    elif args.command == "scan":
        try:
            summary = asyncio.run(
                scan_directory(args.root, args.page, args.limit, args.letter, args.tag)
            )
        except (DirectoryAccessError, InvalidPaginationError) as e:
            logger.error(str(e))
            sys.exit(1)
        print(json.dumps(summary, indent=2, ensure_ascii=False))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
