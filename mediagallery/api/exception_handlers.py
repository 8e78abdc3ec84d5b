"""
Exception handlers for converting domain exceptions to HTTP responses.

This module maps gallery domain exceptions to appropriate HTTP status codes
and response formats for the API layer using FastAPI decorators.
"""

from typing import TYPE_CHECKING

from fastapi import Request, status
from fastapi.responses import JSONResponse

from mediagallery.utils.logger import logger

if TYPE_CHECKING:
    from fastapi import FastAPI


def setup_exception_handlers(app: "FastAPI") -> None:
    """Setup exception handlers using decorators.

    Args:
        app: FastAPI application instance
    """
    from mediagallery.exceptions.domain import (
        DirectoryAccessError,
        EntityNotFoundError,
        GalleryError,
        RangeNotSatisfiableError,
        ValidationError,
    )

    @app.exception_handler(EntityNotFoundError)
    async def handle_entity_not_found(_: Request, exc: EntityNotFoundError) -> JSONResponse:
        """Convert EntityNotFoundError to 404 response."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc) if str(exc) else "Resource not found"},
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        """Convert ValidationError to 400 response."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc) if str(exc) else "Invalid request parameters"},
        )

    @app.exception_handler(RangeNotSatisfiableError)
    async def handle_range_not_satisfiable(
        _: Request, exc: RangeNotSatisfiableError
    ) -> JSONResponse:
        """Convert RangeNotSatisfiableError to 416 response."""
        return JSONResponse(
            status_code=416,
            content={"detail": str(exc)},
            headers={"Content-Range": f"bytes */{exc.total}", "Accept-Ranges": "bytes"},
        )

    @app.exception_handler(DirectoryAccessError)
    async def handle_directory_access(request: Request, exc: DirectoryAccessError) -> JSONResponse:
        """Convert DirectoryAccessError to 503 response."""
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        # Don't expose filesystem layout to clients
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Media directory is not accessible", "images": []},
        )

    @app.exception_handler(GalleryError)
    async def handle_gallery_error(request: Request, exc: GalleryError) -> JSONResponse:
        """Convert any other GalleryError to 500 response."""
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Gallery operation failed"},
        )

    @app.exception_handler(FileNotFoundError)
    async def handle_file_not_found(_: Request, exc: FileNotFoundError) -> JSONResponse:
        """Convert FileNotFoundError to 404 response."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Resource not found"},
        )
