"""FastAPI application factory."""

import logging
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from yaus import URLShortenerService
from yaus.hasher import Hasher
from yaus.common.logging_config import get_logger
from yaus.storage import Backend

from .api import api_router
from .middleware.logging import LoggingMiddleware


def create_app(
    backend: Backend,
    hasher: Optional[Hasher] = None,
    config=None,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        backend: Storage backend instance
        hasher: Optional hasher instance (MD5 if not specified)
        config: Optional settings instance
        logger: Optional logger

    Returns:
        Configured FastAPI app
    """
    logger = logger or get_logger("web")

    app = FastAPI(
        title="YAUS",
        description="Yet another URL shortener",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.backend = backend
    app.state.config = config
    app.state.service = URLShortenerService(
        backend=backend,
        hasher=hasher,
        logger=logger,
        validate_urls=bool(config and config.validate_urls),
    )

    app.add_middleware(LoggingMiddleware, logger=logger)

    @app.exception_handler(RequestValidationError)
    async def handle_decode_error(request: Request, exc: RequestValidationError):
        logger.warning(f"Undecodable request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body", "detail": str(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": _reason(exc.status_code), "detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    app.include_router(api_router, tags=["API"])

    return app


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"
