"""API routes implementation."""

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from yaus.common.logging_config import get_logger
from yaus.storage import KeyNotFoundError, StorageError

from .schemas import ErrorResponse, ShortenRequest, ShortenResponse

router = APIRouter()

logger = get_logger("web")


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request body"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Create short URL",
    description="Store the URL under a key derived from it and return the key.",
)
async def shorten(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        key = await service.shorten(body.url)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except StorageError as e:
        logger.error(f"Storage put failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store URL",
        )

    return ShortenResponse(hash=key)


@router.get(
    "/{hash}",
    status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    response_class=RedirectResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown key"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
    summary="Redirect to original URL",
    description="Temporary redirect to the URL stored under the key.",
)
async def redirect(request: Request, hash: str):
    """Redirect to the original URL."""
    service = request.app.state.service

    try:
        url = await service.resolve(hash)
    except KeyNotFoundError:
        logger.info(f"Unknown key: {hash}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Key '{hash}' not found",
        )
    except StorageError as e:
        logger.error(f"Storage get failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to resolve key",
        )

    # Temporary: the mapping under a key may be overwritten
    return RedirectResponse(url=url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
