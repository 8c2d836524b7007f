"""API routes implementation."""

import logging
from fastapi import APIRouter, Request, status
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLInfoResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from ..responses import error_response, SHORT_NOT_FOUND, SHORT_IN_USE
from lib.common.url_builder import build_short_url
from lib.errors import (
    ShortCodeConflictError,
    ShortCodeGenerationError,
    ShortCodeNotFoundError,
    ValidationError,
)

router = APIRouter()

logger = logging.getLogger("url_shortener.api")


def _short_url_for(request: Request, short_code: str) -> str:
    """Public short URL, honouring proxy headers resolved by ForwardedHeadersMiddleware."""
    config = request.app.state.config
    base_url = getattr(request.state, "base_url", None) or config.base_url
    path_prefix = getattr(request.state, "path_prefix", None)
    if path_prefix is None:
        path_prefix = config.path_prefix
    return build_short_url(short_code=short_code, base_url=base_url, path_prefix=path_prefix)


@router.post(
    "/v1",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        500: {"model": ErrorResponse, "description": "Store unreachable"},
    },
    summary="Create short URL",
    description="Create a shortened URL. Optionally provide a custom short code and an expiry in hours.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service

    try:
        result = await service.create_short_url(
            original_url=body.url,
            custom_code=body.short,
            expiry_hours=body.expiry,
        )
    except ShortCodeConflictError as e:
        return error_response(status.HTTP_409_CONFLICT, SHORT_IN_USE, str(e))
    except ValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except ShortCodeGenerationError as e:
        logger.error(f"Short code generation exhausted for {body.url}: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    short_url = _short_url_for(request, result["short_code"])

    return ShortenResponse(
        url=result["original_url"],
        short=short_url,
        short_code=result["short_code"],
        short_url=short_url,
        shortened_url=short_url,
        expiry=result["expiry_hours"],
        created_at=result["created_at"],
    )


@router.get(
    "/v1/urls/{short_code}",
    response_model=URLInfoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Store unreachable"},
    },
    summary="Get URL information",
    description="Get the original URL behind a short code without counting a visit.",
)
async def get_url_info(request: Request, short_code: str):
    """Get information about a shortened URL."""
    service = request.app.state.service

    try:
        mapping = await service.get_url_info(short_code)
    except ShortCodeNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, SHORT_NOT_FOUND)

    return URLInfoResponse(
        short_code=mapping.short_code,
        original_url=mapping.original_url,
        short_url=_short_url_for(request, mapping.short_code),
        ttl_seconds=mapping.ttl_seconds,
    )


@router.get(
    "/v1/stats",
    response_model=StatisticsResponse,
    responses={
        500: {"model": ErrorResponse, "description": "Store unreachable"},
    },
    summary="Get statistics",
    description="Get the global visit counter.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check that both logical stores answer PING.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        mapping_store="healthy" if health["mapping_store"] else "unhealthy",
        counter_store="healthy" if health["counter_store"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
