"""Redirect route: GET /{short_code}."""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse
from starlette.background import BackgroundTask

from ..api.schemas import ErrorResponse
from ..responses import error_response, SHORT_NOT_FOUND, CANNOT_CONNECT_TO_DB
from lib.errors import ShortCodeNotFoundError, StoreError

router = APIRouter()

logger = logging.getLogger("url_shortener.web")


@router.get(
    "/{short_code}",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    responses={
        301: {"description": "Redirect to the original URL"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
        500: {"model": ErrorResponse, "description": "Store unreachable"},
    },
    summary="Resolve short URL",
)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL and count the visit.

    The counter increment runs as a background task after the redirect
    has been sent; its outcome never changes this response.
    """
    service = request.app.state.service

    try:
        original_url = await service.resolve(short_code)
    except ShortCodeNotFoundError:
        return error_response(status.HTTP_404_NOT_FOUND, SHORT_NOT_FOUND)
    except StoreError as e:
        logger.error(f"Lookup of {short_code} failed: {e}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, CANNOT_CONNECT_TO_DB)

    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_301_MOVED_PERMANENTLY,
        background=BackgroundTask(service.record_visit),
    )
