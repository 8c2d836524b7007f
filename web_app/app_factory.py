"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from config import Config
from lib.counter import VisitCounter
from lib.database.base import URLStoreBase
from lib.errors import StoreError
from lib.service import URLShortenerService
from lib.common.logging_config import get_logger

from .api import api_router
from .web import web_router
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware
from .responses import error_response, CANNOT_CONNECT_TO_DB, CANNOT_PARSE_JSON


def create_app(
    config: Config,
    store: Optional[URLStoreBase] = None,
    counter: Optional[VisitCounter] = None,
    service: Optional[URLShortenerService] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Configuration instance
        store: Store instance (set by the lifespan when omitted)
        counter: Visit counter (set by the lifespan when omitted)
        service: Service instance (set by the lifespan when omitted)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="URL shortening service backed by Redis",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.config = config
    app.state.store = store
    app.state.counter = counter
    app.state.service = service

    logger = get_logger("web")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in errors
        )
        return error_response(status.HTTP_400_BAD_REQUEST, CANNOT_PARSE_JSON, detail)

    @app.exception_handler(StoreError)
    async def store_exception_handler(request: Request, exc: StoreError):
        logger.error(f"{request.method} {request.url.path}: {exc}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, CANNOT_CONNECT_TO_DB)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept"],
    )

    app.add_middleware(
        ForwardedHeadersMiddleware,
        base_url=config.base_url,
        path_prefix=config.path_prefix,
    )
    app.add_middleware(LoggingMiddleware)

    # /api/* before the catch-all /{short_code}
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Redirect"])

    return app
