"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from lib.common.headers import extract_forwarded_headers, build_base_url, get_forwarded_path_prefix
from lib.common.url_builder import join_path_prefixes


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Resolve X-Forwarded-* headers into the public base URL of the request.

    Sets request.state.base_url and request.state.path_prefix, which the
    API uses to build short links.
    """

    def __init__(self, app, base_url: str, path_prefix: str = ""):
        super().__init__(app)
        self.base_url = base_url
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and extract forwarded headers."""
        headers = request.headers
        for name, value in extract_forwarded_headers(headers).items():
            setattr(request.state, name, value)

        request.state.base_url = build_base_url(headers, self.base_url)
        request.state.path_prefix = join_path_prefixes(
            get_forwarded_path_prefix(headers), self.path_prefix
        )

        response = await call_next(request)
        return response
