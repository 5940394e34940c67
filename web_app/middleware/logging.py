"""Per-request access log with link slug and outcome code."""

import logging
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shortlinks.common.logging_config import get_logger


def request_slug(request: Request) -> Optional[str]:
    """Slug addressed by the request: path parameter (/r, /stats) or query (/new, /delete.py)."""
    return request.path_params.get("slug") or request.query_params.get("slug")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request once the response status is known.

    Exception handlers record the error code in ``request.state.error_code``;
    successful requests log ``ok``.
    """

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("web")

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        # Created here so handlers further down share the same state dict
        request.state.error_code = None

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        slug = request_slug(request)
        code = request.state.error_code or "ok"

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        self.logger.log(
            level,
            f"{request.method} {request.url.path}"
            f"{f' slug={slug}' if slug else ''} -> {response.status_code} {code} "
            f"({duration_ms:.2f}ms)",
            extra={
                "method": request.method,
                "path": request.url.path,
                "slug": slug,
                "status": response.status_code,
                "code": code,
                "duration_ms": duration_ms,
            },
        )
        return response
