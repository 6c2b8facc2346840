# sandfleet/middleware/request_logging.py
from __future__ import annotations

import logging
import time
import uuid
from typing import Iterable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("sandfleet.request")


DEFAULT_IGNORED_PREFIXES: Tuple[str, ...] = (
    "/api/healthz",
    "/api/readyz",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
)


def client_ip(request: Request) -> str:
    # First hop of X-Forwarded-For when behind the department proxy
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    client = request.client
    return client.host if client else "unknown"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per HTTP request with trace id, caller and duration.
    Every response carries X-Request-ID. Health and docs paths are not logged.
    """

    def __init__(self, app, ignored_prefixes: Iterable[str] = DEFAULT_IGNORED_PREFIXES):
        super().__init__(app)
        self.ignored_prefixes = tuple(ignored_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        method = request.method.upper()

        trace_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.trace_id = trace_id

        skip = method == "OPTIONS" or path.startswith(self.ignored_prefixes)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            if not skip:
                logger.exception(
                    "request CRASH %s %s ip=%s dur_ms=%s trace_id=%s",
                    method,
                    path,
                    client_ip(request),
                    int((time.perf_counter() - start) * 1000),
                    trace_id,
                )
            raise

        response.headers["X-Request-ID"] = trace_id
        if skip:
            return response

        status = response.status_code
        logger.log(
            _level_for(status),
            "request %s %s -> %s user=%s ip=%s dur_ms=%s trace_id=%s",
            method,
            path,
            status,
            getattr(request.state, "user_id", "-"),
            client_ip(request),
            int((time.perf_counter() - start) * 1000),
            trace_id,
        )
        return response
