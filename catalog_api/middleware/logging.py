"""
Catalog API — Request Logging Middleware
==========================================

What:  One access-log line per HTTP request.
How:   Measures wall time around the handler and logs method, path, query
       string, status, duration, request ID and client IP. The level
       follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.

Not logged: request bodies (product payloads may carry vendor data) and
headers (X-User-ID is an identity).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from catalog_api.middleware.request_id import request_id_var

logger = logging.getLogger("catalog_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Health checks are skipped; they arrive every few seconds.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        query = request.url.query
        rid = request_id_var.get("")

        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s%s %d %.1fms [%s] from %s",
            method,
            path,
            f"?{query}" if query else "",
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
