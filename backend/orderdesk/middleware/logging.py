"""
Order Desk Backend - Request Logging Middleware
=================================================

What:  One access-log line per HTTP request: method, path, status, duration.
How:   Times the downstream call and logs at a level chosen from the status.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Request bodies are not logged here; the action router logs the action name,
and the full payload only at DEBUG.

Note: POST / answers 200 even for failed actions (the envelope carries the
outcome), so an error envelope shows up as INFO here and as WARNING/ERROR in
the orderdesk.services.action_router logger.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from orderdesk.middleware.request_id import request_id_var

logger = logging.getLogger("orderdesk.access")

# Probes hit these every few seconds
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        if path in QUIET_PATHS:
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
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
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
