"""
Order Desk Backend - Request ID Middleware
============================================

What:  Assigns a short correlation ID to each request and echoes it back.
How:   Uses the client's X-Request-ID header when present, otherwise a new
       UUID prefix; stores it in a ContextVar for log lines and in
       request.state for route handlers.
When:  Wraps every request (added after the access logger, so it runs first).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request/response pair with an X-Request-ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
