"""
Users API — Request ID Middleware
===================================

What:  Tags each request with a short correlation ID and echoes it in the response.
Why:   Lets one request's log lines (access log, service rejections, tracebacks)
       be grouped together, and lets a client quote the ID in a bug report.
How:   Reuses an incoming X-Request-ID header or generates one, stores it in a
       ContextVar for loggers, and sets X-Request-ID on the response.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ContextVar (not threading.local): concurrent requests share one thread
# under asyncio, and each coroutine needs its own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a request ID and exposes it via ContextVar, request.state and header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars is enough to correlate log lines within a deployment
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
