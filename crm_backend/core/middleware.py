"""
core/middleware.py
------------------
Per-request log context.

Each request gets an id (taken from the X-Request-ID header when the client
sends one) that is bound to every log line of the request and echoed back in
the response headers.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from crm_backend.core.logging import get_logger, start_request_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        start_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        started = time.perf_counter()

        response = await call_next(request)

        logger.info(
            "Request finished",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
