"""
Request Context Middleware

Tags every request with an id and reports how long it took, both on
request.state and as response headers.
"""
import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
REQUEST_DURATION_HEADER = "x-request-duration"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        request.state.started_at = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - request.state.started_at) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[REQUEST_DURATION_HEADER] = f"{duration_ms:.1f}ms"
        logger.debug(f"{request.method} {request.url.path} {response.status_code} {duration_ms:.1f}ms [{request_id}]")
        return response
