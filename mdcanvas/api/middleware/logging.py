"""Request logging middleware."""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("mdcanvas.api")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with an id, its status and how long it took."""

    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/health"]

    async def dispatch(self, request: Request, call_next) -> Response:
        if any(request.url.path.startswith(p) for p in self.exclude_paths):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        logger.info(f"[{request_id}] {method} {path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{request_id}] {method} {path} - ERROR - {duration:.2f}ms - {e}")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        log_level = logging.INFO if status < 400 else logging.WARNING if status < 500 else logging.ERROR
        logger.log(log_level, f"[{request_id}] {method} {path} - {status} - {duration:.2f}ms")

        response.headers["X-Request-ID"] = request_id
        return response
