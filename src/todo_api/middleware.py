"""
Access log middleware: one line per request with method, path, status and duration.
"""
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging_config import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request after the response is produced."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "-"

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error('"%s %s" failed from %s in %.3fs: %s', method, path, client_ip, duration, e)
            raise

        duration = time.perf_counter() - start_time
        logger.info('"%s %s" %d from %s in %.3fs', method, path, response.status_code, client_ip, duration)
        return response
