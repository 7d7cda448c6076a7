"""
Request Logging Middleware

Logs one line per HTTP request:
    METHOD PATH STATUS LATENCY_MS IP:CLIENT_IP

and reports the processing time in the X-Process-Time response header.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("shortener.access")


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    The first X-Forwarded-For entry wins when the service sits behind a proxy.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {process_time * 1000:.2f}ms "
            f"IP:{get_client_ip(request)}"
        )

        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        return response


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
