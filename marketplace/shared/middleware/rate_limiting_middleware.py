# marketplace/shared/middleware/rate_limiting_middleware.py (async version)

"""
Middleware for request rate limiting.

Requests are counted per client address in the session cache, in fixed
windows, so the limit holds across every worker of the service.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

# Configure logger
logger = logging.getLogger(__name__)

# Documentation routes are never counted
UNLIMITED_PATHS = {"/docs", "/redoc", "/openapi.json", "/favicon.ico"}


class AsyncRateLimitingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that limits the number of requests by IP.

    Reads the session cache and the limits from the service container on
    ``app.state``; a session cache failure propagates as a dependency error.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in UNLIMITED_PATHS:
            return await call_next(request)

        container = request.app.state.container
        limit = container.settings.RATE_LIMIT_PER_MINUTE
        window = container.settings.RATE_LIMIT_WINDOW_SECONDS
        client_ip = request.client.host if request.client else "unknown"

        count = await container.session_cache.increment_request_count(client_ip)

        if count > limit:
            logger.warning(f"Rate limit exceeded for IP: {client_ip} on path: {path} ({count}/{limit})")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "detail": "Too many requests. Try again later.",
                    "code": "RATE_LIMIT_EXCEEDED"
                },
                headers={"Retry-After": str(window)}
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(max(limit - count, 0))
        return response
