# marketplace/shared/middleware/logging_middleware.py (async version)

"""
Middleware for HTTP request logging.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from marketplace.adapters.configuration.config import settings

# Configure logger
logger = logging.getLogger(__name__)

QUIET_PATHS = {"/health"}


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request and one per response.
    Query parameters and client address are left out in production.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        client = request.client.host if request.client else "N/A"
        if settings.ENVIRONMENT == "production":
            logger.info(f"Request: {request.method} {path}")
        else:
            query_params = dict(request.query_params)
            logger.info(
                f"Request: {request.method} {path} | "
                f"Query: {query_params or 'N/A'} | Client: {client}"
            )

        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {path} | "
            f"Time: {elapsed:.4f}s"
        )
        return response
