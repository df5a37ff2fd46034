# marketplace/shared/middleware/exception_middleware.py (async version)

"""
Middleware for centralized exception handling.

This module defines middleware that intercepts exceptions and formats
appropriate error responses for the client.
"""

import time
import logging
import traceback
from typing import Callable

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace.domain.exceptions import DomainException, DependencyException
from marketplace.adapters.configuration.config import settings

# Configure logger
logger = logging.getLogger(__name__)

# Mapping from the exception 'internal_code' to the HTTP status
STATUS_BY_CODE = {
    "DUPLICATE_EMAIL": status.HTTP_409_CONFLICT,
    "DUPLICATE_USERNAME": status.HTTP_409_CONFLICT,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "ACCOUNT_NOT_ACTIVE": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def _client(request: Request) -> str:
    return request.client.host if request.client else "N/A"


def error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code},
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed request bodies with 400 instead of FastAPI's 422."""
    errors = exc.errors()
    messages = [
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')}: {err.get('msg')}"
        for err in errors
    ]
    logger.warning(f"Validation error: {messages} | Path: {request.url.path} | Client: {_client(request)}")
    return error_response(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request", "VALIDATION_ERROR")


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized exception handling.
    Captures domain exceptions and formats the response accordingly.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

        except DependencyException as exc:
            # Store, cache, signer or external service failure
            logger.error(
                f"Dependency failure: {exc} | Code: {exc.internal_code} | "
                f"Path: {request.url.path} | Client: {_client(request)}"
            )
            detail = "Internal server error" if settings.ENVIRONMENT == "production" else exc.detail
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, exc.internal_code)

        except DomainException as exc:
            logger.warning(
                f"Domain exception: {exc} | Code: {exc.internal_code} | "
                f"Path: {request.url.path}"
            )
            status_code = STATUS_BY_CODE.get(exc.internal_code, status.HTTP_400_BAD_REQUEST)
            return error_response(status_code, exc.detail, exc.internal_code)

        except Exception as exc:
            # Unhandled exceptions
            if settings.ENVIRONMENT == "production":
                logger.exception(
                    f"Unhandled exception: Type={type(exc).__name__} | "
                    f"Path: {request.url.path} | Client: {_client(request)}"
                )
            else:
                logger.exception(
                    f"Unhandled exception: {exc} | "
                    f"Path: {request.url.path} | Client: {_client(request)}\n"
                    f"Traceback: {traceback.format_exc()}"
                )
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_SERVER_ERROR")
