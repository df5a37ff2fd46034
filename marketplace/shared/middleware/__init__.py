# marketplace/shared/middleware/__init__.py (async version)

from marketplace.shared.middleware.exception_middleware import AsyncExceptionMiddleware
from marketplace.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware
from marketplace.shared.middleware.rate_limiting_middleware import AsyncRateLimitingMiddleware
from marketplace.shared.middleware.api_key_middleware import AsyncAPIKeyMiddleware

__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncRequestLoggingMiddleware",
    "AsyncRateLimitingMiddleware",
    "AsyncAPIKeyMiddleware",
]
