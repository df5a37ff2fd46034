# marketplace/shared/middleware/api_key_middleware.py (async version)

"""
Request gatekeeper.

Every request must carry an API key that the external verification
authority accepts before any route logic runs. This gate is independent
of user session tokens.
"""

import logging
from fastapi import Request, status
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace.domain.exceptions import KeyVerificationException

# Configure logger
logger = logging.getLogger(__name__)


class AsyncAPIKeyMiddleware(BaseHTTPMiddleware):
    """
    Verifies the API key header against the key verifier of the container.

    - missing header: 401, the verifier is not called
    - verifier error: 500, the request is never admitted
    - invalid key: 401
    - valid key: the request proceeds
    """

    async def dispatch(self, request: Request, call_next):
        container = request.app.state.container
        settings = container.settings

        if not settings.GATEKEEPER_ENABLED or self._is_exempt(request.url.path, settings.GATEKEEPER_EXEMPT_PATHS):
            return await call_next(request)

        api_key = request.headers.get(settings.GATEKEEPER_HEADER)
        if not api_key:
            return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)

        try:
            valid = await container.key_verifier.verify(settings.UNKEY_API_ID, api_key)
        except KeyVerificationException as e:
            logger.error(f"Error verifying key: {e}")
            return PlainTextResponse("Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if not valid:
            logger.warning(f"Invalid API key on path: {request.url.path}")
            return PlainTextResponse("Unauthorized: Invalid API key", status_code=status.HTTP_401_UNAUTHORIZED)

        return await call_next(request)

    @staticmethod
    def _is_exempt(path: str, exempt_paths) -> bool:
        for exempt in exempt_paths:
            if exempt.endswith("/"):
                if path.startswith(exempt) or path == exempt.rstrip("/"):
                    return True
            elif path == exempt:
                return True
        return False
