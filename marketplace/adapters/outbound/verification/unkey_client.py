# marketplace/adapters/outbound/verification/unkey_client.py (async version)

"""
Client for the Unkey key verification API.

Only the outcome of a verification matters to the application:
valid, invalid, or an error when the authority could not answer.
"""

import logging
from typing import Optional

import httpx

from marketplace.application.ports.outbound import IKeyVerifier
from marketplace.domain.exceptions import KeyVerificationException

logger = logging.getLogger(__name__)

VERIFY_KEY_PATH = "/v1/keys.verifyKey"


class UnkeyKeyVerifier(IKeyVerifier):
    """
    Verifies API keys against Unkey over HTTP.

    Attributes:
        client: Shared httpx AsyncClient (base URL, auth and timeout preset)
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "UnkeyKeyVerifier":
        headers = {"Content-Type": "application/json"}
        if settings.UNKEY_ROOT_KEY:
            headers["Authorization"] = f"Bearer {settings.UNKEY_ROOT_KEY}"
        client = httpx.AsyncClient(
            base_url=settings.UNKEY_BASE_URL,
            headers=headers,
            timeout=settings.KEY_VERIFICATION_TIMEOUT,
            transport=transport,
        )
        return cls(client)

    async def verify(self, api_id: str, key: str) -> bool:
        """
        Ask Unkey whether ``key`` is valid for ``api_id``.

        Raises:
            KeyVerificationException: On transport errors, non-2xx answers
                or an unreadable body
        """
        try:
            response = await self.client.post(VERIFY_KEY_PATH, json={"apiId": api_id, "key": key})
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Key verification rejected by authority: HTTP {e.response.status_code}")
            raise KeyVerificationException(original_error=e)
        except httpx.HTTPError as e:
            logger.error(f"Error verifying key: {e!r}")
            raise KeyVerificationException(original_error=e)
        except ValueError as e:
            logger.error(f"Unreadable key verification response: {e}")
            raise KeyVerificationException(original_error=e)

        if not isinstance(body, dict) or not isinstance(body.get("valid"), bool):
            raise KeyVerificationException(detail="Malformed key verification response")

        if not body["valid"]:
            logger.info(f"API key rejected: {body.get('code', 'INVALID')}")
        return body["valid"]

    async def close(self) -> None:
        await self.client.aclose()
