"""Clerk Backend API client."""

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.usersync.config import settings

logger = logging.getLogger(__name__)


class ClerkConfigurationError(RuntimeError):
    """Raised when the Clerk secret key is not configured."""

    pass


class ClerkClient:
    """
    Minimal async client for the Clerk Backend API.

    Only the user metadata endpoint is needed: after a user record is created
    locally, its internal id is written back to Clerk as public metadata so
    that session tokens can carry it.

    Attributes:
        api_url: Base URL of the Backend API (e.g. https://api.clerk.com/v1)
        secret_key: Clerk secret key (sk_...), sent as a bearer token
        max_retries: Attempts made for transport-level failures

    Example:
        >>> client = ClerkClient("https://api.clerk.com/v1", "sk_test_...")
        >>> await client.update_user_metadata("user_2abc", public_metadata={"userId": "..."})
        >>> await client.close()
    """

    def __init__(
        self,
        api_url: str,
        secret_key: str | None,
        timeout: float = 10.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize Clerk client.

        Args:
            api_url: Backend API base URL
            secret_key: Clerk secret key (may be None; checked at call time)
            timeout: Connect/read/write timeout in seconds
            max_retries: Attempts for transport errors (timeouts, resets)
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url.rstrip("/")
        self.secret_key = secret_key
        self.max_retries = max(1, max_retries)
        self._http_client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def update_user_metadata(
        self,
        user_id: str,
        public_metadata: dict[str, Any] | None = None,
        private_metadata: dict[str, Any] | None = None,
        unsafe_metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Merge metadata into a Clerk user's profile.

        Clerk deep-merges the given objects into the stored metadata; keys not
        mentioned are left untouched.

        Args:
            user_id: Clerk user id (subject id)
            public_metadata: Metadata readable from the frontend and session token
            private_metadata: Metadata readable only from the backend
            unsafe_metadata: Metadata writable from the frontend

        Returns:
            Updated Clerk user object

        Raises:
            ClerkConfigurationError: If no secret key is configured
            httpx.HTTPStatusError: If Clerk rejects the request
            httpx.TransportError: If the request keeps failing after retries
        """
        if not self.secret_key:
            raise ClerkConfigurationError(
                "CLERK_SECRET_KEY is missing. Please add it to .env or the environment."
            )

        body: dict[str, Any] = {}
        if public_metadata is not None:
            body["public_metadata"] = public_metadata
        if private_metadata is not None:
            body["private_metadata"] = private_metadata
        if unsafe_metadata is not None:
            body["unsafe_metadata"] = unsafe_metadata

        response = await self._send_with_retry("PATCH", f"/users/{user_id}/metadata", body)
        response.raise_for_status()

        logger.info(
            f"Updated Clerk metadata for user {user_id}",
            extra={"clerk_user_id": user_id, "keys": sorted(body)},
        )
        return response.json()

    async def _send_with_retry(
        self, method: str, path: str, json_body: dict[str, Any]
    ) -> httpx.Response:
        """Send a request, retrying transport errors with exponential backoff."""

        @retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async def _send() -> httpx.Response:
            return await self._http_client.request(
                method,
                path,
                json=json_body,
                headers={"Authorization": f"Bearer {self.secret_key}"},
            )

        try:
            return await _send()
        except httpx.TransportError as e:
            logger.error(
                f"Clerk API request failed after {self.max_retries} attempts: {e}",
                exc_info=True,
                extra={"error_type": "clerk_transport_failed", "path": path},
            )
            raise

    async def close(self) -> None:
        """
        Close HTTP client and cleanup resources.

        Should be called during application shutdown.
        """
        await self._http_client.aclose()
        logger.info("Clerk client closed")


# Global Clerk client instance (initialized in main.py lifespan)
_clerk_client: ClerkClient | None = None


def set_clerk_client(client: ClerkClient | None) -> None:
    """
    Set the global Clerk client instance.

    Called during application startup; tests use it to inject a fake.
    """
    global _clerk_client
    _clerk_client = client


def get_clerk_client() -> ClerkClient:
    """
    Get the global Clerk client instance, creating one from settings if needed.

    Used as a FastAPI dependency by the webhook handler.

    Returns:
        ClerkClient instance
    """
    global _clerk_client
    if _clerk_client is None:
        _clerk_client = ClerkClient(
            api_url=settings.clerk_api_url,
            secret_key=settings.clerk_secret_key,
            timeout=settings.clerk_timeout_seconds,
            max_retries=settings.clerk_max_retries,
        )
    return _clerk_client
