"""Svix signature verification for inbound webhooks."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from svix.webhooks import Webhook, WebhookVerificationError

from src.usersync.webhooks.exceptions import (
    MissingSignatureHeadersError,
    WebhookConfigurationError,
    WebhookVerificationFailed,
)

logger = logging.getLogger(__name__)

SVIX_ID_HEADER = "svix-id"
SVIX_TIMESTAMP_HEADER = "svix-timestamp"
SVIX_SIGNATURE_HEADER = "svix-signature"
SIGNATURE_HEADERS = (SVIX_ID_HEADER, SVIX_TIMESTAMP_HEADER, SVIX_SIGNATURE_HEADER)


def extract_signature_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Pull the three Svix signature headers out of a request's headers.

    Args:
        headers: Request headers (Starlette's Headers is case-insensitive)

    Returns:
        Dictionary with svix-id, svix-timestamp and svix-signature

    Raises:
        MissingSignatureHeadersError: If any header is absent or empty
    """
    extracted = {name: headers.get(name) for name in SIGNATURE_HEADERS}
    missing = [name for name, value in extracted.items() if not value]
    if missing:
        raise MissingSignatureHeadersError(f"Missing Svix headers: {', '.join(missing)}")
    return extracted  # type: ignore[return-value]


class WebhookVerifier:
    """
    Verifies Svix-signed payloads with a shared signing secret.

    Attributes:
        secret: Signing secret (whsec_... as shown in the Clerk dashboard)

    Example:
        >>> verifier = WebhookVerifier("whsec_...")
        >>> payload = verifier.verify(body, extract_signature_headers(request.headers))
    """

    def __init__(self, secret: str | None):
        """
        Initialize verifier.

        Args:
            secret: Signing secret

        Raises:
            WebhookConfigurationError: If the secret is missing or not valid base64
        """
        if not secret:
            raise WebhookConfigurationError(
                "WEBHOOK_SECRET is missing. Please add it to .env or the environment."
            )
        try:
            self._webhook = Webhook(secret)
        except ValueError as e:
            raise WebhookConfigurationError(f"WEBHOOK_SECRET is not a valid signing secret: {e}") from e

    def verify(self, body: bytes | str, headers: Mapping[str, str]) -> Any:
        """
        Verify the raw body against its signature headers.

        Args:
            body: Raw request body, exactly as received
            headers: The three Svix headers

        Returns:
            Decoded JSON payload

        Raises:
            WebhookVerificationFailed: If the signature, timestamp or payload is invalid
        """
        try:
            data = body.decode("utf-8") if isinstance(body, bytes) else body
            # svix 2.x verifies only and returns None; the body is decoded here
            self._webhook.verify(data, dict(headers))
            return json.loads(data)
        except WebhookVerificationError as e:
            raise WebhookVerificationFailed(str(e)) from e
        except ValueError as e:
            # Undecodable body, or signed correctly but not JSON
            raise WebhookVerificationFailed(f"Payload is not valid JSON: {e}") from e
