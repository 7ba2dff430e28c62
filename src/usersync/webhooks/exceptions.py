"""Custom exceptions for webhook intake."""


class WebhookError(Exception):
    """Base exception for all webhook errors."""

    pass


class WebhookConfigurationError(WebhookError, RuntimeError):
    """Raised when the webhook signing secret is not configured."""

    pass


class MissingSignatureHeadersError(WebhookError):
    """Raised when any of the svix-id, svix-timestamp or svix-signature headers is absent."""

    pass


class WebhookVerificationFailed(WebhookError):
    """Raised when the payload signature cannot be verified."""

    pass
