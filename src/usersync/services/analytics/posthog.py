"""PostHog analytics for webhook sync outcomes."""

import logging
from functools import lru_cache

from posthog import Posthog

from src.usersync.config import settings

logger = logging.getLogger(__name__)

EVENT_SOURCE = "clerk_webhook"
VERIFICATION_FAILED_EVENT = "webhook_verification_failed"
SYNC_EVENTS = ("user_created", "user_updated", "user_deleted")


@lru_cache(maxsize=1)
def get_posthog_client() -> Posthog | None:
    """
    Get the shared PostHog client, or None when analytics is not configured.

    Returns:
        Posthog instance bound to the configured project key
    """
    if not settings.posthog_api_key:
        return None
    return Posthog(settings.posthog_api_key, host=settings.posthog_host)


class SyncAnalytics:
    """
    Records the outcome of webhook deliveries.

    Every event carries source="clerk_webhook" so webhook traffic can be told
    apart from product analytics in the same project. Nothing is sent when no
    PostHog key is configured.

    Example:
        >>> SyncAnalytics().track_user_sync("user_2abc", "user_created")
    """

    def __init__(self, client: Posthog | None = None) -> None:
        self.client = client if client is not None else get_posthog_client()

    def track_user_sync(self, external_id: str, event: str, **properties) -> None:
        """
        Record a completed user.created / user.updated / user.deleted sync.

        Args:
            external_id: Clerk user id, used as the PostHog distinct id
            event: One of SYNC_EVENTS
            **properties: Extra event properties

        Raises:
            ValueError: If event is not a sync event
        """
        if event not in SYNC_EVENTS:
            raise ValueError(f"Unknown sync event: {event}")
        self._capture(external_id, event, properties)

    def track_verification_failure(self, svix_id: str, reason: str) -> None:
        """
        Record a delivery rejected by signature verification.

        The sender is unauthenticated, so the distinct id is "anonymous".
        """
        self._capture("anonymous", VERIFICATION_FAILED_EVENT, {"svix_id": svix_id, "reason": reason})

    def _capture(self, distinct_id: str, event: str, properties: dict) -> None:
        if self.client is None:
            return

        self.client.capture(
            distinct_id=distinct_id,
            event=event,
            properties={"source": EVENT_SOURCE, **properties},
        )
        logger.debug(f"Tracked {event} for {distinct_id}")
