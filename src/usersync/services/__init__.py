"""Shared services module for external integrations."""

from src.usersync.services.analytics.posthog import SyncAnalytics
from src.usersync.services.clerk import ClerkClient, get_clerk_client, set_clerk_client

__all__ = [
    "SyncAnalytics",
    "ClerkClient",
    "get_clerk_client",
    "set_clerk_client",
]
