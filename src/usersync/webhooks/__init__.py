"""Clerk webhook intake: signature verification, event parsing and the route."""

from src.usersync.webhooks.handlers import router

__all__ = ["router"]
