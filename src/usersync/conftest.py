"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient
from svix.webhooks import Webhook

from src.usersync.config import settings
from src.usersync.main import app

# Example secret format from the Svix docs (whsec_ + base64)
TEST_WEBHOOK_SECRET = "whsec_MfKQ9r8GKYqrTwjUPD8ILPZIo2LaLaSw"

SignPayload = Callable[..., tuple[bytes, dict[str, str]]]


@pytest.fixture
def client() -> TestClient:
    """
    Provide FastAPI test client for API testing.

    Returns:
        TestClient instance for making API requests

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    return TestClient(app)


@pytest.fixture
def webhook_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure the webhook signing secret for the duration of a test."""
    monkeypatch.setattr(settings, "webhook_secret", TEST_WEBHOOK_SECRET)
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def sign_payload(webhook_secret: str) -> SignPayload:
    """
    Sign a payload the way Svix does when delivering a webhook.

    Returns:
        Function (payload, msg_id=..., timestamp=...) -> (body, headers)
    """

    def _sign(
        payload: Any,
        msg_id: str = "msg_2test",
        timestamp: datetime | None = None,
    ) -> tuple[bytes, dict[str, str]]:
        body = payload if isinstance(payload, str) else json.dumps(payload)
        ts = timestamp or datetime.now(timezone.utc)
        signature = Webhook(webhook_secret).sign(msg_id, ts, body)
        headers = {
            "svix-id": msg_id,
            "svix-timestamp": str(int(ts.timestamp())),
            "svix-signature": signature,
            "content-type": "application/json",
        }
        return body.encode("utf-8"), headers

    return _sign
