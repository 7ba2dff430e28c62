"""Shared fixtures for webhook tests."""

from typing import Any
from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi.testclient import TestClient

from src.usersync.services.clerk import get_clerk_client


@pytest.fixture
def clerk_user_data() -> dict[str, Any]:
    """Clerk user object as sent in user.created / user.updated."""
    return {
        "id": "ext_1",
        "object": "user",
        "email_addresses": [
            {"id": "idn_1", "object": "email_address", "email_address": "jane@example.com"}
        ],
        "first_name": "Jane",
        "last_name": "Doe",
        "username": None,
        "image_url": "https://img.clerk.com/jane.png",
        "public_metadata": {},
    }


@pytest.fixture
def mock_actions():
    """Patch the persistence calls used by the webhook handler."""
    with (
        patch("src.usersync.webhooks.handlers.create_user") as create_user,
        patch("src.usersync.webhooks.handlers.update_user") as update_user,
        patch("src.usersync.webhooks.handlers.delete_user") as delete_user,
    ):
        yield Mock(create_user=create_user, update_user=update_user, delete_user=delete_user)


@pytest.fixture
def mock_clerk():
    """Fake Clerk client with an async metadata call."""
    clerk = Mock()
    clerk.update_user_metadata = AsyncMock(return_value={"id": "ext_1"})
    return clerk


@pytest.fixture
def webhook_client(client: TestClient, mock_clerk: Mock, webhook_secret: str):
    """Test client with the Clerk dependency replaced and a signing secret configured."""
    from src.usersync.main import app

    app.dependency_overrides[get_clerk_client] = lambda: mock_clerk
    yield client
    app.dependency_overrides = {}
