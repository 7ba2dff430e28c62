"""Pydantic models for Clerk webhook events."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.usersync.database.models import UserCreate, UserUpdate

SESSION_EVENT_PREFIX = "session."
USER_CREATED = "user.created"
USER_UPDATED = "user.updated"
USER_DELETED = "user.deleted"


class ClerkEmailAddress(BaseModel):
    """Email address entry of a Clerk user."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    email_address: str | None = None


class ClerkUserData(BaseModel):
    """Clerk user object carried by user.created and user.updated."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    email_addresses: list[ClerkEmailAddress] | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    image_url: str | None = None

    @property
    def has_full_name(self) -> bool:
        """True when both first and last name are non-empty."""
        return bool(self.first_name) and bool(self.last_name)

    @property
    def first_email(self) -> str:
        """First listed email address, or empty string."""
        if self.email_addresses:
            return self.email_addresses[0].email_address or ""
        return ""

    def to_user_create(self) -> UserCreate:
        """
        Build a new user record.

        Default rules:
            email     -> first listed address, else ""
            username  -> provided value, else "user_<id>"
            photo     -> image_url, else ""

        Callers must check has_full_name first.

        Raises:
            ValueError: If the payload carries no id
        """
        if not self.id:
            raise ValueError("Cannot build a user record without a Clerk user id")

        return UserCreate(
            external_id=self.id,
            email=self.first_email,
            username=self.username or f"user_{self.id}",
            first_name=self.first_name,
            last_name=self.last_name,
            photo=self.image_url or "",
        )

    def to_user_update(self) -> UserUpdate:
        """Build a user update, substituting "" for every missing field."""
        return UserUpdate(
            first_name=self.first_name or "",
            last_name=self.last_name or "",
            username=self.username or "",
            photo=self.image_url or "",
        )


class ClerkDeletedObject(BaseModel):
    """Stub object carried by user.deleted."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    object: str | None = None
    deleted: bool = True


class WebhookEvent(BaseModel):
    """Base webhook envelope."""

    model_config = ConfigDict(extra="ignore")

    type: str
    object: str = "event"


class UserCreatedEvent(WebhookEvent):
    data: ClerkUserData


class UserUpdatedEvent(WebhookEvent):
    data: ClerkUserData


class UserDeletedEvent(WebhookEvent):
    data: ClerkDeletedObject


class SessionEvent(WebhookEvent):
    data: dict[str, Any] = Field(default_factory=dict)


class UnknownEvent(WebhookEvent):
    type: str = ""
    data: Any = None


ClerkEvent = UserCreatedEvent | UserUpdatedEvent | UserDeletedEvent | SessionEvent | UnknownEvent

EVENT_MODELS: dict[str, type[WebhookEvent]] = {
    USER_CREATED: UserCreatedEvent,
    USER_UPDATED: UserUpdatedEvent,
    USER_DELETED: UserDeletedEvent,
}


def parse_event(payload: Any) -> ClerkEvent:
    """
    Parse a verified webhook payload into its tagged event model.

    Unrecognized types, payloads without a string type, and payloads whose
    data does not fit the model for their type all come back as UnknownEvent.
    Session events are recognized by prefix.

    Args:
        payload: Decoded JSON payload

    Returns:
        Event model for the payload's type

    Example:
        >>> event = parse_event({"type": "user.deleted", "data": {"id": "user_2abc"}})
        >>> isinstance(event, UserDeletedEvent)
        True
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("type"), str):
        return UnknownEvent(data=payload)

    event_type = payload["type"]
    if event_type.startswith(SESSION_EVENT_PREFIX):
        return SessionEvent(type=event_type)

    model = EVENT_MODELS.get(event_type)
    if model is None:
        return UnknownEvent(type=event_type, data=payload.get("data"))

    try:
        return model.model_validate(payload)
    except ValidationError:
        return UnknownEvent(type=event_type, data=payload.get("data"))
