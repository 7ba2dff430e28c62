"""Pydantic models and table schema declarations for database entities."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.usersync.config import settings

logger = logging.getLogger(__name__)


class User(BaseModel):
    """User record as stored in the users table."""

    model_config = ConfigDict(extra="ignore")

    id: UUID
    external_id: str = Field(description="Identity provider subject id (unique)")
    email: str = Field(description="Primary email address (unique)")
    username: str = Field(description="Username (unique)")
    first_name: str = Field(default="Unknown")
    last_name: str = Field(default="User")
    photo: str = Field(description="Profile image URL")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreate(BaseModel):
    """
    Schema for creating a user record.

    Names left as None are filled from the users table schema defaults
    before insert.
    """

    external_id: str
    email: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    photo: str

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "external_id": "user_2abc",
                "email": "jane@example.com",
                "username": "jane",
                "first_name": "Jane",
                "last_name": "Doe",
                "photo": "https://img.clerk.com/abc.png",
            }
        }


class UserUpdate(BaseModel):
    """Schema for updating the mutable fields of a user record."""

    first_name: str
    last_name: str
    username: str
    photo: str


class TableSchema(BaseModel):
    """
    Declaration of a persisted table's shape.

    Constraint enforcement (uniqueness, NOT NULL, column defaults) belongs to
    the database; this only records what the service expects so callers can
    fill defaults before writing.

    Attributes:
        name: Table name
        record_model: Pydantic model describing a full row
        unique_fields: Columns carrying a unique constraint
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    record_model: type[BaseModel]
    unique_fields: tuple[str, ...] = ()

    @property
    def defaults(self) -> dict[str, Any]:
        """Declared default values keyed by column name."""
        return {
            field_name: field.default
            for field_name, field in self.record_model.model_fields.items()
            if not field.is_required() and field.default is not None
        }

    def apply_defaults(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Fill declared defaults for missing or None fields.

        Args:
            data: Row data to be written

        Returns:
            New dictionary with defaults applied

        Example:
            >>> get_user_schema().apply_defaults({"email": "a@b.c"})["first_name"]
            'Unknown'
        """
        merged = dict(data)
        for field_name, default in self.defaults.items():
            if merged.get(field_name) is None:
                merged[field_name] = default
        return merged


_schemas: dict[str, TableSchema] = {}


def register_schema(schema: TableSchema) -> TableSchema:
    """
    Register a table schema, reusing an existing registration of the same name.

    Args:
        schema: Schema to register

    Returns:
        The registered schema (the earlier one if the name was already taken)
    """
    existing = _schemas.get(schema.name)
    if existing is not None:
        logger.debug(f"Schema '{schema.name}' already registered, reusing it")
        return existing

    _schemas[schema.name] = schema
    return schema


def get_schema(name: str) -> TableSchema:
    """
    Look up a registered table schema.

    Raises:
        KeyError: If no schema with that name has been registered
    """
    return _schemas[name]


def get_user_schema() -> TableSchema:
    """Return the registered users table schema."""
    return get_schema(settings.users_table)


USER_SCHEMA = register_schema(
    TableSchema(
        name=settings.users_table,
        record_model=User,
        unique_fields=("external_id", "email", "username"),
    )
)
