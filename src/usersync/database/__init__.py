"""Database entity models and table schemas."""

from src.usersync.database.models import (
    USER_SCHEMA,
    TableSchema,
    User,
    UserCreate,
    UserUpdate,
    get_schema,
    get_user_schema,
    register_schema,
)

__all__ = [
    "USER_SCHEMA",
    "TableSchema",
    "User",
    "UserCreate",
    "UserUpdate",
    "get_schema",
    "get_user_schema",
    "register_schema",
]
