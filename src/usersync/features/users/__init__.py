"""User record synchronization."""

from src.usersync.features.users.actions import (
    create_user,
    delete_user,
    get_user_by_external_id,
    update_user,
)
from src.usersync.features.users.exceptions import (
    DuplicateUserError,
    MissingExternalIdError,
    UserSyncError,
)

__all__ = [
    "create_user",
    "update_user",
    "delete_user",
    "get_user_by_external_id",
    "UserSyncError",
    "DuplicateUserError",
    "MissingExternalIdError",
]
