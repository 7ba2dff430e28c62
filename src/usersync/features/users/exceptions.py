"""Custom exceptions for user record synchronization."""


class UserSyncError(Exception):
    """Base exception for all user sync errors."""

    pass


class DuplicateUserError(UserSyncError):
    """Raised when a user violates a unique constraint (external_id, email, username)."""

    pass


class MissingExternalIdError(UserSyncError):
    """Raised when a user event cannot be tied to a Clerk user id."""

    pass
