"""Persistence operations for synchronized user records."""

import logging
from typing import Any

from postgrest.exceptions import APIError

from src.usersync.database.models import UserCreate, UserUpdate, get_user_schema
from src.usersync.features.users.exceptions import DuplicateUserError
from src.usersync.services.database import get_query_builder

logger = logging.getLogger(__name__)

# PostgreSQL unique_violation
UNIQUE_VIOLATION = "23505"


def get_user_by_external_id(external_id: str) -> dict[str, Any] | None:
    """
    Fetch a user record by the identity provider's subject id.

    Args:
        external_id: Clerk user id

    Returns:
        User record or None if not found
    """
    schema = get_user_schema()
    return get_query_builder().get_by_field(schema.name, "external_id", external_id)


def create_user(user: UserCreate) -> dict[str, Any] | None:
    """
    Insert a new user record.

    Args:
        user: Validated user data

    Returns:
        Inserted record (including the database-assigned id) or None

    Raises:
        DuplicateUserError: If external_id, email or username is already taken
        APIError: For any other database error
    """
    schema = get_user_schema()
    data = schema.apply_defaults(user.model_dump())

    try:
        record = get_query_builder().insert_record(schema.name, data)
    except APIError as e:
        if e.code == UNIQUE_VIOLATION:
            raise DuplicateUserError(
                f"User {user.external_id} conflicts with an existing record on "
                f"one of {', '.join(schema.unique_fields)}"
            ) from e
        raise

    if record:
        logger.info(
            f"Created user {user.external_id}",
            extra={"external_id": user.external_id, "user_id": record.get("id")},
        )
    return record


def update_user(external_id: str | None, user: UserUpdate) -> dict[str, Any] | None:
    """
    Overwrite the mutable fields of the record keyed by subject id.

    Args:
        external_id: Clerk user id
        user: New field values

    Returns:
        Updated record, or None when no record matches
    """
    if not external_id:
        logger.warning("Skipping user update without an external id")
        return None

    schema = get_user_schema()
    try:
        record = get_query_builder().update_by_field(
            schema.name, "external_id", external_id, user.model_dump()
        )
    except APIError as e:
        if e.code == UNIQUE_VIOLATION:
            raise DuplicateUserError(
                f"Update of user {external_id} conflicts with an existing record"
            ) from e
        raise

    if record is None:
        logger.warning(
            f"No user record found to update for {external_id}",
            extra={"external_id": external_id},
        )
    else:
        logger.info(f"Updated user {external_id}", extra={"external_id": external_id})
    return record


def delete_user(external_id: str) -> dict[str, Any] | None:
    """
    Delete the record keyed by subject id.

    Deleting an id that no longer exists returns None, so replayed deliveries
    are harmless.

    Args:
        external_id: Clerk user id

    Returns:
        Deleted record, or None when no record matches
    """
    schema = get_user_schema()
    record = get_query_builder().delete_by_field(schema.name, "external_id", external_id)

    if record is None:
        logger.info(
            f"User {external_id} already absent, nothing to delete",
            extra={"external_id": external_id},
        )
    else:
        logger.info(f"Deleted user {external_id}", extra={"external_id": external_id})
    return record
