"""Generic database utility functions for Supabase interactions."""

import logging
from typing import Any

from supabase import Client

from src.usersync.services.database.connection import get_supabase_admin_client

logger = logging.getLogger(__name__)


class SupabaseQueryBuilder:
    """Helper class for building and executing Supabase queries."""

    def __init__(self, client: Client | None = None) -> None:
        """
        Initialize query builder.

        Args:
            client: Supabase client instance (uses the service-role client if None)
        """
        self.client = client or get_supabase_admin_client()

    def get_by_field(
        self, table: str, field: str, value: Any, columns: str = "*"
    ) -> dict[str, Any] | None:
        """
        Fetch a single record by field value.

        Args:
            table: Table name
            field: Field name to filter by
            value: Field value
            columns: Columns to select (default: "*")

        Returns:
            First matching record or None

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> user = builder.get_by_field("users", "external_id", "user_2abc")
        """
        response = self.client.table(table).select(columns).eq(field, value).execute()
        return response.data[0] if response.data else None

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert a single record.

        Args:
            table: Table name
            data: Record data dictionary

        Returns:
            Inserted record dictionary or None if nothing was returned

        Raises:
            postgrest.exceptions.APIError: If the insert violates a constraint

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> user = builder.insert_record("users", {"external_id": "user_2abc", ...})
        """
        response = self.client.table(table).insert(data).execute()
        return response.data[0] if response.data else None

    def update_by_field(
        self, table: str, field: str, value: Any, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """
        Update the record matching a field value.

        Args:
            table: Table name
            field: Field name to filter by (should be a unique column)
            value: Field value
            data: Fields to update

        Returns:
            Updated record dictionary or None if no record matched

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> updated = builder.update_by_field(
            ...     "users", "external_id", "user_2abc", {"username": "jane"}
            ... )
        """
        response = self.client.table(table).update(data).eq(field, value).execute()
        return response.data[0] if response.data else None

    def delete_by_field(self, table: str, field: str, value: Any) -> dict[str, Any] | None:
        """
        Delete the record matching a field value.

        Args:
            table: Table name
            field: Field name to filter by (should be a unique column)
            value: Field value

        Returns:
            Deleted record dictionary or None if no record matched

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> deleted = builder.delete_by_field("users", "external_id", "user_2abc")
        """
        response = self.client.table(table).delete().eq(field, value).execute()
        return response.data[0] if response.data else None


def get_query_builder(client: Client | None = None) -> SupabaseQueryBuilder:
    """
    Get instance of SupabaseQueryBuilder.

    Args:
        client: Optional Supabase client (uses the service-role client if None)

    Returns:
        SupabaseQueryBuilder instance

    Example:
        >>> db = get_query_builder()
        >>> user = db.get_by_field("users", "external_id", "user_2abc")
    """
    return SupabaseQueryBuilder(client)
