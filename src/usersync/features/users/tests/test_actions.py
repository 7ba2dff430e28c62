"""Tests for user persistence operations."""

from unittest.mock import MagicMock, patch

import pytest
from postgrest.exceptions import APIError

from src.usersync.database.models import UserCreate, UserUpdate
from src.usersync.features.users import (
    DuplicateUserError,
    create_user,
    delete_user,
    get_user_by_external_id,
    update_user,
)

TABLE = "users"


@pytest.fixture
def mock_db():
    with patch("src.usersync.features.users.actions.get_query_builder") as mock:
        yield mock.return_value


@pytest.fixture
def new_user() -> UserCreate:
    return UserCreate(
        external_id="ext_1",
        email="jane@example.com",
        username="user_ext_1",
        first_name="Jane",
        last_name="Doe",
        photo="",
    )


def _api_error(code: str) -> APIError:
    return APIError({"message": "boom", "code": code, "hint": None, "details": None})


class TestCreateUser:
    def test_inserts_and_returns_record(self, mock_db: MagicMock, new_user: UserCreate) -> None:
        mock_db.insert_record.return_value = {"id": "uuid-1", **new_user.model_dump()}

        record = create_user(new_user)

        assert record["id"] == "uuid-1"
        mock_db.insert_record.assert_called_once_with(TABLE, new_user.model_dump())

    def test_unique_violation_raises_duplicate(self, mock_db: MagicMock, new_user: UserCreate) -> None:
        mock_db.insert_record.side_effect = _api_error("23505")

        with pytest.raises(DuplicateUserError):
            create_user(new_user)

    def test_other_database_errors_propagate(self, mock_db: MagicMock, new_user: UserCreate) -> None:
        mock_db.insert_record.side_effect = _api_error("42P01")

        with pytest.raises(APIError):
            create_user(new_user)

    def test_default_names_applied(self, mock_db: MagicMock) -> None:
        """Names left unset are filled from the users table schema before insert."""
        user = UserCreate(external_id="ext_2", email="x@example.com", username="x", photo="")

        create_user(user)

        inserted = mock_db.insert_record.call_args.args[1]
        assert inserted["first_name"] == "Unknown"
        assert inserted["last_name"] == "User"


class TestUpdateUser:
    def test_updates_by_external_id(self, mock_db: MagicMock) -> None:
        update = UserUpdate(first_name="", last_name="", username="", photo="https://x/p.png")
        mock_db.update_by_field.return_value = {"id": "uuid-1"}

        record = update_user("ext_1", update)

        assert record == {"id": "uuid-1"}
        mock_db.update_by_field.assert_called_once_with(
            TABLE,
            "external_id",
            "ext_1",
            {"first_name": "", "last_name": "", "username": "", "photo": "https://x/p.png"},
        )

    def test_no_match_returns_none(self, mock_db: MagicMock) -> None:
        mock_db.update_by_field.return_value = None

        assert update_user("ext_missing", UserUpdate(first_name="a", last_name="b", username="c", photo="")) is None

    def test_missing_external_id_skips_query(self, mock_db: MagicMock) -> None:
        result = update_user(None, UserUpdate(first_name="a", last_name="b", username="c", photo=""))

        assert result is None
        mock_db.update_by_field.assert_not_called()

    def test_username_conflict_raises_duplicate(self, mock_db: MagicMock) -> None:
        mock_db.update_by_field.side_effect = _api_error("23505")

        with pytest.raises(DuplicateUserError):
            update_user("ext_1", UserUpdate(first_name="a", last_name="b", username="taken", photo=""))


class TestDeleteUser:
    def test_deletes_by_external_id(self, mock_db: MagicMock) -> None:
        mock_db.delete_by_field.return_value = {"id": "uuid-1", "external_id": "ext_1"}

        record = delete_user("ext_1")

        assert record["external_id"] == "ext_1"
        mock_db.delete_by_field.assert_called_once_with(TABLE, "external_id", "ext_1")

    def test_absent_record_returns_none(self, mock_db: MagicMock) -> None:
        mock_db.delete_by_field.return_value = None

        assert delete_user("ext_1") is None


def test_get_user_by_external_id(mock_db: MagicMock) -> None:
    mock_db.get_by_field.return_value = {"id": "uuid-1"}

    assert get_user_by_external_id("ext_1") == {"id": "uuid-1"}
    mock_db.get_by_field.assert_called_once_with(TABLE, "external_id", "ext_1")
