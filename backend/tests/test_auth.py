"""
Tests for caller identity
=========================
Covers:
- valid token returns the users row
- missing header, wrong scheme, empty token -> 401 auth_required
- rejected token, token without a user -> 401 auth_invalid
- token without a users row -> 404 user_not_found
- db_error builds a 500 with code db_error

Run: pytest tests/test_auth.py -v
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from app.auth import db_error, get_authenticated_user
from conftest import USER_DATA, mock_auth_db


def _resolve(authorization: str, mock_db: MagicMock) -> dict:
    with patch("app.auth.get_supabase_client", return_value=mock_db):
        return get_authenticated_user(authorization)


class TestAuthenticatedUser:

    def test_valid_token(self):
        mock_db = mock_auth_db()
        assert _resolve("Bearer good-token", mock_db) == USER_DATA
        mock_db.auth.get_user.assert_called_once_with("good-token")

    @pytest.mark.parametrize("header", ["", "Token abc", "Bearer ", "Bearer    "])
    def test_auth_required(self, header: str):
        mock_db = mock_auth_db()
        with pytest.raises(HTTPException) as exc_info:
            _resolve(header, mock_db)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["code"] == "auth_required"
        mock_db.auth.get_user.assert_not_called()

    def test_rejected_token(self):
        with pytest.raises(HTTPException) as exc_info:
            _resolve("Bearer expired", mock_auth_db(None))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail["code"] == "auth_invalid"

    def test_token_without_user(self):
        mock_db = MagicMock()
        mock_db.auth.get_user.return_value = MagicMock(user=None)

        with pytest.raises(HTTPException) as exc_info:
            _resolve("Bearer orphan", mock_db)

        assert exc_info.value.detail["code"] == "auth_invalid"

    def test_missing_users_row(self):
        mock_db = mock_auth_db()
        mock_db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            _resolve("Bearer good-token", mock_db)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail["code"] == "user_not_found"


def test_db_error():
    exc = db_error("profile")
    assert exc.status_code == 500
    assert exc.detail == {"message": "Could not save profile, try again", "code": "db_error"}
