"""
Shared fixtures for router tests.

Auth goes through a mocked Supabase client; every router gets the same
in-memory LocalStoreRepository so tests can inspect what was written.
"""

from __future__ import annotations

import uuid
from contextlib import ExitStack
from typing import Optional
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.db.local_store import LocalStoreRepository

USER_ID = str(uuid.uuid4())

USER_DATA = {
    "id": USER_ID,
    "email": "test@example.com",
    "name": "Test User",
}

AUTH_HEADER = {"Authorization": "Bearer fake-valid-token"}

_ROUTER_MODULES = ("activities", "exercise", "food", "profile", "tracking", "travel")


def mock_auth_db(user_data: Optional[dict] = USER_DATA) -> MagicMock:
    """Build a mock Supabase client that only answers the auth helper."""
    mock_db = MagicMock()

    if user_data:
        mock_user = MagicMock()
        mock_user.user = MagicMock()
        mock_user.user.id = user_data["id"]
        mock_db.auth.get_user.return_value = mock_user

        user_select = MagicMock()
        user_select.data = user_data
        mock_db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = user_select
    else:
        mock_db.auth.get_user.side_effect = Exception("Invalid token")

    return mock_db


@pytest.fixture
def repo() -> LocalStoreRepository:
    return LocalStoreRepository()


@pytest.fixture
def auth_db() -> MagicMock:
    return mock_auth_db()


@pytest.fixture
def client(repo: LocalStoreRepository, auth_db: MagicMock):
    """TestClient with mocked auth and the in-memory repository wired into every router."""
    with ExitStack() as stack:
        stack.enter_context(patch("app.auth.get_supabase_client", return_value=auth_db))
        for name in _ROUTER_MODULES:
            stack.enter_context(patch(f"app.routers.{name}.get_repository", return_value=repo))
        from app.main import app
        yield TestClient(app)
