"""
Local Key-Value Store
=====================
A flat string key-value store holding JSON-encoded arrays, and the
repository built on it. Used for local development and tests, and
mirrors how a browser-only deployment keeps its data.

Each entity type lives under one namespaced key. Reads decode the whole
array, writes re-encode and replace it — no partial updates, no
transactions, last write wins. There is no schema versioning.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from app.db.repository import ActivityRepository
from app.models.activity import ActivityHistory
from app.models.profile import UserProfile
from app.models.tracking import TrackingSession

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "profiles": "carbon_wallet_profiles",
    "activities": "carbon_wallet_activities",
    "tracking_sessions": "carbon_wallet_tracking_sessions",
}


class KeyValueStore:
    """String key -> string value, optionally mirrored to a JSON file.

    With no *path* the data lives only in memory. With a path, the whole
    mapping is read on construction and rewritten after every change.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self._path = Path(path) if path else None
        self._items: dict[str, str] = {}
        if self._path is not None and self._path.exists():
            self._items = json.loads(self._path.read_text(encoding="utf-8"))
            logger.debug("Loaded %d keys from %s", len(self._items), self._path)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
        self._flush()

    def _flush(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._items), encoding="utf-8")


class LocalStoreRepository(ActivityRepository):
    """ActivityRepository over a KeyValueStore of JSON arrays."""

    def __init__(self, store: Optional[KeyValueStore] = None) -> None:
        self._store = store or KeyValueStore()

    # -- raw array access --------------------------------------------------

    def _load(self, name: str) -> list[dict]:
        data = self._store.get_item(STORAGE_KEYS[name])
        return json.loads(data) if data else []

    def _dump(self, name: str, rows: list[dict]) -> None:
        self._store.set_item(STORAGE_KEYS[name], json.dumps(rows))

    def _upsert(self, name: str, key_field: str, row: dict) -> None:
        rows = self._load(name)
        for i, existing in enumerate(rows):
            if existing.get(key_field) == row[key_field]:
                rows[i] = row
                break
        else:
            rows.append(row)
        self._dump(name, rows)

    # -- activities --------------------------------------------------------

    def get_user_activities(self, user_id: str) -> list[ActivityHistory]:
        return [
            ActivityHistory(**row)
            for row in self._load("activities")
            if row.get("user_id") == user_id
        ]

    def add_activity(self, activity: ActivityHistory) -> ActivityHistory:
        rows = self._load("activities")
        rows.append(activity.model_dump(mode="json"))
        self._dump("activities", rows)
        return activity

    # -- profiles ----------------------------------------------------------

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        for row in self._load("profiles"):
            if row.get("user_id") == user_id:
                return UserProfile(**row)
        return None

    def save_profile(self, profile: UserProfile) -> UserProfile:
        self._upsert("profiles", "user_id", profile.model_dump(mode="json"))
        return profile

    # -- tracking sessions -------------------------------------------------

    def get_user_tracking_sessions(self, user_id: str) -> list[TrackingSession]:
        return [
            TrackingSession(**row)
            for row in self._load("tracking_sessions")
            if row.get("user_id") == user_id
        ]

    def save_tracking_session(self, session: TrackingSession) -> TrackingSession:
        self._upsert("tracking_sessions", "id", session.model_dump(mode="json"))
        return session

    def clear_all(self) -> None:
        for key in STORAGE_KEYS.values():
            self._store.remove_item(key)
