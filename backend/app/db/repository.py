"""
Activity Repository
===================
The persistence interface the calculators and the tracker depend on, plus
the Supabase-backed implementation.

Every write is a full-snapshot overwrite: profiles and tracking sessions are
upserted by primary key, activities are appended. There is no versioning, so
two clients updating the same session race and the last write wins.

Tables:
    activities         — ActivityHistory rows, input_data as jsonb
    profiles           — UserProfile rows, one per user_id
    tracking_sessions  — TrackingSession rows, waypoints as jsonb
"""

from __future__ import annotations

import abc
import logging
from typing import Optional

from app.config import get_settings
from app.db.supabase import get_supabase_client
from app.models.activity import ActivityHistory
from app.models.profile import UserProfile
from app.models.tracking import TrackingSession

logger = logging.getLogger(__name__)


class RepositoryError(RuntimeError):
    """A write did not come back from the store."""


class ActivityRepository(abc.ABC):
    """Per-entity reads and writes used by the core services."""

    @abc.abstractmethod
    def get_user_activities(self, user_id: str) -> list[ActivityHistory]:
        ...

    @abc.abstractmethod
    def add_activity(self, activity: ActivityHistory) -> ActivityHistory:
        ...

    @abc.abstractmethod
    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        ...

    @abc.abstractmethod
    def save_profile(self, profile: UserProfile) -> UserProfile:
        ...

    @abc.abstractmethod
    def get_user_tracking_sessions(self, user_id: str) -> list[TrackingSession]:
        ...

    @abc.abstractmethod
    def save_tracking_session(self, session: TrackingSession) -> TrackingSession:
        ...

    def get_tracking_session(self, user_id: str, session_id: str) -> Optional[TrackingSession]:
        return next(
            (s for s in self.get_user_tracking_sessions(user_id) if s.id == session_id),
            None,
        )

    def get_active_tracking_session(self, user_id: str) -> Optional[TrackingSession]:
        return next(
            (s for s in self.get_user_tracking_sessions(user_id) if s.is_active),
            None,
        )


# ---------------------------------------------------------------------------
# Supabase implementation
# ---------------------------------------------------------------------------

class SupabaseRepository(ActivityRepository):

    def __init__(self) -> None:
        self._db = get_supabase_client()

    def get_user_activities(self, user_id: str) -> list[ActivityHistory]:
        result = (
            self._db.table("activities")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=False)
            .execute()
        )
        return [ActivityHistory(**row) for row in (result.data or [])]

    def add_activity(self, activity: ActivityHistory) -> ActivityHistory:
        result = (
            self._db.table("activities")
            .insert(activity.model_dump(mode="json"))
            .execute()
        )
        if not result.data:
            logger.error("Failed to insert activity %s for user %s", activity.id, activity.user_id)
            raise RepositoryError("Failed to save activity")
        return ActivityHistory(**result.data[0])

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        result = (
            self._db.table("profiles")
            .select("*")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        if not result or not result.data:
            return None
        return UserProfile(**result.data)

    def save_profile(self, profile: UserProfile) -> UserProfile:
        result = (
            self._db.table("profiles")
            .upsert(profile.model_dump(mode="json"), on_conflict="user_id")
            .execute()
        )
        if not result.data:
            logger.error("Failed to upsert profile for user %s", profile.user_id)
            raise RepositoryError("Failed to save profile")
        return UserProfile(**result.data[0])

    def get_user_tracking_sessions(self, user_id: str) -> list[TrackingSession]:
        result = (
            self._db.table("tracking_sessions")
            .select("*")
            .eq("user_id", user_id)
            .order("start_time", desc=False)
            .execute()
        )
        return [TrackingSession(**row) for row in (result.data or [])]

    def save_tracking_session(self, session: TrackingSession) -> TrackingSession:
        result = (
            self._db.table("tracking_sessions")
            .upsert(session.model_dump(mode="json"), on_conflict="id")
            .execute()
        )
        if not result.data:
            logger.error("Failed to upsert tracking session %s", session.id)
            raise RepositoryError("Failed to save tracking session")
        return TrackingSession(**result.data[0])


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_repository: ActivityRepository | None = None


def get_repository() -> ActivityRepository:
    """Return the repository selected by ``settings.storage_backend``."""
    global _default_repository
    if _default_repository is None:
        settings = get_settings()
        if settings.storage_backend == "local":
            from app.db.local_store import KeyValueStore, LocalStoreRepository

            _default_repository = LocalStoreRepository(KeyValueStore(settings.local_store_path))
        else:
            _default_repository = SupabaseRepository()
        logger.info("Using %s activity repository", settings.storage_backend)
    return _default_repository
