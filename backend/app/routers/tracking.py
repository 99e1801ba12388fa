"""
Realtime Tracking Router
========================
GET  /api/v1/tracking/active                 — The caller's active session, if any.
POST /api/v1/tracking/start                  — Start (or pick up) a session.
POST /api/v1/tracking/{session_id}/samples   — Push one GPS fix.
POST /api/v1/tracking/{session_id}/errors    — Report a position-source error.
POST /api/v1/tracking/{session_id}/pause     — Stop accepting fixes.
POST /api/v1/tracking/{session_id}/resume    — Accept fixes again.
POST /api/v1/tracking/{session_id}/stop      — Finalise and log as realtime_travel.

The client's position watcher is the event source: it posts fixes one at a
time, in order. The tracker is rebuilt from the stored snapshot on every
request, and every change is written back as a full snapshot.

One active session per user is enforced here, not in the tracker: start
returns the existing active session instead of opening a second one.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, Response, status

from app.auth import db_error, get_authenticated_user
from app.db.repository import ActivityRepository, RepositoryError, get_repository
from app.models.tracking import (
    ActiveSessionResponse,
    PositionError,
    PositionErrorResponse,
    PositionSample,
    TrackingSession,
    TrackingStartRequest,
    TrackingStopResponse,
)
from app.services.tracking import RealtimeTracker, TrackingStateError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tracking", tags=["tracking"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_tracker(repo: ActivityRepository, user_id: str, session_id: str) -> RealtimeTracker:
    """Rebuild the tracker for *session_id*, or 404 if the user has no such session."""
    session = repo.get_tracking_session(user_id, session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": f"Tracking session not found: {session_id}", "code": "session_not_found"},
        )
    return RealtimeTracker.from_session(repo, session)


def _invalid_transition(exc: TrackingStateError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"message": str(exc), "code": "invalid_transition"},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/active",
    response_model=ActiveSessionResponse,
    summary="Get the active tracking session",
)
async def get_active_session(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> ActiveSessionResponse:
    user = get_authenticated_user(authorization)
    session = get_repository().get_active_tracking_session(user["id"])
    return ActiveSessionResponse(session=session)


@router.post(
    "/start",
    response_model=TrackingSession,
    status_code=status.HTTP_201_CREATED,
    summary="Start a tracking session",
    description=(
        "Opens a new session with zero totals (201). If the user already has "
        "an active session it is returned unchanged instead (200)."
    ),
    responses={
        200: {"description": "Existing active session returned"},
        201: {"description": "New session opened"},
    },
)
async def start_tracking(
    body: TrackingStartRequest,
    response: Response,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TrackingSession:
    user = get_authenticated_user(authorization)
    user_id: str = user["id"]
    repo = get_repository()

    existing = repo.get_active_tracking_session(user_id)
    if existing is not None:
        logger.info("User %s already has active session %s; resuming it", user_id, existing.id)
        response.status_code = status.HTTP_200_OK
        return existing

    tracker = RealtimeTracker(repo, user_id)
    try:
        return tracker.start(body.vehicle_type, body.fuel_type, body.vehicle_age)
    except RepositoryError as exc:
        raise db_error("tracking session") from exc


@router.post(
    "/{session_id}/samples",
    response_model=TrackingSession,
    summary="Push a position sample",
    responses={
        404: {"description": "Unknown session"},
        409: {"description": "Session is stopped"},
    },
)
async def push_sample(
    session_id: str,
    body: PositionSample,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TrackingSession:
    user = get_authenticated_user(authorization)
    tracker = _load_tracker(get_repository(), user["id"], session_id)

    try:
        return tracker.handle_sample(body)
    except TrackingStateError as exc:
        raise _invalid_transition(exc) from exc
    except RepositoryError as exc:
        raise db_error("tracking session") from exc


@router.post(
    "/{session_id}/errors",
    response_model=PositionErrorResponse,
    summary="Report a position-source error",
    description="The error is logged and echoed back; the session is not changed.",
)
async def report_position_error(
    session_id: str,
    body: PositionError,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> PositionErrorResponse:
    user = get_authenticated_user(authorization)
    tracker = _load_tracker(get_repository(), user["id"], session_id)
    notification = tracker.handle_error(body)
    return PositionErrorResponse(session=tracker.session, notification=notification)


@router.post("/{session_id}/pause", response_model=TrackingSession, summary="Pause tracking")
async def pause_tracking(
    session_id: str,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TrackingSession:
    user = get_authenticated_user(authorization)
    tracker = _load_tracker(get_repository(), user["id"], session_id)

    try:
        return tracker.pause()
    except TrackingStateError as exc:
        raise _invalid_transition(exc) from exc
    except RepositoryError as exc:
        raise db_error("tracking session") from exc


@router.post("/{session_id}/resume", response_model=TrackingSession, summary="Resume tracking")
async def resume_tracking(
    session_id: str,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TrackingSession:
    user = get_authenticated_user(authorization)
    tracker = _load_tracker(get_repository(), user["id"], session_id)

    try:
        return tracker.resume()
    except TrackingStateError as exc:
        raise _invalid_transition(exc) from exc
    except RepositoryError as exc:
        raise db_error("tracking session") from exc


@router.post(
    "/{session_id}/stop",
    response_model=TrackingStopResponse,
    summary="Stop tracking and log the trip",
)
async def stop_tracking(
    session_id: str,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TrackingStopResponse:
    user = get_authenticated_user(authorization)
    tracker = _load_tracker(get_repository(), user["id"], session_id)

    try:
        session, activity = tracker.stop()
    except TrackingStateError as exc:
        raise _invalid_transition(exc) from exc
    except RepositoryError as exc:
        raise db_error("tracking session") from exc

    return TrackingStopResponse(session=session, activity=activity)
