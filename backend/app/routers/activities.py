"""
Activity History & Analytics Router
===================================
GET /api/v1/activities           — History, optionally filtered by type and date.
GET /api/v1/activities/today     — Today's totals and the latest entries.
GET /api/v1/analytics            — Totals, daily series, per-type and weekly comparison.

Read-only. History is returned newest first.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query, status

from app.auth import get_authenticated_user
from app.db.repository import get_repository
from app.models.activity import VALID_ACTIVITY_TYPES, ActivityHistory
from app.models.analytics import AnalyticsSummary, TodaySummary
from app.services.analytics import filter_activities, summarise, today_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["activities"])


def _validate_activity_type(activity_type: Optional[str]) -> Optional[str]:
    if activity_type is not None and activity_type not in VALID_ACTIVITY_TYPES:
        raise HTTPException(
            status_code=422,
            detail={
                "message": f"Invalid activity_type: '{activity_type}'",
                "code": "invalid_activity_type",
                "valid_types": sorted(VALID_ACTIVITY_TYPES),
            },
        )
    return activity_type


@router.get(
    "/activities",
    response_model=list[ActivityHistory],
    summary="List activity history",
)
async def list_activities(
    activity_type: Optional[str] = Query(default=None, description="Filter by activity type."),
    on_date: Optional[date] = Query(default=None, alias="date", description="Filter by date (YYYY-MM-DD)."),
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> list[ActivityHistory]:
    user = get_authenticated_user(authorization)
    _validate_activity_type(activity_type)

    activities = get_repository().get_user_activities(user["id"])
    return filter_activities(activities, activity_type, on_date)


@router.get(
    "/activities/today",
    response_model=TodaySummary,
    status_code=status.HTTP_200_OK,
    summary="Today's carbon and cost totals",
)
async def get_today(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TodaySummary:
    user = get_authenticated_user(authorization)
    return today_summary(get_repository().get_user_activities(user["id"]))


@router.get(
    "/analytics",
    response_model=AnalyticsSummary,
    status_code=status.HTTP_200_OK,
    summary="Carbon and cost analytics",
    description=(
        "All sections are empty (zeros and empty lists) for a user with no "
        "history yet."
    ),
)
async def get_analytics(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> AnalyticsSummary:
    user = get_authenticated_user(authorization)
    return summarise(get_repository().get_user_activities(user["id"]))
