"""
Profile Router
==============
GET /api/v1/profile  — The caller's profile, or 404 if none is stored yet.
PUT /api/v1/profile  — Replace the caller's profile.

Weight is the only attribute the calculators read; the rest is stored for
display.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Header, HTTPException, status

from app.auth import db_error, get_authenticated_user
from app.db.repository import RepositoryError, get_repository
from app.models.profile import ProfileUpdate, UserProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


@router.get("", response_model=UserProfile, summary="Get profile")
async def get_profile(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> UserProfile:
    user = get_authenticated_user(authorization)
    profile = get_repository().get_profile(user["id"])
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "No profile saved yet", "code": "profile_not_found"},
        )
    return profile


@router.put("", response_model=UserProfile, summary="Save profile")
async def save_profile(
    body: ProfileUpdate,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> UserProfile:
    user = get_authenticated_user(authorization)
    profile = UserProfile(
        user_id=user["id"],
        updated_at=datetime.now(timezone.utc),
        **body.model_dump(),
    )

    try:
        saved = get_repository().save_profile(profile)
    except RepositoryError as exc:
        raise db_error("profile") from exc

    logger.info("Saved profile for user %s", user["id"])
    return saved
