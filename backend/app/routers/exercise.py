"""
Exercise Router
===============
POST /api/v1/exercise/calculate         — Calculate and log a workout.
POST /api/v1/exercise/apply-suggestion  — Log the next-intensity alternative.

Calories use the caller's profile weight when one is stored (70 kg
otherwise). The suggestion is always offered unless the workout is already
high intensity.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, status

from app.auth import db_error, get_authenticated_user
from app.db.repository import RepositoryError, get_repository
from app.models.activity import ExerciseCalculationResponse, ExerciseInput
from app.services.activity_log import ActivityLogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/exercise", tags=["exercise"])


@router.post(
    "/calculate",
    response_model=ExerciseCalculationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Calculate and log a workout",
    description=(
        "Returns calories burned, projected monthly weight change and carbon "
        "impact, an optional higher-intensity suggestion, and the stored "
        "history record."
    ),
    responses={
        201: {"description": "Workout calculated and logged"},
        401: {"description": "Authentication required"},
        422: {"description": "Validation error (unknown type/intensity, duration <= 0)"},
    },
)
async def calculate_exercise(
    body: ExerciseInput,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> ExerciseCalculationResponse:
    """Calculate and log a workout."""
    user = get_authenticated_user(authorization)
    service = ActivityLogService(get_repository())

    try:
        return service.log_exercise(user["id"], body)
    except RepositoryError as exc:
        raise db_error("exercise activity") from exc


@router.post(
    "/apply-suggestion",
    response_model=ExerciseCalculationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log the suggested higher-intensity workout",
    responses={
        201: {"description": "Alternative logged with alternative_applied=true"},
        401: {"description": "Authentication required"},
        409: {"description": "No suggestion exists for this workout"},
    },
)
async def apply_exercise_suggestion(
    body: ExerciseInput,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> ExerciseCalculationResponse:
    """Log the suggested alternative for a workout."""
    user = get_authenticated_user(authorization)
    service = ActivityLogService(get_repository())

    try:
        result = service.apply_exercise_suggestion(user["id"], body)
    except RepositoryError as exc:
        raise db_error("exercise activity") from exc

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "Workout is already at the highest intensity", "code": "no_suggestion"},
        )
    return result
