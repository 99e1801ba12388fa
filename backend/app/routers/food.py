"""
Food Router
===========
POST /api/v1/food/calculate         — Calculate and log a daily eating pattern.
POST /api/v1/food/apply-suggestion  — Log the stricter-diet alternative.

The logged carbon is the daily emission. A suggestion is only offered when
the stricter diet actually lowers it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, status

from app.auth import db_error, get_authenticated_user
from app.db.repository import RepositoryError, get_repository
from app.models.activity import FoodCalculationResponse, FoodInput
from app.services.activity_log import ActivityLogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/food", tags=["food"])


@router.post(
    "/calculate",
    response_model=FoodCalculationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Calculate and log food intake",
    responses={
        201: {"description": "Food intake calculated and logged"},
        401: {"description": "Authentication required"},
        422: {"description": "Validation error (unknown category/food type/portion)"},
    },
)
async def calculate_food(
    body: FoodInput,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> FoodCalculationResponse:
    """Calculate and log food intake."""
    user = get_authenticated_user(authorization)
    service = ActivityLogService(get_repository())

    try:
        return service.log_food(user["id"], body)
    except RepositoryError as exc:
        raise db_error("food activity") from exc


@router.post(
    "/apply-suggestion",
    response_model=FoodCalculationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log the suggested stricter diet",
    responses={
        201: {"description": "Alternative logged with alternative_applied=true"},
        401: {"description": "Authentication required"},
        409: {"description": "No lower-emission diet exists for this input"},
    },
)
async def apply_food_suggestion(
    body: FoodInput,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> FoodCalculationResponse:
    """Log the suggested alternative for a food entry."""
    user = get_authenticated_user(authorization)
    service = ActivityLogService(get_repository())

    try:
        result = service.apply_food_suggestion(user["id"], body)
    except RepositoryError as exc:
        raise db_error("food activity") from exc

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "No lower-emission diet for this meal", "code": "no_suggestion"},
        )
    return result
