"""
Manual Travel Router
====================
POST /api/v1/travel/calculate         — Calculate and log a trip.
POST /api/v1/travel/apply-suggestion  — Log the walking / public transport alternative.

Distance must be positive here; the emission model itself accepts 0 and
returns zeros.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, status

from app.auth import db_error, get_authenticated_user
from app.db.repository import RepositoryError, get_repository
from app.models.activity import TravelCalculationResponse, TravelInput
from app.services.activity_log import ActivityLogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/travel", tags=["travel"])


def _validate_distance(body: TravelInput) -> None:
    if body.distance_km <= 0:
        raise HTTPException(
            status_code=422,
            detail={"message": "Distance must be greater than 0 km", "code": "invalid_distance"},
        )


@router.post(
    "/calculate",
    response_model=TravelCalculationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Calculate and log a trip",
    responses={
        201: {"description": "Trip calculated and logged"},
        401: {"description": "Authentication required"},
        422: {"description": "Validation error (unknown mode/fuel, distance <= 0)"},
    },
)
async def calculate_travel(
    body: TravelInput,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TravelCalculationResponse:
    """Calculate and log a trip."""
    user = get_authenticated_user(authorization)
    _validate_distance(body)
    service = ActivityLogService(get_repository())

    try:
        return service.log_travel(user["id"], body)
    except RepositoryError as exc:
        raise db_error("travel activity") from exc


@router.post(
    "/apply-suggestion",
    response_model=TravelCalculationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log the suggested greener trip",
    responses={
        201: {"description": "Alternative logged with alternative_applied=true"},
        401: {"description": "Authentication required"},
        409: {"description": "No lower-carbon mode exists for this trip"},
    },
)
async def apply_travel_suggestion(
    body: TravelInput,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> TravelCalculationResponse:
    """Log the suggested alternative for a trip."""
    user = get_authenticated_user(authorization)
    _validate_distance(body)
    service = ActivityLogService(get_repository())

    try:
        result = service.apply_travel_suggestion(user["id"], body)
    except RepositoryError as exc:
        raise db_error("travel activity") from exc

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "No lower-carbon option for this trip", "code": "no_suggestion"},
        )
    return result
