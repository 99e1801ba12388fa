"""
Realtime Tracking Schemas
=========================
Pydantic models for GPS-tracked trips.

A TrackingSession is a full snapshot: every sample rewrites the whole
record (last write wins). is_paused is persisted so the server can rebuild
the tracker between requests.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.models.activity import ActivityHistory

VehicleType = Literal["car", "bike", "scooter"]
TrackedFuelType = Literal["petrol", "diesel", "electric"]


class Waypoint(BaseModel):
    lat: float
    lng: float
    timestamp: datetime


class PositionSample(BaseModel):
    """One reading from the position source."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timestamp: Optional[datetime] = Field(
        default=None,
        description="When the fix was taken. Defaults to the time it was received.",
    )


class PositionError(BaseModel):
    """An error reported by the position source instead of a sample."""

    code: Optional[int] = None
    message: str = Field(..., max_length=500)


class TrackingSession(BaseModel):
    id: str
    user_id: str
    vehicle_type: VehicleType
    fuel_type: TrackedFuelType
    vehicle_age: float = 0
    start_time: datetime
    end_time: Optional[datetime] = None
    total_distance: float = 0.0
    carbon_emitted: float = 0.0
    money_spent: float = 0.0
    average_speed: float = 0.0
    is_active: bool = True
    is_paused: bool = False
    waypoints: list[Waypoint] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Requests / responses
# ---------------------------------------------------------------------------

class TrackingStartRequest(BaseModel):
    vehicle_type: VehicleType = "car"
    fuel_type: TrackedFuelType = "petrol"
    vehicle_age: float = Field(default=3, ge=0, le=100)


class ActiveSessionResponse(BaseModel):
    session: Optional[TrackingSession] = None


class PositionErrorResponse(BaseModel):
    session: TrackingSession
    notification: str


class TrackingStopResponse(BaseModel):
    session: TrackingSession
    activity: ActivityHistory
