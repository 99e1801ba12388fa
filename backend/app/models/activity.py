"""
Activity Schemas
================
Pydantic models for the three calculators (exercise, food, manual travel),
their computed outputs, the alternative suggestion, and the activity history
record that every calculation appends.

Key design decisions:
- Inputs carry only the enumerated tags the lookup tables know about.
  Anything else is rejected here, at the HTTP boundary, so the emission
  model itself never has to validate.
- Outputs are numeric only and fully determined by the input (plus profile
  weight for exercise).
- ActivityHistory is append-only; input_data keeps the submitted payload.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Allowed values
# ---------------------------------------------------------------------------

ExerciseType = Literal["walking", "running", "cycling", "gym", "yoga"]
Intensity = Literal["low", "moderate", "high"]

DietCategory = Literal["vegetarian", "non_vegetarian", "vegan"]
FoodType = Literal["rice", "wheat", "dairy", "meat", "processed"]
PortionSize = Literal["small", "medium", "large"]

TravelMode = Literal["car", "bike", "public_transport", "train", "walk"]
FuelType = Literal["petrol", "diesel", "electric", "none"]
MileageTier = Literal["low", "medium", "high"]

ActivityType = Literal["exercise", "food", "manual_travel", "realtime_travel"]

VALID_ACTIVITY_TYPES = frozenset({
    "exercise",
    "food",
    "manual_travel",
    "realtime_travel",
})


# ---------------------------------------------------------------------------
# Exercise
# ---------------------------------------------------------------------------

class ExerciseInput(BaseModel):
    """A workout as entered by the user."""

    exercise_type: ExerciseType
    duration_minutes: float = Field(..., gt=0, le=1440)
    intensity: Intensity
    frequency_per_week: int = Field(
        default=3,
        ge=1,
        le=21,
        description="Sessions per week, used to project monthly weight change.",
    )


class ExerciseOutput(BaseModel):
    calories_burned: int
    weight_change_kg: float = Field(
        ...,
        description="Projected monthly body-mass change from the weekly calorie burn.",
    )
    carbon_impact_kg: float


# ---------------------------------------------------------------------------
# Food
# ---------------------------------------------------------------------------

class FoodInput(BaseModel):
    """A daily eating pattern as entered by the user."""

    category: DietCategory
    food_type: FoodType
    quantity: PortionSize
    meals_per_day: int = Field(..., gt=0, le=12)


class FoodOutput(BaseModel):
    daily_emission_kg: float
    weekly_emission_kg: float
    monthly_emission_kg: float


# ---------------------------------------------------------------------------
# Manual travel
# ---------------------------------------------------------------------------

class TravelInput(BaseModel):
    """A trip as entered by the user.

    distance_km may be 0 here so the model stays total; the travel router
    rejects non-positive distances before calculating.
    """

    mode: TravelMode
    distance_km: float = Field(..., ge=0)
    fuel_type: FuelType
    vehicle_age_years: Optional[float] = Field(default=None, ge=0, le=100)
    mileage: Optional[MileageTier] = None


class TravelOutput(BaseModel):
    carbon_kg: float
    cost_spent: float
    cost_per_km: float
    emission_per_km: float


# ---------------------------------------------------------------------------
# Suggestion
# ---------------------------------------------------------------------------

class Suggestion(BaseModel):
    """A single greener (or, for exercise, more intense) alternative."""

    activity_type: ActivityType
    current_choice: str
    alternative: str
    carbon_saved: float
    cost_saved: float
    percentage_improvement: float


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class ActivityHistory(BaseModel):
    """Append-only log entry written after every calculation or finished trip."""

    id: str
    user_id: str
    activity_type: ActivityType
    activity_date: str = Field(..., description="UTC date, YYYY-MM-DD.")
    activity_time: str = Field(..., description="UTC time, HH:MM:SS.")
    input_data: dict[str, Any] = Field(default_factory=dict)
    carbon_emitted: float
    cost_spent: float
    distance_travelled: Optional[float] = None
    duration: Optional[float] = Field(default=None, description="Minutes.")
    alternative_applied: bool = False
    created_at: datetime


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ExerciseCalculationResponse(BaseModel):
    output: ExerciseOutput
    suggestion: Optional[Suggestion] = None
    activity: ActivityHistory


class FoodCalculationResponse(BaseModel):
    output: FoodOutput
    suggestion: Optional[Suggestion] = None
    activity: ActivityHistory


class TravelCalculationResponse(BaseModel):
    output: TravelOutput
    suggestion: Optional[Suggestion] = None
    activity: ActivityHistory
