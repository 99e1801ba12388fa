"""
Activity Log Service
====================
Runs a calculator end to end and appends the result to the user's history.

Flow for every calculator:
    1. Compute the output (exercise uses the stored profile weight).
    2. Compute the alternative suggestion, unless disabled by config.
    3. Append an ActivityHistory record with alternative_applied=False.

Applying a suggestion derives the alternative input with the same rule the
suggestion engine used, recomputes, and appends a second record with
alternative_applied=True. The original record is never modified.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from app.config import Settings, get_settings
from app.db.repository import ActivityRepository, get_repository
from app.models.activity import (
    ActivityHistory,
    ActivityType,
    ExerciseCalculationResponse,
    ExerciseInput,
    FoodCalculationResponse,
    FoodInput,
    TravelCalculationResponse,
    TravelInput,
)
from app.services.emissions import compute_exercise, compute_food, compute_travel
from app.services.suggestions import (
    alternative_exercise_input,
    alternative_food_input,
    alternative_travel_input,
    suggest_exercise,
    suggest_food,
    suggest_travel,
)

logger = logging.getLogger(__name__)


def build_activity(
    user_id: str,
    activity_type: ActivityType,
    input_data: dict[str, Any],
    carbon_emitted: float,
    cost_spent: float,
    *,
    distance_travelled: Optional[float] = None,
    duration: Optional[float] = None,
    alternative_applied: bool = False,
    now: Optional[datetime] = None,
) -> ActivityHistory:
    """Stamp a new history record with a fresh id and the current UTC time."""
    now = now or datetime.now(timezone.utc)
    return ActivityHistory(
        id=str(uuid.uuid4()),
        user_id=user_id,
        activity_type=activity_type,
        activity_date=now.date().isoformat(),
        activity_time=now.strftime("%H:%M:%S"),
        input_data=input_data,
        carbon_emitted=carbon_emitted,
        cost_spent=cost_spent,
        distance_travelled=distance_travelled,
        duration=duration,
        alternative_applied=alternative_applied,
        created_at=now,
    )


class ActivityLogService:
    """Computes, suggests and records calculator activities for one repository."""

    def __init__(
        self,
        repository: ActivityRepository | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._repo = repository or get_repository()
        self._settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Exercise
    # ------------------------------------------------------------------

    def log_exercise(
        self,
        user_id: str,
        inp: ExerciseInput,
        *,
        alternative_applied: bool = False,
    ) -> ExerciseCalculationResponse:
        profile = self._repo.get_profile(user_id)
        weight = self._settings.default_weight_kg
        output = compute_exercise(inp, profile, weight)

        suggestion = None
        if self._settings.enable_suggestions and not alternative_applied:
            suggestion = suggest_exercise(inp, output, profile, weight)

        activity = self._repo.add_activity(build_activity(
            user_id,
            "exercise",
            inp.model_dump(mode="json"),
            carbon_emitted=output.carbon_impact_kg,
            cost_spent=0.0,
            duration=inp.duration_minutes,
            alternative_applied=alternative_applied,
        ))
        logger.info(
            "Logged exercise for user %s: %s kcal (alternative=%s)",
            user_id, output.calories_burned, alternative_applied,
        )
        return ExerciseCalculationResponse(output=output, suggestion=suggestion, activity=activity)

    def apply_exercise_suggestion(
        self, user_id: str, inp: ExerciseInput
    ) -> Optional[ExerciseCalculationResponse]:
        alt = alternative_exercise_input(inp)
        if alt is None:
            return None
        return self.log_exercise(user_id, alt, alternative_applied=True)

    # ------------------------------------------------------------------
    # Food
    # ------------------------------------------------------------------

    def log_food(
        self,
        user_id: str,
        inp: FoodInput,
        *,
        alternative_applied: bool = False,
    ) -> FoodCalculationResponse:
        output = compute_food(inp)

        suggestion = None
        if self._settings.enable_suggestions and not alternative_applied:
            suggestion = suggest_food(inp, output)

        activity = self._repo.add_activity(build_activity(
            user_id,
            "food",
            inp.model_dump(mode="json"),
            carbon_emitted=output.daily_emission_kg,
            cost_spent=0.0,
            alternative_applied=alternative_applied,
        ))
        logger.info(
            "Logged food for user %s: %.2f kg/day (alternative=%s)",
            user_id, output.daily_emission_kg, alternative_applied,
        )
        return FoodCalculationResponse(output=output, suggestion=suggestion, activity=activity)

    def apply_food_suggestion(self, user_id: str, inp: FoodInput) -> Optional[FoodCalculationResponse]:
        # Only apply when the suggestion would actually have been offered
        if suggest_food(inp, compute_food(inp)) is None:
            return None
        return self.log_food(user_id, alternative_food_input(inp), alternative_applied=True)

    # ------------------------------------------------------------------
    # Manual travel
    # ------------------------------------------------------------------

    def log_travel(
        self,
        user_id: str,
        inp: TravelInput,
        *,
        alternative_applied: bool = False,
    ) -> TravelCalculationResponse:
        output = compute_travel(inp)

        suggestion = None
        if self._settings.enable_suggestions and not alternative_applied:
            suggestion = suggest_travel(inp, output)

        activity = self._repo.add_activity(build_activity(
            user_id,
            "manual_travel",
            inp.model_dump(mode="json"),
            carbon_emitted=output.carbon_kg,
            cost_spent=output.cost_spent,
            distance_travelled=inp.distance_km,
            alternative_applied=alternative_applied,
        ))
        logger.info(
            "Logged travel for user %s: %s %.1f km, %.2f kg (alternative=%s)",
            user_id, inp.mode, inp.distance_km, output.carbon_kg, alternative_applied,
        )
        return TravelCalculationResponse(output=output, suggestion=suggestion, activity=activity)

    def apply_travel_suggestion(
        self, user_id: str, inp: TravelInput
    ) -> Optional[TravelCalculationResponse]:
        if suggest_travel(inp, compute_travel(inp)) is None:
            return None
        return self.log_travel(user_id, alternative_travel_input(inp), alternative_applied=True)
