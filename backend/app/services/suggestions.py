"""
Suggestion Engine
=================
Proposes one alternative for a submitted activity and quantifies the gain.

Policy (single step, greedy, table-driven):
    exercise:  next intensity tier up (low -> moderate -> high). Always
               offered unless already at "high"; no positivity check on
               the calorie delta.
    food:      next stricter diet (non_vegetarian -> vegetarian -> vegan).
               Suppressed unless daily emission strictly drops.
    travel:    walk when under 5 km, otherwise public transport. Not offered
               for walk or public transport. Suppressed unless carbon
               strictly drops. Cost saved is reported as-is and may be zero
               or negative.

The ``alternative_*_input`` helpers are shared with the apply-suggestion
endpoints so the logged alternative is exactly the one that was suggested.
"""

from __future__ import annotations

from typing import Optional

from app.models.activity import (
    ExerciseInput,
    ExerciseOutput,
    FoodInput,
    FoodOutput,
    Suggestion,
    TravelInput,
    TravelOutput,
)
from app.models.profile import UserProfile
from app.services.emissions import (
    DEFAULT_WEIGHT_KG,
    compute_exercise,
    compute_food,
    compute_travel,
    round_half_up,
)

NEXT_INTENSITY = {"low": "moderate", "moderate": "high"}
STRICTER_DIET = {"non_vegetarian": "vegetarian", "vegetarian": "vegan"}
WALKABLE_DISTANCE_KM = 5

_TRAVEL_LABELS = {"walk": "Walking", "public_transport": "Public Transport"}


# ---------------------------------------------------------------------------
# Alternative inputs
# ---------------------------------------------------------------------------

def alternative_exercise_input(inp: ExerciseInput) -> Optional[ExerciseInput]:
    new_intensity = NEXT_INTENSITY.get(inp.intensity)
    if new_intensity is None:
        return None
    return inp.model_copy(update={"intensity": new_intensity})


def alternative_food_input(inp: FoodInput) -> Optional[FoodInput]:
    new_category = STRICTER_DIET.get(inp.category)
    if new_category is None:
        return None
    return inp.model_copy(update={"category": new_category})


def alternative_travel_input(inp: TravelInput) -> Optional[TravelInput]:
    if inp.mode in ("walk", "public_transport"):
        return None
    if inp.distance_km < WALKABLE_DISTANCE_KM:
        return inp.model_copy(update={"mode": "walk", "fuel_type": "none"})
    return inp.model_copy(update={"mode": "public_transport"})


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

def suggest_exercise(
    inp: ExerciseInput,
    output: ExerciseOutput,
    profile: Optional[UserProfile] = None,
    default_weight_kg: float = DEFAULT_WEIGHT_KG,
) -> Optional[Suggestion]:
    alt = alternative_exercise_input(inp)
    if alt is None:
        return None

    new_output = compute_exercise(alt, profile, default_weight_kg)
    if output.calories_burned:
        improvement = (
            (new_output.calories_burned - output.calories_burned)
            / output.calories_burned * 100
        )
    else:
        improvement = 0.0

    return Suggestion(
        activity_type="exercise",
        current_choice=f"{inp.exercise_type} ({inp.intensity} intensity)",
        alternative=f"{alt.exercise_type} ({alt.intensity} intensity)",
        carbon_saved=0.0,
        cost_saved=0.0,
        percentage_improvement=improvement,
    )


def suggest_food(inp: FoodInput, output: FoodOutput) -> Optional[Suggestion]:
    alt = alternative_food_input(inp)
    if alt is None:
        return None

    new_output = compute_food(alt)
    carbon_saved = output.daily_emission_kg - new_output.daily_emission_kg
    if carbon_saved <= 0:
        return None

    return Suggestion(
        activity_type="food",
        current_choice=f"{inp.category} diet",
        alternative=f"{alt.category} diet",
        carbon_saved=round_half_up(carbon_saved),
        cost_saved=0.0,
        percentage_improvement=carbon_saved / output.daily_emission_kg * 100,
    )


def suggest_travel(inp: TravelInput, output: TravelOutput) -> Optional[Suggestion]:
    alt = alternative_travel_input(inp)
    if alt is None:
        return None

    new_output = compute_travel(alt)
    carbon_saved = output.carbon_kg - new_output.carbon_kg
    cost_saved = output.cost_spent - new_output.cost_spent
    if carbon_saved <= 0:
        return None

    return Suggestion(
        activity_type="manual_travel",
        current_choice=inp.mode,
        alternative=_TRAVEL_LABELS[alt.mode],
        carbon_saved=round_half_up(carbon_saved),
        cost_saved=round_half_up(cost_saved),
        percentage_improvement=carbon_saved / output.carbon_kg * 100,
    )
