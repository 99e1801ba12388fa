"""
Emission & Cost Model
=====================
Pure functions mapping a calculator input to its numeric output using
fixed lookup tables and linear formulas.

    exercise:  calories = MET * weight_kg * minutes / 60
               monthly weight change = weekly calories * 4 / 7700
               carbon = minutes * 0.05
    food:      daily = per-meal emission * meals; weekly = daily * 7;
               monthly = daily * 30
    travel:    carbon = factor[mode][fuel] * km
               cost = km / mileage * fuel price, +5% per year over 5 years old

No validation happens here. Inputs arrive as pydantic models whose Literal
fields already restrict every table key, so a lookup can only fail if a
caller bypasses the models.

Rounding is half-up on the exact binary value (what a browser's toFixed and
Math.round do), not Python's round-half-even, so 122.5 kcal reports as 123.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from app.models.activity import (
    ExerciseInput,
    ExerciseOutput,
    FoodInput,
    FoodOutput,
    TravelInput,
    TravelOutput,
)
from app.models.profile import UserProfile

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_WEIGHT_KG = 70.0
KCAL_PER_KG = 7700
WEEKS_PER_MONTH = 4
EXERCISE_CARBON_PER_MINUTE = 0.05

VEHICLE_AGE_SURCHARGE_THRESHOLD = 5
VEHICLE_AGE_SURCHARGE_PER_YEAR = 0.05

# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

MET_VALUES: dict[str, dict[str, float]] = {
    "walking": {"low": 2.5, "moderate": 3.5, "high": 4.5},
    "running": {"low": 6.0, "moderate": 8.0, "high": 10.0},
    "cycling": {"low": 4.0, "moderate": 6.8, "high": 10.0},
    "gym":     {"low": 3.0, "moderate": 5.0, "high": 8.0},
    "yoga":    {"low": 2.0, "moderate": 3.0, "high": 4.0},
}

# kg CO2 per meal, keyed by diet category -> food type -> portion size
FOOD_CARBON_FACTORS: dict[str, dict[str, dict[str, float]]] = {
    "vegetarian": {
        "rice":      {"small": 0.3,  "medium": 0.5,  "large": 0.8},
        "wheat":     {"small": 0.25, "medium": 0.4,  "large": 0.6},
        "dairy":     {"small": 0.4,  "medium": 0.7,  "large": 1.0},
        "meat":      {"small": 0.0,  "medium": 0.0,  "large": 0.0},
        "processed": {"small": 0.5,  "medium": 0.8,  "large": 1.2},
    },
    "non_vegetarian": {
        "rice":      {"small": 0.3,  "medium": 0.5,  "large": 0.8},
        "wheat":     {"small": 0.25, "medium": 0.4,  "large": 0.6},
        "dairy":     {"small": 0.4,  "medium": 0.7,  "large": 1.0},
        "meat":      {"small": 1.5,  "medium": 2.5,  "large": 4.0},
        "processed": {"small": 0.8,  "medium": 1.2,  "large": 1.8},
    },
    "vegan": {
        "rice":      {"small": 0.25, "medium": 0.4,  "large": 0.6},
        "wheat":     {"small": 0.2,  "medium": 0.35, "large": 0.5},
        "dairy":     {"small": 0.0,  "medium": 0.0,  "large": 0.0},
        "meat":      {"small": 0.0,  "medium": 0.0,  "large": 0.0},
        "processed": {"small": 0.4,  "medium": 0.6,  "large": 0.9},
    },
}

# kg CO2 per km, keyed by travel mode -> fuel type
TRAVEL_CARBON_FACTORS: dict[str, dict[str, float]] = {
    "car":              {"petrol": 0.12, "diesel": 0.15, "electric": 0.05,  "none": 0.0},
    "bike":             {"petrol": 0.08, "diesel": 0.10, "electric": 0.03,  "none": 0.0},
    "public_transport": {"petrol": 0.04, "diesel": 0.05, "electric": 0.02,  "none": 0.0},
    "train":            {"petrol": 0.03, "diesel": 0.04, "electric": 0.015, "none": 0.0},
    "walk":             {"petrol": 0.0,  "diesel": 0.0,  "electric": 0.0,   "none": 0.0},
}

# currency units per litre (per kWh-equivalent for electric)
FUEL_COSTS: dict[str, float] = {
    "petrol": 1.5,
    "diesel": 1.4,
    "electric": 0.3,
    "none": 0.0,
}

# km per litre
MILEAGE_VALUES: dict[str, float] = {
    "low": 7.5,
    "medium": 12.5,
    "high": 17.5,
}


# ---------------------------------------------------------------------------
# Rounding helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float, places: int = 2) -> float:
    """Round *value* to *places* decimals, ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round_to_int(value: float) -> int:
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Calculators
# ---------------------------------------------------------------------------

def resolve_weight(
    profile: Optional[UserProfile],
    default_weight_kg: float = DEFAULT_WEIGHT_KG,
) -> float:
    """Profile weight if set and non-zero, otherwise the default."""
    if profile is not None and profile.weight_kg:
        return profile.weight_kg
    return default_weight_kg


def compute_exercise(
    inp: ExerciseInput,
    profile: Optional[UserProfile] = None,
    default_weight_kg: float = DEFAULT_WEIGHT_KG,
) -> ExerciseOutput:
    weight = resolve_weight(profile, default_weight_kg)
    met = MET_VALUES[inp.exercise_type][inp.intensity]

    calories = met * weight * inp.duration_minutes / 60
    weekly_calories = calories * inp.frequency_per_week
    weight_change = weekly_calories * WEEKS_PER_MONTH / KCAL_PER_KG
    carbon_impact = inp.duration_minutes * EXERCISE_CARBON_PER_MINUTE

    return ExerciseOutput(
        calories_burned=round_to_int(calories),
        weight_change_kg=round_half_up(weight_change),
        carbon_impact_kg=round_half_up(carbon_impact),
    )


def compute_food(inp: FoodInput) -> FoodOutput:
    per_meal = FOOD_CARBON_FACTORS[inp.category][inp.food_type][inp.quantity]
    daily = per_meal * inp.meals_per_day

    return FoodOutput(
        daily_emission_kg=round_half_up(daily),
        weekly_emission_kg=round_half_up(daily * 7),
        monthly_emission_kg=round_half_up(daily * 30),
    )


def compute_travel(inp: TravelInput) -> TravelOutput:
    factor = TRAVEL_CARBON_FACTORS[inp.mode][inp.fuel_type]
    carbon = factor * inp.distance_km

    cost = 0.0
    if inp.fuel_type != "none" and inp.mileage:
        fuel_consumed = inp.distance_km / MILEAGE_VALUES[inp.mileage]
        cost = fuel_consumed * FUEL_COSTS[inp.fuel_type]

        age = inp.vehicle_age_years
        if age and age > VEHICLE_AGE_SURCHARGE_THRESHOLD:
            cost *= 1 + (age - VEHICLE_AGE_SURCHARGE_THRESHOLD) * VEHICLE_AGE_SURCHARGE_PER_YEAR

    if inp.distance_km > 0:
        cost_per_km = cost / inp.distance_km
        emission_per_km = carbon / inp.distance_km
    else:
        cost_per_km = 0.0
        emission_per_km = 0.0

    return TravelOutput(
        carbon_kg=round_half_up(carbon),
        cost_spent=round_half_up(cost),
        cost_per_km=round_half_up(cost_per_km),
        emission_per_km=round_half_up(emission_per_km, 3),
    )
