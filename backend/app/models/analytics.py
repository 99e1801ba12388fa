"""
Analytics Schemas
=================
Dashboard and analytics payloads, returned in one call each so the
client can render its charts in a single round-trip.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from app.models.activity import ActivityHistory


class DailyTotal(BaseModel):
    date: date
    carbon: float
    cost: float


class ActivityTypeTotal(BaseModel):
    activity_type: str
    name: str
    carbon: float


class WeeklyComparison(BaseModel):
    last_week_carbon: float
    this_week_carbon: float


class TodaySummary(BaseModel):
    date: date
    carbon: float
    cost: float
    activities: int
    recent: list[ActivityHistory]


class AnalyticsSummary(BaseModel):
    total_carbon: float
    total_cost: float
    total_activities: int
    avg_daily_carbon: float
    daily: list[DailyTotal]
    by_activity_type: list[ActivityTypeTotal]
    weekly_comparison: WeeklyComparison
