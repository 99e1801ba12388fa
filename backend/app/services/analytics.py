"""
Analytics Service
=================
Aggregates a user's activity history for the dashboard and analytics views.

    today:     carbon, cost and count for activities dated today (UTC) plus
               the most recent entries
    summary:   lifetime totals, average carbon per active day, the last 7
               active days, carbon per activity type (in the order types
               first appear in the history), and this week vs last week
               (rolling 7-day windows ending now)

All aggregation is done on a pandas DataFrame built from the history rows.
Reads only; nothing here writes back to the repository.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pandas as pd

from app.models.activity import ActivityHistory
from app.models.analytics import (
    ActivityTypeTotal,
    AnalyticsSummary,
    DailyTotal,
    TodaySummary,
    WeeklyComparison,
)
from app.services.emissions import round_half_up

logger = logging.getLogger(__name__)

DAILY_WINDOW = 7
RECENT_LIMIT = 5


def _to_frame(activities: list[ActivityHistory]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "activity_type": a.activity_type,
                "activity_date": a.activity_date,
                "carbon": a.carbon_emitted,
                "cost": a.cost_spent,
            }
            for a in activities
        ],
        columns=["activity_type", "activity_date", "carbon", "cost"],
    )
    df["day"] = pd.to_datetime(df["activity_date"], utc=True)
    return df


def pretty_activity_type(activity_type: str) -> str:
    """'manual_travel' -> 'Manual Travel'."""
    return activity_type.replace("_", " ").title()


def filter_activities(
    activities: list[ActivityHistory],
    activity_type: Optional[str] = None,
    on_date: Optional[date] = None,
) -> list[ActivityHistory]:
    """History filtered by type and/or exact date, newest first."""
    rows = activities
    if activity_type:
        rows = [a for a in rows if a.activity_type == activity_type]
    if on_date:
        day = on_date.isoformat()
        rows = [a for a in rows if a.activity_date == day]
    return sorted(rows, key=lambda a: a.created_at, reverse=True)


def today_summary(
    activities: list[ActivityHistory],
    now: Optional[datetime] = None,
) -> TodaySummary:
    now = now or datetime.now(timezone.utc)
    today = now.date()
    todays = [a for a in activities if a.activity_date == today.isoformat()]

    return TodaySummary(
        date=today,
        carbon=round_half_up(sum(a.carbon_emitted for a in todays)),
        cost=round_half_up(sum(a.cost_spent for a in todays)),
        activities=len(todays),
        recent=filter_activities(activities)[:RECENT_LIMIT],
    )


def summarise(
    activities: list[ActivityHistory],
    now: Optional[datetime] = None,
) -> AnalyticsSummary:
    now = now or datetime.now(timezone.utc)

    if not activities:
        return AnalyticsSummary(
            total_carbon=0.0,
            total_cost=0.0,
            total_activities=0,
            avg_daily_carbon=0.0,
            daily=[],
            by_activity_type=[],
            weekly_comparison=WeeklyComparison(last_week_carbon=0.0, this_week_carbon=0.0),
        )

    df = _to_frame(activities)

    # --------------------------------------------------------------
    # Totals
    # --------------------------------------------------------------
    total_carbon = float(df["carbon"].sum())
    total_cost = float(df["cost"].sum())
    active_days = df["activity_date"].nunique()
    avg_daily = total_carbon / active_days if active_days else 0.0

    # --------------------------------------------------------------
    # Last N active days
    # --------------------------------------------------------------
    daily_df = (
        df.groupby("activity_date")[["carbon", "cost"]]
        .sum()
        .sort_index()
        .tail(DAILY_WINDOW)
    )
    daily = [
        DailyTotal(
            date=date.fromisoformat(day),
            carbon=round_half_up(float(row["carbon"])),
            cost=round_half_up(float(row["cost"])),
        )
        for day, row in daily_df.iterrows()
    ]

    # --------------------------------------------------------------
    # Carbon per activity type, in order of first appearance
    # --------------------------------------------------------------
    by_type = [
        ActivityTypeTotal(
            activity_type=str(activity_type),
            name=pretty_activity_type(str(activity_type)),
            carbon=round_half_up(float(carbon)),
        )
        for activity_type, carbon in df.groupby("activity_type", sort=False)["carbon"].sum().items()
    ]

    # --------------------------------------------------------------
    # This week vs last week
    # --------------------------------------------------------------
    now_ts = pd.Timestamp(now)
    if now_ts.tzinfo is None:
        now_ts = now_ts.tz_localize("UTC")
    one_week_ago = now_ts - timedelta(days=7)
    two_weeks_ago = now_ts - timedelta(days=14)

    this_week = df.loc[df["day"] >= one_week_ago, "carbon"].sum()
    last_week = df.loc[(df["day"] >= two_weeks_ago) & (df["day"] < one_week_ago), "carbon"].sum()

    logger.debug(
        "Summarised %d activities over %d active days", len(df), active_days,
    )

    return AnalyticsSummary(
        total_carbon=round_half_up(total_carbon),
        total_cost=round_half_up(total_cost),
        total_activities=len(df),
        avg_daily_carbon=round_half_up(avg_daily),
        daily=daily,
        by_activity_type=by_type,
        weekly_comparison=WeeklyComparison(
            last_week_carbon=round_half_up(float(last_week)),
            this_week_carbon=round_half_up(float(this_week)),
        ),
    )
