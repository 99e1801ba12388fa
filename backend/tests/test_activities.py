"""
Tests for /api/v1/activities and /api/v1/analytics
==================================================
Covers:
- History: newest first, filtered by activity_type and by date
- History: unknown activity_type rejected with invalid_activity_type
- History: only the caller's records are returned
- Today: totals for today's records only
- Analytics: empty history gives zeros; totals and per-type carbon otherwise
- End to end: calculator writes show up in history and analytics

Run: pytest tests/test_activities.py -v
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.services.activity_log import build_activity
from conftest import AUTH_HEADER, USER_ID


def _seed(repo, activity_type: str, carbon: float, cost: float = 0.0, days_ago: int = 0, user_id: str = USER_ID):
    when = datetime.now(timezone.utc) - timedelta(days=days_ago)
    return repo.add_activity(build_activity(user_id, activity_type, {}, carbon, cost, now=when))


class TestHistory:

    def test_newest_first(self, client, repo):
        old = _seed(repo, "food", 1.0, days_ago=2)
        new = _seed(repo, "exercise", 0.5)

        resp = client.get("/api/v1/activities", headers=AUTH_HEADER)

        assert resp.status_code == 200
        assert [a["id"] for a in resp.json()] == [new.id, old.id]

    def test_filter_by_type(self, client, repo):
        _seed(repo, "food", 1.0)
        _seed(repo, "manual_travel", 2.0, cost=1.0)

        resp = client.get(
            "/api/v1/activities",
            params={"activity_type": "manual_travel"},
            headers=AUTH_HEADER,
        )

        data = resp.json()
        assert len(data) == 1
        assert data[0]["activity_type"] == "manual_travel"

    def test_filter_by_date(self, client, repo):
        kept = _seed(repo, "food", 1.0, days_ago=1)
        _seed(repo, "food", 1.0)

        resp = client.get(
            "/api/v1/activities",
            params={"date": kept.activity_date},
            headers=AUTH_HEADER,
        )

        assert [a["id"] for a in resp.json()] == [kept.id]

    def test_invalid_activity_type(self, client):
        resp = client.get(
            "/api/v1/activities",
            params={"activity_type": "flying"},
            headers=AUTH_HEADER,
        )
        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert detail["code"] == "invalid_activity_type"
        assert "realtime_travel" in detail["valid_types"]

    def test_invalid_date(self, client):
        resp = client.get("/api/v1/activities", params={"date": "yesterday"}, headers=AUTH_HEADER)
        assert resp.status_code == 422

    def test_other_users_hidden(self, client, repo):
        _seed(repo, "food", 1.0, user_id="someone-else")
        resp = client.get("/api/v1/activities", headers=AUTH_HEADER)
        assert resp.json() == []


class TestToday:

    def test_today_totals(self, client, repo):
        _seed(repo, "food", 1.25)
        _seed(repo, "manual_travel", 0.5, cost=2.0)
        _seed(repo, "food", 9.0, days_ago=1)

        resp = client.get("/api/v1/activities/today", headers=AUTH_HEADER)

        assert resp.status_code == 200
        data = resp.json()
        assert data["carbon"] == 1.75
        assert data["cost"] == 2.0
        assert data["activities"] == 2

    def test_empty(self, client):
        data = client.get("/api/v1/activities/today", headers=AUTH_HEADER).json()
        assert data["carbon"] == 0.0
        assert data["activities"] == 0
        assert data["recent"] == []


class TestAnalytics:

    def test_empty_history(self, client):
        resp = client.get("/api/v1/analytics", headers=AUTH_HEADER)

        assert resp.status_code == 200
        data = resp.json()
        assert data["total_carbon"] == 0.0
        assert data["total_activities"] == 0
        assert data["daily"] == []
        assert data["by_activity_type"] == []

    def test_totals_and_types(self, client, repo):
        _seed(repo, "food", 2.0)
        _seed(repo, "food", 1.0, days_ago=1)
        _seed(repo, "realtime_travel", 3.0, cost=1.5)

        data = client.get("/api/v1/analytics", headers=AUTH_HEADER).json()

        assert data["total_carbon"] == 6.0
        assert data["total_cost"] == 1.5
        assert data["total_activities"] == 3
        assert data["avg_daily_carbon"] == 3.0
        by_type = {t["activity_type"]: t for t in data["by_activity_type"]}
        assert by_type["food"]["carbon"] == 3.0
        assert by_type["realtime_travel"]["name"] == "Realtime Travel"
        assert data["weekly_comparison"]["this_week_carbon"] == 6.0


class TestEndToEnd:

    def test_calculators_feed_history(self, client):
        client.post(
            "/api/v1/food/calculate",
            json={"category": "vegan", "food_type": "rice", "quantity": "medium", "meals_per_day": 3},
            headers=AUTH_HEADER,
        )
        client.post(
            "/api/v1/travel/calculate",
            json={"mode": "bike", "distance_km": 20, "fuel_type": "electric", "mileage": "high"},
            headers=AUTH_HEADER,
        )

        history = client.get("/api/v1/activities", headers=AUTH_HEADER).json()
        assert {a["activity_type"] for a in history} == {"food", "manual_travel"}

        data = client.get("/api/v1/analytics", headers=AUTH_HEADER).json()
        # 0.4 * 3 meals + 0.03 * 20 km
        assert data["total_carbon"] == 1.8
        assert data["total_activities"] == 2
