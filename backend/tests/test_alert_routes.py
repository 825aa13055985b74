"""Tests for alert, weather and recommendation routes."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from backend.models.alert import Coordinates, DailyForecast, EmergencyEvent, EmergencyFeed, Forecast
from backend.services.weather_service import UpstreamError
from backend.tests.factories import make_alert, make_trip

pytestmark = pytest.mark.asyncio(loop_scope="session")

ALERT_BODY = {
    "tripId": 7,
    "alertType": "weather",
    "severity": "warning",
    "title": "Storm warning",
    "alertDate": "2026-06-02T00:00:00Z",
}


class TestStoredAlerts:
    async def test_list_for_trip(self, async_client, sign_in, user):
        """GET /api/trips/{id}/alerts → alerts for an owned trip."""
        sign_in(user)
        with (
            patch("backend.routes.ownership.trip_repo.get", AsyncMock(return_value=make_trip())),
            patch("backend.routes.alerts.alert_repo.list_for_trip", AsyncMock(return_value=[make_alert()])),
        ):
            res = await async_client.get("/api/trips/7/alerts")
        assert res.status_code == 200
        assert res.json()[0]["alertType"] == "weather"

    async def test_create(self, async_client, sign_in, user):
        """POST /api/alerts → 201."""
        sign_in(user)
        create = AsyncMock(return_value=make_alert(title="Storm warning"))
        with (
            patch("backend.routes.ownership.trip_repo.get", AsyncMock(return_value=make_trip())),
            patch("backend.routes.alerts.alert_repo.create", create),
        ):
            res = await async_client.post("/api/alerts", json=ALERT_BODY)
        assert res.status_code == 201
        assert create.await_args.args[0] == user.id

    async def test_create_invalid_severity(self, async_client, sign_in, user):
        sign_in(user)
        res = await async_client.post("/api/alerts", json=dict(ALERT_BODY, severity="apocalyptic"))
        assert res.status_code == 422

    async def test_acknowledge(self, async_client, sign_in, user):
        """POST /api/alerts/{id}/acknowledge → acknowledged alert."""
        sign_in(user)
        with (
            patch("backend.routes.alerts.alert_repo.get", AsyncMock(return_value=make_alert())),
            patch("backend.routes.ownership.trip_repo.get", AsyncMock(return_value=make_trip())),
            patch(
                "backend.routes.alerts.alert_repo.acknowledge",
                AsyncMock(return_value=make_alert(acknowledged=True)),
            ),
        ):
            res = await async_client.post("/api/alerts/31/acknowledge")
        assert res.status_code == 200
        assert res.json()["acknowledged"] is True

    async def test_acknowledge_other_users_alert(self, async_client, sign_in, other_user):
        """A trip-less alert belonging to another user → 403."""
        sign_in(other_user)
        with patch("backend.routes.alerts.alert_repo.get", AsyncMock(return_value=make_alert(trip_id=None))):
            res = await async_client.post("/api/alerts/31/acknowledge")
        assert res.status_code == 403

    async def test_acknowledge_missing(self, async_client, sign_in, user):
        sign_in(user)
        with patch("backend.routes.alerts.alert_repo.get", AsyncMock(return_value=None)):
            res = await async_client.post("/api/alerts/999/acknowledge")
        assert res.status_code == 404


class TestLiveFeeds:
    async def test_emergencies(self, async_client):
        """GET /api/alerts/emergencies → feed from the emergency service."""
        feed = EmergencyFeed(
            alerts=[EmergencyEvent(id="EQ1", type="EQ", location="Nice", description="M4.1")],
            total_count=1,
        )
        get = AsyncMock(return_value=feed)
        with patch("backend.routes.alerts.emergency_service.get_emergencies", get):
            res = await async_client.get("/api/alerts/emergencies?latitude=43.7&longitude=7.26&radius=50")
        assert res.status_code == 200
        assert res.json()["totalCount"] == 1
        get.assert_awaited_once_with(43.7, 7.26, 50)

    async def test_emergencies_bad_latitude(self, async_client):
        res = await async_client.get("/api/alerts/emergencies?latitude=91&longitude=0")
        assert res.status_code == 422

    async def test_safety(self, async_client):
        """GET /api/alerts/safety → moderate risk report."""
        res = await async_client.get("/api/alerts/safety?destination=Lisbon")
        assert res.status_code == 200
        data = res.json()
        assert data["destination"] == "Lisbon"
        assert data["riskLevel"] == "moderate"
        assert data["safetyScore"] == 75

    async def test_forecast(self, async_client):
        """GET /api/weather/forecast → daily forecast."""
        forecast = Forecast(
            location=Coordinates(latitude=48.85, longitude=2.35),
            forecast=[DailyForecast(date=date(2026, 6, 1), temperature_max=24.0, temperature_min=14.5)],
        )
        with patch("backend.routes.weather.weather_service.get_forecast", AsyncMock(return_value=forecast)):
            res = await async_client.get("/api/weather/forecast?latitude=48.85&longitude=2.35&days=1")
        assert res.status_code == 200
        day = res.json()["forecast"][0]
        assert day["date"] == "2026-06-01"
        assert day["temperatureMax"] == 24.0

    async def test_forecast_upstream_down(self, async_client):
        """Weather provider failure → 502."""
        failing = AsyncMock(side_effect=UpstreamError("Failed to fetch weather forecast"))
        with patch("backend.routes.weather.weather_service.get_forecast", failing):
            res = await async_client.get("/api/weather/forecast?latitude=48.85&longitude=2.35")
        assert res.status_code == 502

    async def test_forecast_days_out_of_range(self, async_client):
        res = await async_client.get("/api/weather/forecast?latitude=48.85&longitude=2.35&days=17")
        assert res.status_code == 422


class TestRecommendations:
    async def test_destinations(self, async_client):
        res = await async_client.get("/api/recommendations/destinations?limit=1")
        assert res.status_code == 200
        assert [d["name"] for d in res.json()] == ["Paris"]

    async def test_activities(self, async_client):
        res = await async_client.get("/api/recommendations/activities?destination=Kyoto&limit=2")
        assert res.status_code == 200
        assert all(a["location"] == "Kyoto" for a in res.json())

    async def test_optimize(self, async_client):
        res = await async_client.get("/api/recommendations/optimize?itinerary_id=3&optimize_for=cost")
        assert res.status_code == 200
        assert res.json()["optimizeFor"] == "cost"
