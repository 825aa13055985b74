"""Tests for the layout surface: JSON description, rendered page, action firing."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from backend.tests.factories import make_alert, make_details, make_trip

pytestmark = pytest.mark.asyncio(loop_scope="session")


def trip_loaded(details=None, alerts=None):
    """Patch the layout routes' trip and alert lookups."""
    details = details if details is not None else make_details()
    return (
        patch("backend.routes.layouts.trip_repo.get_with_details", AsyncMock(return_value=details)),
        patch("backend.routes.layouts.alert_repo.list_active", AsyncMock(return_value=alerts or [])),
    )


class TestLayoutJson:
    async def test_itinerary(self, async_client):
        """GET /api/layouts/itinerary → config, data bag and metadata."""
        trip_patch, alert_patch = trip_loaded(alerts=[make_alert()])
        with trip_patch, alert_patch:
            res = await async_client.get("/api/layouts/itinerary?trip_id=7")
        assert res.status_code == 200
        body = res.json()
        assert body["config"]["mode"] == "itinerary"
        assert body["metadata"]["tripId"] == 7
        assert body["metadata"]["authenticated"] is False
        section_ids = [s["id"] for s in body["config"]["sections"]]
        assert section_ids[:3] == ["header", "stats", "schedule"]
        assert "alerts" in section_ids

    async def test_guide_without_trip(self, async_client):
        res = await async_client.get("/api/layouts/guide")
        assert res.status_code == 200
        assert res.json()["metadata"]["tripId"] is None

    async def test_unknown_mode(self, async_client):
        res = await async_client.get("/api/layouts/dashboard")
        assert res.status_code == 404

    async def test_missing_trip(self, async_client):
        with patch("backend.routes.layouts.trip_repo.get_with_details", AsyncMock(return_value=None)):
            res = await async_client.get("/api/layouts/itinerary?trip_id=999")
        assert res.status_code == 404


class TestLayoutPage:
    async def test_renders_html(self, async_client):
        """GET /layouts/itinerary → full HTML document with the trip's sections."""
        trip_patch, alert_patch = trip_loaded()
        with trip_patch, alert_patch:
            res = await async_client.get("/layouts/itinerary?trip_id=7")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/html")
        html = res.text
        assert html.startswith("<!DOCTYPE html>")
        assert '<section id="schedule"' in html
        assert "/api/layouts/itinerary/actions?trip_id=7" in html

    async def test_auth_only_sections_hidden_for_anonymous(self, async_client, sign_in):
        sign_in(None)
        trip_patch, alert_patch = trip_loaded()
        with trip_patch, alert_patch:
            res = await async_client.get("/layouts/itinerary?trip_id=7")
        assert '<section id="notes"' not in res.text

    async def test_auth_only_sections_shown_when_signed_in(self, async_client, sign_in, user):
        sign_in(user)
        trip_patch, alert_patch = trip_loaded()
        with trip_patch, alert_patch:
            res = await async_client.get("/layouts/itinerary?trip_id=7")
        assert '<section id="notes"' in res.text

    async def test_missing_trip_renders_error_page(self, async_client):
        """A trip that cannot be found still renders, as the error takeover."""
        with patch("backend.routes.layouts.trip_repo.get_with_details", AsyncMock(return_value=None)):
            res = await async_client.get("/layouts/calendar?trip_id=999")
        assert res.status_code == 404
        assert 'class="sdui-error"' in res.text
        assert "Trip not found." in res.text

    async def test_storage_failure_renders_error_page(self, async_client):
        failing = AsyncMock(side_effect=RuntimeError("connection reset"))
        with patch("backend.routes.layouts.trip_repo.get_with_details", failing):
            res = await async_client.get("/layouts/itinerary?trip_id=7")
        assert res.status_code == 500
        assert 'class="sdui-error"' in res.text
        assert "connection reset" not in res.text


class TestLayoutActions:
    async def test_save_trip(self, async_client, sign_in, user):
        """Firing the floating save button → trip marked planned."""
        sign_in(user)
        trip_patch, alert_patch = trip_loaded()
        set_status = AsyncMock(return_value=make_trip(status="planned"))
        with (
            trip_patch,
            alert_patch,
            patch("backend.routes.layouts.action_service.trip_repo.get", AsyncMock(return_value=make_trip())),
            patch("backend.routes.layouts.action_service.trip_repo.set_status", set_status),
        ):
            res = await async_client.post("/api/layouts/itinerary/actions?trip_id=7", json={"action_id": "save"})
        assert res.status_code == 200
        assert res.json()["status"] == "planned"
        set_status.assert_awaited_once_with(7, "planned")

    async def test_save_trip_anonymous(self, async_client, sign_in):
        """Saving requires a session → 401."""
        sign_in(None)
        trip_patch, alert_patch = trip_loaded()
        with trip_patch, alert_patch:
            res = await async_client.post("/api/layouts/itinerary/actions?trip_id=7", json={"action_id": "save"})
        assert res.status_code == 401

    async def test_save_someone_elses_trip(self, async_client, sign_in, other_user):
        sign_in(other_user)
        trip_patch, alert_patch = trip_loaded()
        with (
            trip_patch,
            alert_patch,
            patch("backend.routes.layouts.action_service.trip_repo.get", AsyncMock(return_value=make_trip())),
        ):
            res = await async_client.post("/api/layouts/itinerary/actions?trip_id=7", json={"action_id": "save"})
        assert res.status_code == 403

    async def test_add_activity_redirects(self, async_client):
        trip_patch, alert_patch = trip_loaded()
        with trip_patch, alert_patch:
            res = await async_client.post(
                "/api/layouts/itinerary/actions?trip_id=7", json={"actionId": "add-activity"}
            )
        assert res.status_code == 200
        assert res.json()["redirect"] == "/layouts/itinerary?trip_id=7#schedule"

    async def test_top_action_is_not_fireable(self, async_client):
        """Top-positioned actions are not rendered in the bar, so they cannot be fired."""
        trip_patch, alert_patch = trip_loaded()
        with trip_patch, alert_patch:
            res = await async_client.post("/api/layouts/itinerary/actions?trip_id=7", json={"action_id": "share"})
        assert res.status_code == 404

    async def test_unknown_action_id(self, async_client):
        trip_patch, alert_patch = trip_loaded()
        with trip_patch, alert_patch:
            res = await async_client.post("/api/layouts/itinerary/actions?trip_id=7", json={"action_id": "nope"})
        assert res.status_code == 404

    async def test_item_action_complete_activity(self, async_client, sign_in, user):
        """A per-item button in the schedule completes that activity."""
        sign_in(user)
        details = make_details()
        trip_patch, alert_patch = trip_loaded(details)
        activity = details.activities[0]
        set_completed = AsyncMock(return_value=activity.model_copy(update={"completed": True}))
        with (
            trip_patch,
            alert_patch,
            patch("backend.routes.layouts.action_service.activity_repo.get", AsyncMock(return_value=activity)),
            patch("backend.routes.layouts.action_service.trip_repo.get", AsyncMock(return_value=make_trip())),
            patch("backend.routes.layouts.action_service.activity_repo.set_completed", set_completed),
        ):
            res = await async_client.post(
                "/api/layouts/itinerary/actions?trip_id=7", json={"action_id": f"complete-{activity.id}"}
            )
        assert res.status_code == 200
        set_completed.assert_awaited_once_with(activity.id, True)
