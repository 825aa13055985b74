"""Tests for /api/bookings routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import asyncpg
import pytest

from backend.tests.factories import make_booking, make_trip

pytestmark = pytest.mark.asyncio(loop_scope="session")

BOOKING_BODY = {
    "tripId": 7,
    "bookingType": "hotel",
    "provider": "Hotel Lutetia",
    "bookingRef": "HTL-001",
    "startDate": "2026-06-01T15:00:00Z",
    "endDate": "2026-06-05T11:00:00Z",
    "totalPrice": 820,
    "currency": "EUR",
}


def owned_trip():
    return patch("backend.routes.ownership.trip_repo.get", AsyncMock(return_value=make_trip()))


class TestBookingRoutes:
    async def test_search(self, async_client):
        """GET /api/bookings/search → offers."""
        res = await async_client.get("/api/bookings/search?type=flight&to=Lisbon&from=Paris&guests=2")
        assert res.status_code == 200
        offers = res.json()
        assert offers[0]["title"] == "Sample flight to Lisbon"
        assert offers[0]["currency"] == "USD"

    async def test_search_unknown_type(self, async_client):
        res = await async_client.get("/api/bookings/search?type=boat&to=Lisbon")
        assert res.status_code == 422

    async def test_create(self, async_client, sign_in, user):
        """POST /api/bookings for an owned trip → 201."""
        sign_in(user)
        create = AsyncMock(return_value=make_booking())
        with owned_trip(), patch("backend.routes.bookings.booking_repo.create", create):
            res = await async_client.post("/api/bookings", json=BOOKING_BODY)
        assert res.status_code == 201
        assert res.json()["bookingRef"] == "HTL-001"
        assert create.await_args.args[0] == user.id

    async def test_create_duplicate_ref(self, async_client, sign_in, user):
        """A booking ref that already exists → 409."""
        sign_in(user)
        duplicate = AsyncMock(side_effect=asyncpg.UniqueViolationError("duplicate key"))
        with owned_trip(), patch("backend.routes.bookings.booking_repo.create", duplicate):
            res = await async_client.post("/api/bookings", json=BOOKING_BODY)
        assert res.status_code == 409

    async def test_create_negative_price(self, async_client, sign_in, user):
        sign_in(user)
        res = await async_client.post("/api/bookings", json=dict(BOOKING_BODY, totalPrice=-1))
        assert res.status_code == 422

    async def test_create_for_foreign_trip(self, async_client, sign_in, other_user):
        sign_in(other_user)
        with owned_trip():
            res = await async_client.post("/api/bookings", json=BOOKING_BODY)
        assert res.status_code == 403

    async def test_list_for_trip(self, async_client, sign_in, user):
        """GET /api/trips/{id}/bookings → the trip's bookings."""
        sign_in(user)
        listing = AsyncMock(return_value=[make_booking(), make_booking(22, booking_ref="FL-9")])
        with owned_trip(), patch("backend.routes.bookings.booking_repo.list_for_trip", listing):
            res = await async_client.get("/api/trips/7/bookings")
        assert res.status_code == 200
        assert [b["bookingRef"] for b in res.json()] == ["HTL-001", "FL-9"]
