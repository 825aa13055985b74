"""Repository for trip operations."""

from __future__ import annotations

import asyncpg

from backend.db import transaction
from backend.models.trip import CreateTripRequest, Trip, TripDetails, UpdateTripRequest
from backend.repos.activity_repo import _row_to_activity
from backend.repos.booking_repo import _row_to_booking
from backend.repos.itinerary_repo import _row_to_itinerary
from backend.repos.patching import update_row


def _row_to_trip(row: asyncpg.Record) -> Trip:
    """Convert a database row to a Trip model."""
    return Trip(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        description=row["description"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=row["status"],
        trip_data=row["trip_data"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class TripRepo:
    """All trip-related database operations."""

    async def create(self, user_id: int | None, req: CreateTripRequest) -> Trip:
        """
        Create a draft trip.

        Args:
            user_id: Owner, or None for an anonymous trip
            req: CreateTripRequest with trip details

        Returns:
            Newly created Trip
        """
        async with transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO trips (user_id, name, description, start_date, end_date, status, trip_data)
                VALUES ($1, $2, $3, $4, $5, 'draft', $6)
                RETURNING *
                """,
                user_id,
                req.name,
                req.description,
                req.start_date,
                req.end_date,
                req.trip_data,
            )
            return _row_to_trip(row)

    async def get(self, trip_id: int) -> Trip | None:
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM trips WHERE id = $1", trip_id)
            return _row_to_trip(row) if row else None

    async def get_with_details(self, trip_id: int) -> TripDetails | None:
        """
        Get a trip with its itineraries, activities and bookings.
        Activities and bookings are ordered by start date. One transaction, so
        the four reads see the same snapshot.

        Args:
            trip_id: Trip ID

        Returns:
            TripDetails if found, None otherwise
        """
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM trips WHERE id = $1", trip_id)
            if not row:
                return None
            itineraries = await conn.fetch("SELECT * FROM itineraries WHERE trip_id = $1 ORDER BY id", trip_id)
            activities = await conn.fetch(
                "SELECT * FROM activities WHERE trip_id = $1 ORDER BY start_date, position",
                trip_id,
            )
            bookings = await conn.fetch("SELECT * FROM bookings WHERE trip_id = $1 ORDER BY start_date", trip_id)

        return TripDetails(
            **_row_to_trip(row).model_dump(),
            itineraries=[_row_to_itinerary(r) for r in itineraries],
            activities=[_row_to_activity(r) for r in activities],
            bookings=[_row_to_booking(r) for r in bookings],
        )

    async def list_for_user(self, user_id: int, limit: int = 20, offset: int = 0) -> tuple[list[Trip], int]:
        """
        One page of a user's trips, newest first, plus the total count.

        Args:
            user_id: Owner
            limit: Page size
            offset: Rows to skip

        Returns:
            (trips, total)
        """
        async with transaction() as conn:
            rows = await conn.fetch(
                "SELECT * FROM trips WHERE user_id = $1 ORDER BY created_at DESC, id DESC LIMIT $2 OFFSET $3",
                user_id,
                limit,
                offset,
            )
            total = await conn.fetchval("SELECT count(*) FROM trips WHERE user_id = $1", user_id)
            return [_row_to_trip(row) for row in rows], total or 0

    async def update(self, trip_id: int, req: UpdateTripRequest) -> Trip | None:
        """
        Update a trip. trip_data is merge-patched.

        Returns:
            Updated Trip, or None if not found
        """
        fields = req.model_dump(exclude_unset=True, exclude_none=True, exclude={"trip_data"})
        patches = {"trip_data": req.trip_data} if req.trip_data is not None else {}

        async with transaction() as conn:
            row = await update_row(conn, "trips", trip_id, fields, patches)
            return _row_to_trip(row) if row else None

    async def set_status(self, trip_id: int, status: str) -> Trip | None:
        async with transaction() as conn:
            row = await conn.fetchrow(
                "UPDATE trips SET status = $2, updated_at = now() WHERE id = $1 RETURNING *",
                trip_id,
                status,
            )
            return _row_to_trip(row) if row else None

    async def delete(self, trip_id: int) -> bool:
        """
        Delete a trip and, by cascade, everything under it.

        Returns:
            True if deleted, False if not found
        """
        async with transaction() as conn:
            result = await conn.execute("DELETE FROM trips WHERE id = $1", trip_id)
            return result == "DELETE 1"
