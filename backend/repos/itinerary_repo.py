"""Repository for itinerary operations."""

from __future__ import annotations

import asyncpg

from backend.db import transaction
from backend.models.itinerary import (
    CreateItineraryRequest,
    Itinerary,
    ItineraryWithActivities,
    UpdateItineraryRequest,
)
from backend.repos.activity_repo import ActivityRepo
from backend.repos.patching import update_row


def _row_to_itinerary(row: asyncpg.Record) -> Itinerary:
    """Convert a database row to an Itinerary model."""
    return Itinerary(
        id=row["id"],
        trip_id=row["trip_id"],
        user_id=row["user_id"],
        title=row["title"],
        description=row["description"],
        itinerary_data=row["itinerary_data"],
        safety_notes=row["safety_notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ItineraryRepo:
    """All itinerary-related database operations."""

    def __init__(self, activity_repo: ActivityRepo | None = None):
        self.activity_repo = activity_repo or ActivityRepo()

    async def create(self, user_id: int, req: CreateItineraryRequest) -> Itinerary:
        """
        Create an itinerary for a trip. Safety notes start empty.

        Args:
            user_id: Owner of the trip
            req: CreateItineraryRequest with itinerary details

        Returns:
            Newly created Itinerary
        """
        async with transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO itineraries (trip_id, user_id, title, description, itinerary_data, safety_notes)
                VALUES ($1, $2, $3, $4, $5, '{}')
                RETURNING *
                """,
                req.trip_id,
                user_id,
                req.title,
                req.description,
                req.itinerary_data,
            )
            return _row_to_itinerary(row)

    async def get(self, itinerary_id: int) -> Itinerary | None:
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM itineraries WHERE id = $1", itinerary_id)
            return _row_to_itinerary(row) if row else None

    async def list_for_trip(self, trip_id: int) -> list[Itinerary]:
        async with transaction() as conn:
            rows = await conn.fetch("SELECT * FROM itineraries WHERE trip_id = $1 ORDER BY id", trip_id)
            return [_row_to_itinerary(row) for row in rows]

    async def get_with_activities(self, itinerary_id: int) -> ItineraryWithActivities | None:
        """
        Get an itinerary with its activities ordered by position, then start.

        Returns:
            ItineraryWithActivities if found, None otherwise
        """
        itinerary = await self.get(itinerary_id)
        if not itinerary:
            return None
        activities = await self.activity_repo.list_for_itinerary(itinerary_id)
        return ItineraryWithActivities(**itinerary.model_dump(), activities=activities)

    async def update(self, itinerary_id: int, req: UpdateItineraryRequest) -> Itinerary | None:
        """
        Update an itinerary. itinerary_data and safety_notes are merge-patched.

        Returns:
            Updated Itinerary, or None if not found
        """
        fields = req.model_dump(
            exclude_unset=True,
            exclude_none=True,
            exclude={"itinerary_data", "safety_notes"},
        )
        patches = {}
        if req.itinerary_data is not None:
            patches["itinerary_data"] = req.itinerary_data
        if req.safety_notes is not None:
            patches["safety_notes"] = req.safety_notes

        async with transaction() as conn:
            row = await update_row(conn, "itineraries", itinerary_id, fields, patches)
            return _row_to_itinerary(row) if row else None
