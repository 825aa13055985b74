"""Repository for activity operations."""

from __future__ import annotations

from datetime import datetime

import asyncpg

from backend.db import transaction
from backend.models.activity import Activity, CreateActivityRequest, UpdateActivityRequest
from backend.repos.patching import update_row
from backend.utils.dates import as_utc


def _row_to_activity(row: asyncpg.Record) -> Activity:
    """Convert a database row to an Activity model."""
    return Activity(
        id=row["id"],
        itinerary_id=row["itinerary_id"],
        trip_id=row["trip_id"],
        title=row["title"],
        description=row["description"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        duration=row["duration"],
        location=row["location"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        category=row["category"],
        priority=row["priority"],
        position=row["position"],
        completed=row["completed"],
        activity_details=row["activity_details"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def duration_minutes(start: datetime, end: datetime) -> int:
    return round((end - start).total_seconds() / 60)


class ActivityRepo:
    """All activity-related database operations."""

    async def create(self, itinerary_id: int, trip_id: int, req: CreateActivityRequest) -> Activity:
        """
        Add an activity to the end of an itinerary.

        Args:
            itinerary_id: Itinerary the activity belongs to
            trip_id: Trip the itinerary belongs to
            req: CreateActivityRequest with activity details

        Returns:
            Newly created Activity (duration in minutes, last position)
        """
        async with transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO activities (
                    itinerary_id, trip_id, title, description, start_date, end_date, duration,
                    location, latitude, longitude, category, priority, activity_details, position
                )
                VALUES (
                    $1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13,
                    (SELECT COALESCE(MAX(position) + 1, 0) FROM activities WHERE itinerary_id = $1)
                )
                RETURNING *
                """,
                itinerary_id,
                trip_id,
                req.title,
                req.description,
                req.start_date,
                req.end_date,
                duration_minutes(req.start_date, req.end_date),
                req.location,
                req.latitude,
                req.longitude,
                req.category,
                req.priority,
                req.activity_details,
            )
            return _row_to_activity(row)

    async def get(self, activity_id: int) -> Activity | None:
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM activities WHERE id = $1", activity_id)
            return _row_to_activity(row) if row else None

    async def list_for_itinerary(self, itinerary_id: int) -> list[Activity]:
        """Activities of one itinerary in display order."""
        async with transaction() as conn:
            rows = await conn.fetch(
                "SELECT * FROM activities WHERE itinerary_id = $1 ORDER BY position, start_date",
                itinerary_id,
            )
            return [_row_to_activity(row) for row in rows]

    async def list_in_range(self, trip_id: int, start: datetime, end: datetime) -> list[Activity]:
        """
        Activities of a trip that fall entirely inside [start, end].

        Args:
            trip_id: Trip ID
            start: Earliest start
            end: Latest end

        Returns:
            Activities ordered by start date
        """
        async with transaction() as conn:
            rows = await conn.fetch(
                """
                SELECT * FROM activities
                WHERE trip_id = $1 AND start_date >= $2 AND end_date <= $3
                ORDER BY start_date
                """,
                trip_id,
                start,
                end,
            )
            return [_row_to_activity(row) for row in rows]

    async def update(self, activity_id: int, req: UpdateActivityRequest) -> Activity | None:
        """
        Update an activity. activity_details is merge-patched; duration follows the dates.

        Returns:
            Updated Activity, or None if not found
        """
        fields = req.model_dump(exclude_unset=True, exclude_none=True, exclude={"activity_details"})
        patches = {"activity_details": req.activity_details} if req.activity_details is not None else {}

        async with transaction() as conn:
            if "start_date" in fields or "end_date" in fields:
                current = await conn.fetchrow(
                    "SELECT start_date, end_date FROM activities WHERE id = $1 FOR UPDATE",
                    activity_id,
                )
                if current is None:
                    return None
                start = as_utc(fields.get("start_date", current["start_date"]))
                end = as_utc(fields.get("end_date", current["end_date"]))
                if end < start:
                    raise ValueError("end date must not be before start date")
                fields["duration"] = duration_minutes(start, end)

            row = await update_row(conn, "activities", activity_id, fields, patches)
            return _row_to_activity(row) if row else None

    async def set_completed(self, activity_id: int, completed: bool = True) -> Activity | None:
        async with transaction() as conn:
            row = await conn.fetchrow(
                "UPDATE activities SET completed = $2, updated_at = now() WHERE id = $1 RETURNING *",
                activity_id,
                completed,
            )
            return _row_to_activity(row) if row else None

    async def reorder(self, itinerary_id: int, activity_ids: list[int]) -> list[Activity]:
        """
        Persist a new order for an itinerary's activities.

        Listed ids take positions 0..n-1 in the given order. Ids that are not
        in this itinerary are ignored, repeated ids count once, and activities
        left out keep their relative order after the listed ones.

        Args:
            itinerary_id: Itinerary ID
            activity_ids: Desired order

        Returns:
            The listed activities in their new order
        """
        async with transaction() as conn:
            rows = await conn.fetch(
                "SELECT * FROM activities WHERE itinerary_id = $1 ORDER BY position, start_date FOR UPDATE",
                itinerary_id,
            )
            by_id = {row["id"]: row for row in rows}

            ordered: list[int] = []
            for activity_id in activity_ids:
                if activity_id in by_id and activity_id not in ordered:
                    ordered.append(activity_id)
            rest = [row["id"] for row in rows if row["id"] not in ordered]

            await conn.executemany(
                "UPDATE activities SET position = $2, updated_at = now() WHERE id = $1",
                [(activity_id, position) for position, activity_id in enumerate(ordered + rest)],
            )

            updated = await conn.fetch(
                "SELECT * FROM activities WHERE id = ANY($1::bigint[]) ORDER BY position",
                ordered,
            )
            return [_row_to_activity(row) for row in updated]
