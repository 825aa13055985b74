"""Repository for alert operations."""

from __future__ import annotations

from datetime import UTC, datetime

import asyncpg

from backend.db import transaction
from backend.models.alert import Alert, CreateAlertRequest


def _row_to_alert(row: asyncpg.Record) -> Alert:
    """Convert a database row to an Alert model."""
    return Alert(
        id=row["id"],
        trip_id=row["trip_id"],
        user_id=row["user_id"],
        alert_type=row["alert_type"],
        severity=row["severity"],
        location=row["location"],
        latitude=row["latitude"],
        longitude=row["longitude"],
        title=row["title"],
        description=row["description"],
        alert_date=row["alert_date"],
        expiry_date=row["expiry_date"],
        acknowledged=row["acknowledged"],
        alert_data=row["alert_data"],
        created_at=row["created_at"],
    )


class AlertRepo:
    """All alert-related database operations."""

    async def create(self, user_id: int | None, req: CreateAlertRequest) -> Alert:
        async with transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO alerts (
                    trip_id, user_id, alert_type, severity, location, latitude, longitude,
                    title, description, alert_date, expiry_date, alert_data
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
                RETURNING *
                """,
                req.trip_id,
                user_id,
                req.alert_type,
                req.severity,
                req.location,
                req.latitude,
                req.longitude,
                req.title,
                req.description,
                req.alert_date,
                req.expiry_date,
                req.alert_data,
            )
            return _row_to_alert(row)

    async def get(self, alert_id: int) -> Alert | None:
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM alerts WHERE id = $1", alert_id)
            return _row_to_alert(row) if row else None

    async def list_for_trip(self, trip_id: int) -> list[Alert]:
        """A trip's alerts, newest first."""
        async with transaction() as conn:
            rows = await conn.fetch(
                "SELECT * FROM alerts WHERE trip_id = $1 ORDER BY alert_date DESC, id DESC",
                trip_id,
            )
            return [_row_to_alert(row) for row in rows]

    async def list_active(self, trip_id: int | None = None, now: datetime | None = None) -> list[Alert]:
        """
        Alerts that have not expired: no expiry date, or one in the future.

        Args:
            trip_id: Only this trip's alerts (all alerts when omitted)
            now: Reference time (defaults to the current time)

        Returns:
            Active alerts, newest first
        """
        async with transaction() as conn:
            rows = await conn.fetch(
                """
                SELECT * FROM alerts
                WHERE (expiry_date IS NULL OR expiry_date > $1)
                  AND ($2::bigint IS NULL OR trip_id = $2)
                ORDER BY alert_date DESC, id DESC
                """,
                now or datetime.now(UTC),
                trip_id,
            )
            return [_row_to_alert(row) for row in rows]

    async def acknowledge(self, alert_id: int) -> Alert | None:
        """
        Mark an alert as acknowledged.

        Returns:
            Updated Alert, or None if not found
        """
        async with transaction() as conn:
            row = await conn.fetchrow(
                "UPDATE alerts SET acknowledged = true WHERE id = $1 RETURNING *",
                alert_id,
            )
            return _row_to_alert(row) if row else None
