"""Repository for booking operations."""

from __future__ import annotations

import asyncpg

from backend.db import transaction
from backend.models.booking import Booking, CreateBookingRequest


def _money(value) -> float | None:
    # NUMERIC comes back as Decimal
    return float(value) if value is not None else None


def _row_to_booking(row: asyncpg.Record) -> Booking:
    """Convert a database row to a Booking model."""
    return Booking(
        id=row["id"],
        trip_id=row["trip_id"],
        user_id=row["user_id"],
        booking_type=row["booking_type"],
        booking_ref=row["booking_ref"],
        provider=row["provider"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        total_price=_money(row["total_price"]),
        currency=row["currency"],
        discount_code=row["discount_code"],
        discount_amount=_money(row["discount_amount"]),
        status=row["status"],
        booking_details=row["booking_details"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class BookingRepo:
    """All booking-related database operations."""

    async def create(self, user_id: int, req: CreateBookingRequest) -> Booking:
        """
        Record a pending booking.

        Raises:
            asyncpg.UniqueViolationError: booking_ref already exists
        """
        async with transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO bookings (
                    trip_id, user_id, booking_type, booking_ref, provider, start_date, end_date,
                    total_price, currency, discount_code, status, booking_details
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, 'pending', $11)
                RETURNING *
                """,
                req.trip_id,
                user_id,
                req.booking_type,
                req.booking_ref,
                req.provider,
                req.start_date,
                req.end_date,
                req.total_price,
                req.currency,
                req.discount_code,
                req.booking_details,
            )
            return _row_to_booking(row)

    async def list_for_trip(self, trip_id: int) -> list[Booking]:
        async with transaction() as conn:
            rows = await conn.fetch("SELECT * FROM bookings WHERE trip_id = $1 ORDER BY start_date", trip_id)
            return [_row_to_booking(row) for row in rows]
