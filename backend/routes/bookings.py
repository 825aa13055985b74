"""Booking routes — offer search, recording a booking, listing a trip's bookings."""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated, Literal

import asyncpg
from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.auth import get_current_user
from backend.models.booking import Booking, BookingSearchResult, CreateBookingRequest
from backend.models.user import User
from backend.repos.booking_repo import BookingRepo
from backend.routes.ownership import require_owned_trip
from backend.services.recommendation_service import recommendation_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])
booking_repo = BookingRepo()


@router.get("/api/bookings/search", status_code=200)
async def search_bookings(
    booking_type: Annotated[Literal["flight", "hotel"], Query(alias="type")],
    to: Annotated[str, Query(min_length=1)],
    from_: Annotated[str | None, Query(alias="from")] = None,
    check_in: date | None = None,
    check_out: date | None = None,
    guests: Annotated[int, Query(ge=1)] = 1,
) -> list[BookingSearchResult]:
    return recommendation_service.search_bookings(
        booking_type,
        to,
        origin=from_,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
    )


@router.post("/api/bookings", status_code=201)
async def create_booking(req: CreateBookingRequest, user: User = Depends(get_current_user)) -> Booking:
    """Record a booking against a trip the caller owns. Booking refs are unique."""
    await require_owned_trip(req.trip_id, user, "book for")
    try:
        return await booking_repo.create(user.id, req)
    except asyncpg.UniqueViolationError as e:
        logger.info("bookings: duplicate ref %s", req.booking_ref)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A booking with this reference already exists.",
        ) from e


@router.get("/api/trips/{trip_id}/bookings", status_code=200)
async def list_trip_bookings(trip_id: int, user: User = Depends(get_current_user)) -> list[Booking]:
    await require_owned_trip(trip_id, user, "view bookings for")
    return await booking_repo.list_for_trip(trip_id)
