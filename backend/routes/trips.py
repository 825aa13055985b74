"""Trip routes — create, get, details, list, update, delete."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend import config
from backend.auth import get_current_user, get_optional_user
from backend.models.trip import CreateTripRequest, Trip, TripDetails, TripListResponse, UpdateTripRequest
from backend.models.user import User
from backend.repos.trip_repo import TripRepo
from backend.routes.ownership import require_owned_trip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trips", tags=["trips"])
trip_repo = TripRepo()


@router.post("", status_code=201)
async def create_trip(
    req: CreateTripRequest,
    user: User | None = Depends(get_optional_user),
) -> Trip:
    """Create a draft trip. Anonymous callers get an unowned trip."""
    try:
        return await trip_repo.create(user.id if user else None, req)
    except Exception as e:
        logger.exception("trips: create failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create trip",
        ) from e


@router.get("", status_code=200)
async def list_trips(
    limit: Annotated[int, Query(ge=1, le=config.settings.TRIPS_PAGE_MAX)] = config.settings.TRIPS_PAGE_DEFAULT,
    offset: Annotated[int, Query(ge=0)] = 0,
    user: User = Depends(get_current_user),
) -> TripListResponse:
    """One page of the caller's trips, newest first."""
    trips, total = await trip_repo.list_for_user(user.id, limit, offset)
    return TripListResponse(trips=trips, total=total, has_more=offset + limit < total)


@router.get("/{trip_id}", status_code=200)
async def get_trip(trip_id: int) -> Trip:
    """Get a single trip by ID."""
    trip = await trip_repo.get(trip_id)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found.")
    return trip


@router.get("/{trip_id}/details", status_code=200)
async def get_trip_details(trip_id: int) -> TripDetails:
    """A trip with its itineraries, activities and bookings."""
    trip = await trip_repo.get_with_details(trip_id)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found.")
    return trip


@router.patch("/{trip_id}", status_code=200)
async def update_trip(
    trip_id: int,
    req: UpdateTripRequest,
    user: User = Depends(get_current_user),
) -> Trip:
    """Update a trip. trip_data is applied as a JSON merge patch."""
    await require_owned_trip(trip_id, user, "update")
    trip = await trip_repo.update(trip_id, req)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found.")
    return trip


@router.delete("/{trip_id}", status_code=200)
async def delete_trip(
    trip_id: int,
    user: User = Depends(get_current_user),
) -> dict[str, bool]:
    """Delete a trip and everything under it."""
    await require_owned_trip(trip_id, user, "delete")
    deleted = await trip_repo.delete(trip_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found.")
    return {"success": True}
