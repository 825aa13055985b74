"""Shared route guard: load a trip and check that the caller owns it."""

from __future__ import annotations

from fastapi import HTTPException, status

from backend.models.trip import Trip
from backend.models.user import User
from backend.repos.trip_repo import TripRepo

trip_repo = TripRepo()


async def require_owned_trip(trip_id: int, user: User, action: str = "modify") -> Trip:
    """
    Return the trip if `user` owns it.

    Raises:
        HTTPException: 404 if the trip does not exist, 403 if someone else owns it
    """
    trip = await trip_repo.get(trip_id)
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found.")
    if trip.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} this trip.",
        )
    return trip
