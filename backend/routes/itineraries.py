"""Itinerary and activity routes."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status

from backend.auth import get_current_user
from backend.models.activity import Activity, CreateActivityRequest, UpdateActivityRequest
from backend.models.itinerary import (
    CreateItineraryRequest,
    Itinerary,
    ItineraryWithActivities,
    ReorderActivitiesRequest,
    UpdateItineraryRequest,
)
from backend.models.user import User
from backend.repos.activity_repo import ActivityRepo
from backend.repos.itinerary_repo import ItineraryRepo
from backend.routes.ownership import require_owned_trip
from backend.utils.dates import as_utc

router = APIRouter(tags=["itineraries"])
itinerary_repo = ItineraryRepo()
activity_repo = ActivityRepo()


async def _owned_itinerary(itinerary_id: int, user: User) -> Itinerary:
    itinerary = await itinerary_repo.get(itinerary_id)
    if not itinerary:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found.")
    await require_owned_trip(itinerary.trip_id, user)
    return itinerary


@router.post("/api/itineraries", status_code=201)
async def create_itinerary(
    req: CreateItineraryRequest,
    user: User = Depends(get_current_user),
) -> Itinerary:
    """Create an itinerary for a trip the caller owns."""
    await require_owned_trip(req.trip_id, user, "create an itinerary for")
    return await itinerary_repo.create(user.id, req)


@router.get("/api/itineraries/{itinerary_id}", status_code=200)
async def get_itinerary(itinerary_id: int) -> ItineraryWithActivities:
    """An itinerary with its activities in display order."""
    itinerary = await itinerary_repo.get_with_activities(itinerary_id)
    if not itinerary:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found.")
    return itinerary


@router.patch("/api/itineraries/{itinerary_id}", status_code=200)
async def update_itinerary(
    itinerary_id: int,
    req: UpdateItineraryRequest,
    user: User = Depends(get_current_user),
) -> Itinerary:
    """Update an itinerary. itinerary_data and safety_notes are merge patches."""
    await _owned_itinerary(itinerary_id, user)
    itinerary = await itinerary_repo.update(itinerary_id, req)
    if not itinerary:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found.")
    return itinerary


@router.post("/api/itineraries/{itinerary_id}/activities", status_code=201)
async def add_activity(
    itinerary_id: int,
    req: CreateActivityRequest,
    user: User = Depends(get_current_user),
) -> Activity:
    """Append an activity to an itinerary."""
    itinerary = await _owned_itinerary(itinerary_id, user)
    return await activity_repo.create(itinerary.id, itinerary.trip_id, req)


@router.post("/api/itineraries/{itinerary_id}/reorder", status_code=200)
async def reorder_activities(
    itinerary_id: int,
    req: ReorderActivitiesRequest,
    user: User = Depends(get_current_user),
) -> dict:
    """Persist a new activity order. Unknown ids are ignored."""
    await _owned_itinerary(itinerary_id, user)
    activities = await activity_repo.reorder(itinerary_id, req.activity_ids)
    return {"success": True, "activities": activities}


@router.patch("/api/activities/{activity_id}", status_code=200)
async def update_activity(
    activity_id: int,
    req: UpdateActivityRequest,
    user: User = Depends(get_current_user),
) -> Activity:
    """Update an activity. activity_details is a merge patch."""
    activity = await activity_repo.get(activity_id)
    if not activity:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found.")
    await require_owned_trip(activity.trip_id, user)
    try:
        updated = await activity_repo.update(activity_id, req)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found.")
    return updated


@router.get("/api/trips/{trip_id}/activities", status_code=200)
async def list_activities_in_range(trip_id: int, start: datetime, end: datetime) -> list[Activity]:
    """Activities of a trip that fall entirely inside [start, end]."""
    start, end = as_utc(start), as_utc(end)
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end must not be before start",
        )
    return await activity_repo.list_in_range(trip_id, start, end)
