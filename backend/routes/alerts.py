"""Alert routes: live emergency feed, destination safety, stored trip alerts."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.auth import get_current_user
from backend.models.alert import Alert, CreateAlertRequest, EmergencyFeed, SafetyReport
from backend.models.user import User
from backend.repos.alert_repo import AlertRepo
from backend.routes.ownership import require_owned_trip
from backend.services.emergency_service import emergency_service
from backend.services.recommendation_service import recommendation_service

router = APIRouter(tags=["alerts"])
alert_repo = AlertRepo()


@router.get("/api/alerts/emergencies", status_code=200)
async def get_emergencies(
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    radius: Annotated[float, Query(gt=0)] = 100,
) -> EmergencyFeed:
    """Disaster events near a point. Empty when the feed is down."""
    return await emergency_service.get_emergencies(latitude, longitude, radius)


@router.get("/api/alerts/safety", status_code=200)
async def check_safety(destination: Annotated[str, Query(min_length=1)]) -> SafetyReport:
    return recommendation_service.check_destination_safety(destination)


@router.get("/api/trips/{trip_id}/alerts", status_code=200)
async def list_trip_alerts(trip_id: int, user: User = Depends(get_current_user)) -> list[Alert]:
    """Stored alerts for a trip, newest first."""
    await require_owned_trip(trip_id, user, "view alerts for")
    return await alert_repo.list_for_trip(trip_id)


@router.post("/api/alerts", status_code=201)
async def create_alert(req: CreateAlertRequest, user: User = Depends(get_current_user)) -> Alert:
    if req.trip_id is not None:
        await require_owned_trip(req.trip_id, user, "add alerts to")
    return await alert_repo.create(user.id, req)


@router.post("/api/alerts/{alert_id}/acknowledge", status_code=200)
async def acknowledge_alert(alert_id: int, user: User = Depends(get_current_user)) -> Alert:
    alert = await alert_repo.get(alert_id)
    if not alert:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found.")
    if alert.trip_id is not None:
        await require_owned_trip(alert.trip_id, user, "acknowledge alerts for")
    elif alert.user_id is not None and alert.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to acknowledge this alert.",
        )
    acknowledged = await alert_repo.acknowledge(alert_id)
    if not acknowledged:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found.")
    return acknowledged
