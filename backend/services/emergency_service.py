"""Disaster events near a location, from the GDACS event list."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any

import httpx

from backend import config
from backend.models.alert import Coordinates, EmergencyEvent, EmergencyFeed

logger = logging.getLogger(__name__)

MAX_EVENTS = 20
EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points, in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def _parse_float(value: Any) -> float | None:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _to_event(raw: dict[str, Any]) -> EmergencyEvent:
    lat = _parse_float(raw.get("lat"))
    lon = _parse_float(raw.get("lon"))
    name = str(raw.get("eventname") or "")
    return EmergencyEvent(
        id=str(raw.get("eventid", "")),
        type=str(raw.get("eventtype", "")),
        severity=str(raw["severity"]) if raw.get("severity") is not None else None,
        location=name,
        description=raw.get("description") or name,
        timestamp=_parse_timestamp(raw.get("eventdate")),
        coordinates=Coordinates(latitude=lat, longitude=lon) if lat is not None and lon is not None else None,
        external_link=raw.get("url"),
    )


class EmergencyService:
    """HTTP client for the GDACS disaster feed. Never raises to callers."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._url = config.settings.GDACS_URL
        self._timeout = config.settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def get_emergencies(self, latitude: float, longitude: float, radius_km: float = 100) -> EmergencyFeed:
        """
        Recent events within radius_km of a point.

        Takes the first 20 events from the feed. Events whose coordinates
        do not parse are kept, since their distance is unknown.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            radius_km: Search radius

        Returns:
            EmergencyFeed; empty if the feed fails for any reason
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                raw_events = response.json().get("events") or []
            events = [_to_event(raw) for raw in raw_events[:MAX_EVENTS]]
        except Exception:
            logger.exception("emergency: feed failed for (%s, %s)", latitude, longitude)
            return EmergencyFeed(alerts=[], total_count=0)

        nearby = [
            e
            for e in events
            if e.coordinates is None
            or haversine_km(latitude, longitude, e.coordinates.latitude, e.coordinates.longitude) <= radius_km
        ]
        return EmergencyFeed(alerts=nearby, total_count=len(nearby))


emergency_service = EmergencyService()
