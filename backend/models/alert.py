"""Alert models, plus the shapes of the live emergency and weather feeds."""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from backend.models.base import RequestModel, UtcDatetime, WireModel

AlertType = Literal["weather", "emergency", "booking", "system"]
AlertSeverity = Literal["info", "warning", "critical"]


class Alert(WireModel):
    """Core alert model. Represents a row in the alerts table."""

    id: int
    trip_id: int | None = None
    user_id: int | None = None
    alert_type: AlertType
    severity: AlertSeverity = "info"
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    title: str
    description: str | None = None
    alert_date: datetime
    expiry_date: datetime | None = None
    acknowledged: bool = False
    alert_data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class CreateAlertRequest(RequestModel):
    trip_id: int | None = None
    alert_type: AlertType
    severity: AlertSeverity = "info"
    location: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    alert_date: UtcDatetime
    expiry_date: UtcDatetime | None = None
    alert_data: dict[str, Any] = Field(default_factory=dict)


class Coordinates(WireModel):
    latitude: float
    longitude: float


class EmergencyEvent(WireModel):
    """One event from the disaster feed."""

    id: str
    type: str
    severity: str | None = None
    location: str
    description: str
    timestamp: datetime | None = None
    coordinates: Coordinates | None = None
    external_link: str | None = None


class EmergencyFeed(WireModel):
    alerts: list[EmergencyEvent] = Field(default_factory=list)
    total_count: int = 0


class SafetyReport(WireModel):
    destination: str
    safety_score: int
    risk_level: Literal["low", "moderate", "high"]
    active_alerts: list[EmergencyEvent] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    last_updated: datetime


class DailyForecast(WireModel):
    date: date_type
    temperature_max: float | None = None
    temperature_min: float | None = None
    precipitation: float | None = None
    weather_code: int | None = None


class Forecast(WireModel):
    location: Coordinates
    forecast: list[DailyForecast] = Field(default_factory=list)
