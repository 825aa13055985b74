"""Itinerary models. safety_notes carries emergency alerts, weather warnings and tips."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from backend.models.activity import Activity
from backend.models.base import RequestModel, WireModel


class Itinerary(WireModel):
    """Core itinerary model. Represents a row in the itineraries table."""

    id: int
    trip_id: int
    user_id: int
    title: str
    description: str | None = None
    itinerary_data: dict[str, Any] = Field(default_factory=dict)
    safety_notes: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class ItineraryWithActivities(Itinerary):
    activities: list[Activity] = Field(default_factory=list)


class CreateItineraryRequest(RequestModel):
    trip_id: int
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    itinerary_data: dict[str, Any] = Field(default_factory=dict)


class UpdateItineraryRequest(RequestModel):
    """itinerary_data and safety_notes are JSON merge patches."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    itinerary_data: dict[str, Any] | None = None
    safety_notes: dict[str, Any] | None = None


class ReorderActivitiesRequest(RequestModel):
    activity_ids: list[int]
