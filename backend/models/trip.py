"""Trip models. trip_data is an open JSON object (budget, travelers, interests, ...)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, model_validator

from backend.models.activity import Activity
from backend.models.base import RequestModel, UtcDatetime, WireModel
from backend.models.booking import Booking
from backend.models.itinerary import Itinerary

TripStatus = Literal["draft", "planned", "in-progress", "completed", "archived"]


class Trip(WireModel):
    """Core trip model. Represents a row in the trips table."""

    id: int
    user_id: int | None = None  # None for trips created anonymously
    name: str
    description: str | None = None
    start_date: datetime
    end_date: datetime
    status: TripStatus = "draft"
    trip_data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class CreateTripRequest(RequestModel):
    """What the client sends to create a trip."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    trip_data: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_dates(self) -> CreateTripRequest:
        if self.end_date < self.start_date:
            raise ValueError("end date must not be before start date")
        return self


class UpdateTripRequest(RequestModel):
    """What the client sends to update a trip. trip_data is a JSON merge patch."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: TripStatus | None = None
    trip_data: dict[str, Any] | None = None


class TripListResponse(WireModel):
    trips: list[Trip]
    total: int
    has_more: bool


class TripDetails(Trip):
    """A trip with everything planned under it."""

    itineraries: list[Itinerary] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)  # ordered by start
    bookings: list[Booking] = Field(default_factory=list)  # ordered by start
