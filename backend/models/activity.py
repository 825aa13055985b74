"""Activity models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, model_validator

from backend.models.base import RequestModel, UtcDatetime, WireModel

ActivityPriority = Literal["low", "medium", "high"]


class Activity(WireModel):
    """Core activity model. Represents a row in the activities table."""

    id: int
    itinerary_id: int
    trip_id: int
    title: str
    description: str | None = None
    start_date: datetime
    end_date: datetime
    duration: int | None = None  # minutes
    location: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    category: str | None = None
    priority: ActivityPriority | None = "medium"
    position: int = 0
    completed: bool = False
    activity_details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class CreateActivityRequest(RequestModel):
    """What the client sends to add an activity to an itinerary."""

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date: UtcDatetime
    end_date: UtcDatetime
    location: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    category: str | None = None
    priority: ActivityPriority = "medium"
    activity_details: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_dates(self) -> CreateActivityRequest:
        if self.end_date < self.start_date:
            raise ValueError("end date must not be before start date")
        return self


class UpdateActivityRequest(RequestModel):
    """activity_details is a JSON merge patch."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None
    location: str | None = None
    completed: bool | None = None
    activity_details: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> UpdateActivityRequest:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end date must not be before start date")
        return self
