"""Booking models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, model_validator

from backend.models.base import RequestModel, UtcDatetime, WireModel

BookingType = Literal["flight", "hotel", "car", "activity"]
BookingStatus = Literal["pending", "confirmed", "cancelled", "completed"]


class Booking(WireModel):
    """Core booking model. Represents a row in the bookings table."""

    id: int
    trip_id: int
    user_id: int
    booking_type: BookingType
    booking_ref: str
    provider: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    total_price: float | None = None
    currency: str | None = None
    discount_code: str | None = None
    discount_amount: float | None = None
    status: BookingStatus = "pending"
    booking_details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class CreateBookingRequest(RequestModel):
    trip_id: int
    booking_type: BookingType
    provider: str = Field(min_length=1, max_length=100)
    booking_ref: str = Field(min_length=1, max_length=100)
    start_date: UtcDatetime
    end_date: UtcDatetime | None = None
    total_price: float = Field(ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    discount_code: str | None = None
    booking_details: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_dates(self) -> CreateBookingRequest:
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end date must not be before start date")
        return self


class BookingSearchResult(WireModel):
    id: str
    provider: str
    title: str
    price: float
    currency: str
    details: dict[str, Any] = Field(default_factory=dict)
    link: str
