"""
Pydantic models for Waypoint.

All data shapes defined here. No imports from db, repos, or routes.
"""

from backend.models.activity import Activity, CreateActivityRequest, UpdateActivityRequest
from backend.models.alert import (
    Alert,
    CreateAlertRequest,
    DailyForecast,
    EmergencyEvent,
    EmergencyFeed,
    Forecast,
    SafetyReport,
)
from backend.models.booking import Booking, BookingSearchResult, CreateBookingRequest
from backend.models.itinerary import (
    CreateItineraryRequest,
    Itinerary,
    ItineraryWithActivities,
    ReorderActivitiesRequest,
    UpdateItineraryRequest,
)
from backend.models.layout import LayoutActionRequest
from backend.models.trip import CreateTripRequest, Trip, TripDetails, TripListResponse, UpdateTripRequest
from backend.models.user import LogoutResponse, User, UserPublic

__all__ = [
    # User models
    "User",
    "UserPublic",
    "LogoutResponse",
    # Trip models
    "Trip",
    "CreateTripRequest",
    "UpdateTripRequest",
    "TripListResponse",
    "TripDetails",
    # Itinerary models
    "Itinerary",
    "ItineraryWithActivities",
    "CreateItineraryRequest",
    "UpdateItineraryRequest",
    "ReorderActivitiesRequest",
    # Activity models
    "Activity",
    "CreateActivityRequest",
    "UpdateActivityRequest",
    # Booking models
    "Booking",
    "CreateBookingRequest",
    "BookingSearchResult",
    # Alert models
    "Alert",
    "CreateAlertRequest",
    "EmergencyEvent",
    "EmergencyFeed",
    "SafetyReport",
    "DailyForecast",
    "Forecast",
    "LayoutActionRequest",
]
