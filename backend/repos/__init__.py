"""
Repository layer for Waypoint.

All SQL lives here and ONLY here. No database access outside this module.
"""

from backend.repos.activity_repo import ActivityRepo
from backend.repos.alert_repo import AlertRepo
from backend.repos.booking_repo import BookingRepo
from backend.repos.itinerary_repo import ItineraryRepo
from backend.repos.trip_repo import TripRepo
from backend.repos.user_repo import UserRepo

__all__ = [
    "UserRepo",
    "TripRepo",
    "ItineraryRepo",
    "ActivityRepo",
    "BookingRepo",
    "AlertRepo",
]
