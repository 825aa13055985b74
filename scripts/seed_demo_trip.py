#!/usr/bin/env python3
"""
Seed a demo trip that exercises every itinerary section.

Usage:
    python scripts/seed_demo_trip.py [open_id]

If no open_id is provided, uses "demo-user". Creates the schema if it is
missing, then a trip to Paris with an itinerary, located activities, a
booking and an alert. Prints the URLs to open.
"""

import asyncio
import sys
from datetime import UTC, datetime, timedelta

# Add project root to path
sys.path.insert(0, ".")

from backend.auth import create_jwt
from backend.db import apply_schema, close_pool, init_pool
from backend.models import (
    CreateActivityRequest,
    CreateAlertRequest,
    CreateBookingRequest,
    CreateItineraryRequest,
    CreateTripRequest,
    UpdateItineraryRequest,
)
from backend.repos import ActivityRepo, AlertRepo, BookingRepo, ItineraryRepo, TripRepo, UserRepo

START = datetime(2026, 6, 1, 9, 0, tzinfo=UTC)

DEMO_ACTIVITIES = [
    # (title, day, hour, hours, location, lat, lon, category)
    ("Eiffel Tower", 0, 10, 3, "Champ de Mars", 48.8584, 2.2945, "sightseeing"),
    ("Seine river cruise", 0, 19, 2, "Port de la Bourdonnais", 48.8610, 2.2930, "sightseeing"),
    ("Louvre", 1, 9, 4, "Musée du Louvre", 48.8606, 2.3376, "culture"),
    ("Dinner in Le Marais", 1, 20, 2, "Le Marais", 48.8590, 2.3620, "dining"),
    ("Montmartre walk", 2, 10, 3, "Sacré-Cœur", 48.8867, 2.3431, "sightseeing"),
]


async def create_demo_trip(open_id: str) -> int:
    """Create the demo trip and everything under it. Returns the trip id."""
    user = await UserRepo().upsert(open_id, name="Demo Traveller")

    trip = await TripRepo().create(
        user.id,
        CreateTripRequest(
            name="Paris in June",
            description="Four days of museums, food and river views.",
            start_date=START,
            end_date=START + timedelta(days=3),
            trip_data={
                "destination": "Paris",
                "travelers": 2,
                "budget": 3200,
                "currency": "EUR",
                "coordinates": {"latitude": 48.8566, "longitude": 2.3522},
            },
        ),
    )

    itineraries = ItineraryRepo()
    itinerary = await itineraries.create(user.id, CreateItineraryRequest(trip_id=trip.id, title="Main plan"))
    await itineraries.update(
        itinerary.id,
        UpdateItineraryRequest(
            safety_notes={
                "safetyTips": ["Watch for pickpockets on line 1", "Keep a copy of your passport"],
                "weatherWarnings": [
                    {"date": "2026-06-02", "warning": "Afternoon thunderstorms", "recommendation": "Plan indoors"}
                ],
            }
        ),
    )

    activities = ActivityRepo()
    for title, day, hour, hours, location, lat, lon, category in DEMO_ACTIVITIES:
        start = START.replace(hour=hour) + timedelta(days=day)
        await activities.create(
            itinerary.id,
            trip.id,
            CreateActivityRequest(
                title=title,
                start_date=start,
                end_date=start + timedelta(hours=hours),
                location=location,
                latitude=lat,
                longitude=lon,
                category=category,
            ),
        )

    await BookingRepo().create(
        user.id,
        CreateBookingRequest(
            trip_id=trip.id,
            booking_type="hotel",
            provider="Hôtel des Grands Boulevards",
            booking_ref=f"DEMO-{trip.id}",
            start_date=START.replace(hour=15),
            end_date=START.replace(hour=11) + timedelta(days=3),
            total_price=960,
            currency="EUR",
        ),
    )

    await AlertRepo().create(
        user.id,
        CreateAlertRequest(
            trip_id=trip.id,
            alert_type="system",
            severity="warning",
            title="Metro strike on June 2",
            description="Lines 1 and 4 may run reduced service.",
            alert_date=START + timedelta(days=1),
        ),
    )

    return trip.id


async def main():
    await init_pool()

    try:
        await apply_schema()
        open_id = sys.argv[1] if len(sys.argv) >= 2 else "demo-user"
        trip_id = await create_demo_trip(open_id)
        print(f"Created demo trip: {trip_id}")
        print(f"  /layouts/itinerary?trip_id={trip_id}")
        print(f"  /layouts/calendar?trip_id={trip_id}")
        print(f"Session token for {open_id}: {create_jwt(open_id, name='Demo Traveller')}")
    finally:
        await close_pool()


if __name__ == "__main__":
    asyncio.run(main())
