"""
Destination, activity and booking suggestions.

Static sample data until a recommendation backend is wired in. Every
method honours its limit so callers can page as if it were real.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from backend.models.alert import SafetyReport
from backend.models.booking import BookingSearchResult

SAMPLE_DESTINATIONS: list[dict[str, Any]] = [
    {
        "name": "Paris",
        "country": "France",
        "coordinates": {"latitude": 48.8566, "longitude": 2.3522},
        "description": "The City of Light offers world-class museums and cuisine",
        "bestTime": "April-May, September-October",
        "estimatedCost": 2500,
        "highlights": ["Eiffel Tower", "Louvre Museum", "Notre-Dame"],
        "rating": 4.8,
        "matchScore": 95,
    },
    {
        "name": "Tokyo",
        "country": "Japan",
        "coordinates": {"latitude": 35.6762, "longitude": 139.6503},
        "description": "Modern metropolis blending tradition and technology",
        "bestTime": "March-May, September-November",
        "estimatedCost": 3000,
        "highlights": ["Senso-ji Temple", "Tokyo Tower", "Shibuya Crossing"],
        "rating": 4.7,
        "matchScore": 88,
    },
]

SAFETY_TIPS = [
    "Check local travel advisories",
    "Register with your embassy",
    "Keep emergency contacts handy",
]


class RecommendationService:
    def get_destinations(self, limit: int = 10, **_filters: Any) -> list[dict[str, Any]]:
        """Suggested destinations. Filters (interests, budget, season, ...) are accepted but not applied yet."""
        return [dict(d) for d in SAMPLE_DESTINATIONS[:limit]]

    def get_activities(self, destination: str, limit: int = 20, **_filters: Any) -> list[dict[str, Any]]:
        """Suggested activities at a destination."""
        samples = [
            {
                "id": "1",
                "title": "City Walking Tour",
                "description": "Explore the historic city center",
                "category": "sightseeing",
                "location": destination,
                "coordinates": {"latitude": 0, "longitude": 0},
                "duration": 3,
                "cost": 50,
                "rating": 4.6,
                "reviews": "Great tour with knowledgeable guide",
            },
            {
                "id": "2",
                "title": "Local Food Experience",
                "description": "Taste authentic local cuisine",
                "category": "dining",
                "location": destination,
                "coordinates": {"latitude": 0, "longitude": 0},
                "duration": 2,
                "cost": 80,
                "rating": 4.8,
                "reviews": "Delicious food and great atmosphere",
            },
        ]
        return samples[:limit]

    def optimize_itinerary(self, itinerary_id: int, optimize_for: str = "experience") -> dict[str, Any]:
        """Suggestions for an itinerary. Does not reorder anything yet."""
        return {
            "itineraryId": itinerary_id,
            "optimizeFor": optimize_for,
            "optimizedActivities": [],
            "suggestions": [
                {
                    "type": "weather",
                    "description": "Consider moving indoor activities to rainy days",
                    "priority": "medium",
                }
            ],
            "estimatedCost": 0,
            "estimatedDuration": 0,
        }

    def check_destination_safety(self, destination: str) -> SafetyReport:
        return SafetyReport(
            destination=destination or "Unknown",
            safety_score=75,
            risk_level="moderate",
            active_alerts=[],
            recommendations=list(SAFETY_TIPS),
            last_updated=datetime.now(UTC),
        )

    def search_bookings(self, booking_type: str, to: str, **_criteria: Any) -> list[BookingSearchResult]:
        """Offers for a flight or hotel search."""
        return [
            BookingSearchResult(
                id="1",
                provider="Sample Provider",
                title=f"Sample {booking_type} to {to}",
                price=500,
                currency="USD",
                details={},
                link="#",
            )
        ]


recommendation_service = RecommendationService()
