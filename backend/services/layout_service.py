"""
Layout composition — turns a trip into the screen description for one mode.

The service decides WHAT is on screen (sections, items, actions) and
gathers the request-scoped data bag (calendar days, map markers, weather).
How it looks is entirely the renderer's business.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from backend.models.activity import Activity
from backend.models.alert import Alert
from backend.models.booking import Booking
from backend.models.trip import TripDetails
from backend.models.user import User
from backend.services.recommendation_service import RecommendationService, recommendation_service
from backend.services.weather_service import MAX_FORECAST_DAYS, UpstreamError, WeatherService, weather_service
from backend.utils.dates import as_utc
from engine.layout import (
    ContentAction,
    ContentItem,
    LayoutAction,
    LayoutBuilder,
    LayoutConfig,
    LayoutSection,
    SDUIError,
    SDUIResponse,
    SectionContent,
    VisibilityRule,
)

logger = logging.getLogger(__name__)

_SEVERITY_ICONS = {"info": "ℹ️", "warning": "⚠️", "critical": "🚨"}


def _section(section_id: str, section_type: str, title: str | None = None, items=None, **kwargs) -> LayoutSection:
    content = SectionContent(items=items) if items is not None else None
    return LayoutSection(id=section_id, type=section_type, title=title, content=content, **kwargs)


def _date_range(trip: TripDetails) -> str:
    start, end = trip.start_date, trip.end_date
    if start.year == end.year:
        return f"{start:%b %d} – {end:%b %d, %Y}"
    return f"{start:%b %d, %Y} – {end:%b %d, %Y}"


def _trip_days(trip: TripDetails) -> int:
    return (trip.end_date.date() - trip.start_date.date()).days + 1


def _trip_coordinates(trip: TripDetails) -> tuple[float, float] | None:
    """Where to ask for weather: trip_data.coordinates, else the first located activity."""
    coords = trip.trip_data.get("coordinates")
    if isinstance(coords, dict):
        lat, lon = coords.get("latitude", coords.get("lat")), coords.get("longitude", coords.get("lon"))
        if isinstance(lat, (int, float)) and isinstance(lon, (int, float)):
            return float(lat), float(lon)
    for activity in trip.activities:
        if activity.latitude is not None and activity.longitude is not None:
            return activity.latitude, activity.longitude
    return None


def _money(amount: Any, currency: str | None) -> str:
    if amount is None:
        return "—"
    return f"{currency or 'USD'} {float(amount):,.0f}"


# ---------------------------------------------------------------------------
# Item builders
# ---------------------------------------------------------------------------


def activity_item(activity: Activity, trip_id: int) -> ContentItem:
    actions = []
    if not activity.completed:
        actions.append(
            ContentAction(
                id=f"complete-{activity.id}",
                label="Mark done",
                type="secondary",
                action="complete_activity",
                payload={"activityId": activity.id, "tripId": trip_id},
            )
        )
    return ContentItem(
        id=f"activity-{activity.id}",
        title=activity.title,
        subtitle=f"{activity.start_date:%a %d %b, %H:%M}",
        description=activity.location or activity.description,
        badge="Done" if activity.completed else None,
        metadata={"category": activity.category, "priority": activity.priority},
        actions=actions,
    )


def alert_item(alert: Alert) -> ContentItem:
    return ContentItem(
        id=f"alert-{alert.id}",
        title=alert.title,
        subtitle=alert.location,
        description=alert.description,
        icon=_SEVERITY_ICONS.get(alert.severity),
        metadata={"severity": alert.severity, "alertType": alert.alert_type},
        actions=[
            ContentAction(
                id=f"ack-{alert.id}",
                label="Acknowledge",
                type="tertiary",
                action="acknowledge_alert",
                payload={"alertId": alert.id},
            )
        ],
    )


def booking_item(booking: Booking) -> ContentItem:
    title = booking.booking_type.capitalize()
    if booking.provider:
        title += f" · {booking.provider}"
    return ContentItem(
        id=f"booking-{booking.id}",
        title=title,
        subtitle=f"Ref {booking.booking_ref} · {booking.start_date:%d %b %Y}",
        description=_money(booking.total_price, booking.currency),
        badge=booking.status,
    )


def destination_item(destination: dict[str, Any]) -> ContentItem:
    return ContentItem(
        id=f"destination-{destination['name'].lower()}",
        title=destination["name"],
        subtitle=destination.get("country"),
        description=destination.get("description"),
        badge=f"{destination['matchScore']}% match" if destination.get("matchScore") else None,
        metadata={"bestTime": destination.get("bestTime"), "rating": destination.get("rating")},
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class LayoutService:
    """Builds the SDUIResponse for each layout mode."""

    def __init__(
        self,
        weather: WeatherService | None = None,
        recommendations: RecommendationService | None = None,
    ) -> None:
        self.weather = weather or weather_service
        self.recommendations = recommendations or recommendation_service

    async def build(
        self,
        mode: str,
        trip: TripDetails | None,
        user: User | None,
        alerts: list[Alert] | None = None,
    ) -> SDUIResponse:
        """
        Compose one screen.

        Args:
            mode: calendar | guide | itinerary | booking
            trip: The trip with its details, or None for the anonymous landing
            user: Signed-in user, if any
            alerts: The trip's stored alerts

        Returns:
            SDUIResponse with config, data bag and any non-fatal errors

        Raises:
            ValueError: Unknown mode
        """
        data: dict[str, Any] = {}
        errors: list[SDUIError] = []

        if mode == "guide":
            config = self._guide(trip)
        elif mode not in ("itinerary", "calendar", "booking"):
            raise ValueError(f"Unknown layout mode: {mode}")
        elif trip is None:
            config = self._no_trip(mode)
        elif mode == "itinerary":
            config = self._itinerary(trip, alerts or [], data)
        elif mode == "calendar":
            config = await self._calendar(trip, data, errors)
        else:
            config = self._booking(trip)

        return SDUIResponse(
            config=config,
            data=data,
            errors=errors,
            metadata={
                "mode": mode,
                "tripId": trip.id if trip else None,
                "authenticated": user is not None,
                "generatedAt": datetime.now(UTC).isoformat(),
            },
        )

    # -- modes ---------------------------------------------------------------

    def _no_trip(self, mode: str) -> LayoutConfig:
        return (
            LayoutBuilder(mode, "Waypoint")
            .add_section(_section("header", "header", "Plan your next trip", subtitle="Create a trip to get started."))
            .add_section(_section("empty", "list", "No trip selected", items=[]))
            .build()
        )

    def _itinerary(self, trip: TripDetails, alerts: list[Alert], data: dict[str, Any]) -> LayoutConfig:
        builder = LayoutBuilder("itinerary", trip.name, trip.description).with_metadata(tripId=trip.id)
        builder.add_section(_section("header", "header", trip.name, subtitle=_date_range(trip)))

        trip_data = trip.trip_data
        builder.add_section(
            _section(
                "stats",
                "stats",
                items=[
                    ContentItem(id="activities", title="Activities", metadata={"value": len(trip.activities)}),
                    ContentItem(id="days", title="Days", metadata={"value": _trip_days(trip)}),
                    ContentItem(id="travelers", title="Travelers", metadata={"value": trip_data.get("travelers", 1)}),
                    ContentItem(
                        id="budget",
                        title="Budget",
                        subtitle=_money(trip_data.get("budget"), trip_data.get("currency")),
                    ),
                ],
                columns=4,
                spacing="compact",
            )
        )

        builder.add_section(
            _section("schedule", "timeline", "Schedule", items=[activity_item(a, trip.id) for a in trip.activities])
        )

        markers = [
            {"lat": a.latitude, "lon": a.longitude, "label": a.location or a.title}
            for a in trip.activities
            if a.latitude is not None and a.longitude is not None
        ]
        if markers:
            data["map"] = {"markers": markers}
            builder.add_section(_section("map", "map", "Map", layout="map"))

        now = datetime.now(UTC)
        open_alerts = [
            a for a in alerts if not a.acknowledged and (a.expiry_date is None or as_utc(a.expiry_date) > now)
        ]
        builder.add_section(_section("alerts", "alerts", "Alerts", items=[alert_item(a) for a in open_alerts]))

        builder.add_section(
            _section("bookings", "cards", "Bookings", items=[booking_item(b) for b in trip.bookings], columns=2)
        )

        notes = []
        for itinerary in trip.itineraries:
            for n, tip in enumerate(itinerary.safety_notes.get("safetyTips") or []):
                notes.append(ContentItem(id=f"tip-{itinerary.id}-{n}", title=str(tip)))
            for n, warning in enumerate(itinerary.safety_notes.get("weatherWarnings") or []):
                notes.append(
                    ContentItem(
                        id=f"warning-{itinerary.id}-{n}",
                        title=str(warning.get("warning", "")),
                        subtitle=warning.get("date"),
                        description=warning.get("recommendation"),
                    )
                )
        builder.add_section(
            _section(
                "notes",
                "list",
                "Safety notes",
                items=notes,
                visibility=VisibilityRule(condition="authenticated"),
                spacing="compact",
            )
        )

        destinations = self.recommendations.get_destinations(limit=3)
        builder.add_section(
            _section(
                "recommendations",
                "recommendations",
                "You might also like",
                items=[destination_item(d) for d in destinations],
                columns=3,
            )
        )

        first_itinerary = trip.itineraries[0].id if trip.itineraries else None
        builder.add_action(
            LayoutAction(
                id="share",
                label="Share",
                type="secondary",
                action="share_trip",
                payload={"tripId": trip.id},
                position="top",
            )
        )
        builder.add_action(
            LayoutAction(
                id="save",
                label="Save trip",
                type="primary",
                action="save_trip",
                payload={"tripId": trip.id},
                position="floating",
            )
        )
        builder.add_action(
            LayoutAction(
                id="add-activity",
                label="Add activity",
                type="secondary",
                icon="+",
                action="add_activity",
                payload={"tripId": trip.id, "itineraryId": first_itinerary},
                position="floating",
            )
        )
        return builder.build()

    async def _calendar(self, trip: TripDetails, data: dict[str, Any], errors: list[SDUIError]) -> LayoutConfig:
        data["calendar"] = {
            "start": trip.start_date.date().isoformat(),
            "end": trip.end_date.date().isoformat(),
            "events": [
                {"id": a.id, "date": a.start_date.isoformat(), "title": a.title, "completed": a.completed}
                for a in trip.activities
            ],
        }

        coords = _trip_coordinates(trip)
        if coords is not None:
            try:
                forecast = await self.weather.get_forecast(coords[0], coords[1], days=MAX_FORECAST_DAYS)
                data["weather"] = forecast.model_dump(mode="json", by_alias=True)
            except UpstreamError as e:
                logger.warning("layout: calendar for trip %s rendered without weather", trip.id)
                errors.append(SDUIError(code="weather_unavailable", message=str(e), field="weather"))

        return (
            LayoutBuilder("calendar", trip.name, trip.description)
            .with_metadata(tripId=trip.id)
            .add_section(_section("header", "header", trip.name, subtitle=_date_range(trip)))
            .add_section(_section("calendar", "calendar", "Calendar", layout="grid"))
            .with_settings({"weekStartsOn": "monday", "showWeather": "weather" in data})
            .build()
        )

    def _guide(self, trip: TripDetails | None) -> LayoutConfig:
        destination = (trip.trip_data.get("destination") if trip else None) or (trip.name if trip else None)
        title = f"{destination} guide" if destination else "Where to next?"

        builder = LayoutBuilder("guide", title)
        if trip:
            builder.with_metadata(tripId=trip.id)

        hero_items = []
        if destination:
            hero_items.append(
                ContentItem(id="destination", title=destination, image=(trip.trip_data.get("image") if trip else None))
            )
        builder.add_section(
            _section("hero", "hero", title, items=hero_items, subtitle="Ideas for places and things to do.")
        )
        builder.add_section(
            _section(
                "destinations",
                "cards",
                "Popular destinations",
                items=[destination_item(d) for d in self.recommendations.get_destinations(limit=6)],
                columns=3,
            )
        )
        if destination:
            activities = self.recommendations.get_activities(destination, limit=10)
            builder.add_section(
                _section(
                    "things-to-do",
                    "list",
                    "Things to do",
                    items=[
                        ContentItem(
                            id=f"suggestion-{a['id']}",
                            title=a["title"],
                            subtitle=f"{a['duration']} h · {_money(a['cost'], 'USD')}",
                            description=a["description"],
                            badge=a["category"],
                        )
                        for a in activities
                    ],
                )
            )
        return builder.build()

    def _booking(self, trip: TripDetails) -> LayoutConfig:
        destination = trip.trip_data.get("destination")
        form_items = [
            ContentItem(
                id="bookingType",
                title="What",
                metadata={"inputType": "select", "options": ["flight", "hotel"], "required": True},
            ),
            ContentItem(id="to", title="Destination", description=destination or "City or airport", metadata={"required": True}),
            ContentItem(id="checkIn", title="From", metadata={"inputType": "date", "required": True}),
            ContentItem(id="checkOut", title="Until", metadata={"inputType": "date"}),
        ]
        return (
            LayoutBuilder("booking", f"Book · {trip.name}", trip.description)
            .with_metadata(tripId=trip.id)
            .add_section(_section("header", "header", "Bookings", subtitle=trip.name))
            .add_section(_section("search", "form", "Search", items=form_items))
            .add_section(
                _section("booked", "list", "Your bookings", items=[booking_item(b) for b in trip.bookings])
            )
            .add_action(
                LayoutAction(
                    id="search",
                    label="Search offers",
                    type="primary",
                    action="search_bookings",
                    payload={"tripId": trip.id},
                    position="floating",
                )
            )
            .build()
        )


layout_service = LayoutService()
