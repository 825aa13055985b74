"""
Action commands — what happens when a rendered button is pressed.

The renderer treats `action` strings as opaque. This is the one place that
knows what they mean. Each command validates ownership of its target
before touching anything.
"""

from __future__ import annotations

import logging
from typing import Any

from backend import config
from backend.models.trip import Trip
from backend.models.user import User
from backend.repos.activity_repo import ActivityRepo
from backend.repos.alert_repo import AlertRepo
from backend.repos.trip_repo import TripRepo

logger = logging.getLogger(__name__)


class ActionError(Exception):
    """Base for failures the HTTP layer turns into a 4xx."""


class UnknownActionError(ActionError):
    pass


class ActionNotPermittedError(ActionError):
    pass


class ActionTargetNotFoundError(ActionError):
    pass


def _int_arg(payload: dict[str, Any] | None, key: str) -> int:
    value = (payload or {}).get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ActionTargetNotFoundError(f"Missing or invalid '{key}'.")
    return value


class ActionService:
    """Interprets the commands the host understands."""

    def __init__(self) -> None:
        self.trip_repo = TripRepo()
        self.activity_repo = ActivityRepo()
        self.alert_repo = AlertRepo()
        self._handlers = {
            "save_trip": self._do_save_trip,
            "delete_trip": self._do_delete_trip,
            "acknowledge_alert": self._do_acknowledge_alert,
            "complete_activity": self._do_complete_activity,
            "add_activity": self._do_add_activity,
            "search_bookings": self._do_search_bookings,
            "share_trip": self._do_share_trip,
        }

    async def perform(self, command: str, payload: dict[str, Any] | None, user: User | None) -> dict[str, Any]:
        """
        Run one action command.

        Args:
            command: The action's `action` string
            payload: The action's payload, untouched
            user: Signed-in user, if any

        Returns:
            JSON-able reply. `redirect` tells the page where to go next.

        Raises:
            UnknownActionError: command not recognised
            ActionNotPermittedError: not signed in, or not the owner
            ActionTargetNotFoundError: the target does not exist
        """
        handler = self._handlers.get(command)
        if handler is None:
            raise UnknownActionError(f"Unknown action: {command}")
        logger.info("action: %s by user %s", command, user.id if user else "anonymous")
        return await handler(payload or {}, user)

    async def _owned_trip(self, trip_id: int, user: User | None) -> Trip:
        if user is None:
            raise ActionNotPermittedError("Sign in required.")
        trip = await self.trip_repo.get(trip_id)
        if trip is None:
            raise ActionTargetNotFoundError("Trip not found.")
        if trip.user_id != user.id:
            raise ActionNotPermittedError("Not authorized for this trip.")
        return trip

    # -- commands --------------------------------------------------------------

    async def _do_save_trip(self, payload: dict[str, Any], user: User | None) -> dict[str, Any]:
        trip = await self._owned_trip(_int_arg(payload, "tripId"), user)
        saved = await self.trip_repo.set_status(trip.id, "planned")
        if saved is None:
            raise ActionTargetNotFoundError("Trip not found.")
        return {"ok": True, "message": "Trip saved.", "status": saved.status}

    async def _do_delete_trip(self, payload: dict[str, Any], user: User | None) -> dict[str, Any]:
        trip = await self._owned_trip(_int_arg(payload, "tripId"), user)
        await self.trip_repo.delete(trip.id)
        return {"ok": True, "message": "Trip deleted.", "redirect": "/layouts/guide"}

    async def _do_acknowledge_alert(self, payload: dict[str, Any], user: User | None) -> dict[str, Any]:
        alert_id = _int_arg(payload, "alertId")
        alert = await self.alert_repo.get(alert_id)
        if alert is None:
            raise ActionTargetNotFoundError("Alert not found.")
        if alert.trip_id is not None:
            await self._owned_trip(alert.trip_id, user)
        elif user is None:
            raise ActionNotPermittedError("Sign in required.")
        await self.alert_repo.acknowledge(alert_id)
        return {"ok": True, "message": "Alert acknowledged."}

    async def _do_complete_activity(self, payload: dict[str, Any], user: User | None) -> dict[str, Any]:
        activity = await self.activity_repo.get(_int_arg(payload, "activityId"))
        if activity is None:
            raise ActionTargetNotFoundError("Activity not found.")
        await self._owned_trip(activity.trip_id, user)
        await self.activity_repo.set_completed(activity.id, True)
        return {"ok": True, "message": "Activity completed."}

    async def _do_add_activity(self, payload: dict[str, Any], user: User | None) -> dict[str, Any]:
        trip_id = _int_arg(payload, "tripId")
        return {"ok": True, "redirect": f"/layouts/itinerary?trip_id={trip_id}#schedule"}

    async def _do_search_bookings(self, payload: dict[str, Any], user: User | None) -> dict[str, Any]:
        trip_id = _int_arg(payload, "tripId")
        return {"ok": True, "redirect": f"/layouts/booking?trip_id={trip_id}#search"}

    async def _do_share_trip(self, payload: dict[str, Any], user: User | None) -> dict[str, Any]:
        trip_id = _int_arg(payload, "tripId")
        return {"ok": True, "shareUrl": f"{config.settings.PUBLIC_URL}/layouts/itinerary?trip_id={trip_id}"}


action_service = ActionService()
