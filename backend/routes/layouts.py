"""
Layout routes — the server-driven UI surface.

GET  /api/layouts/{mode}          → SDUIResponse JSON (config + data bag)
GET  /layouts/{mode}              → rendered HTML page
POST /api/layouts/{mode}/actions  → fire a button that the page rendered
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from backend.auth import get_optional_user
from backend.models.layout import LayoutActionRequest
from backend.models.user import User
from backend.repos.alert_repo import AlertRepo
from backend.repos.trip_repo import TripRepo
from backend.services.action_service import (
    ActionNotPermittedError,
    ActionTargetNotFoundError,
    UnknownActionError,
    action_service,
)
from backend.services.layout_service import layout_service
from engine.layout import LayoutBuilder, RenderOptions, SDUIResponse, dispatch_action, render, render_with_actions
from engine.layout.types import LAYOUT_MODES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["layouts"])
trip_repo = TripRepo()
alert_repo = AlertRepo()


def _check_mode(mode: str) -> None:
    if mode not in LAYOUT_MODES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Layout not found.")


def _action_endpoint(mode: str, trip_id: int | None) -> str:
    endpoint = f"/api/layouts/{mode}/actions"
    return f"{endpoint}?trip_id={trip_id}" if trip_id is not None else endpoint


def _render_options(mode: str, trip_id: int | None, user: User | None) -> RenderOptions:
    return RenderOptions(authenticated=user is not None, action_endpoint=_action_endpoint(mode, trip_id))


async def _compose(mode: str, trip_id: int | None, user: User | None) -> SDUIResponse:
    """
    Fetch the trip and compose the layout for one mode.

    Raises:
        HTTPException: 404 if trip_id was given and no such trip exists
    """
    trip = None
    alerts = []
    if trip_id is not None:
        trip = await trip_repo.get_with_details(trip_id)
        if not trip:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found.")
        alerts = await alert_repo.list_active(trip_id)
    return await layout_service.build(mode, trip, user, alerts)


@router.get("/api/layouts/{mode}", status_code=200)
async def get_layout(
    mode: str,
    trip_id: int | None = None,
    user: User | None = Depends(get_optional_user),
) -> dict[str, Any]:
    """The layout description for a mode, for clients that render it themselves."""
    _check_mode(mode)
    response = await _compose(mode, trip_id, user)
    return response.to_dict()


@router.get("/layouts/{mode}", response_class=HTMLResponse)
async def get_layout_page(
    mode: str,
    trip_id: int | None = None,
    user: User | None = Depends(get_optional_user),
) -> HTMLResponse:
    """
    A rendered layout page.

    When the trip cannot be loaded the page still renders, as the full-page
    error state, with the matching status code.
    """
    _check_mode(mode)
    options = _render_options(mode, trip_id, user)
    try:
        response = await _compose(mode, trip_id, user)
    except HTTPException as e:
        shell = LayoutBuilder(mode, "Waypoint").build()
        return HTMLResponse(content=render(shell, error=str(e.detail), options=options), status_code=e.status_code)
    except Exception:
        logger.exception("layouts: failed to load %s for trip %s", mode, trip_id)
        shell = LayoutBuilder(mode, "Waypoint").build()
        return HTMLResponse(
            content=render(shell, error="Something went wrong loading this page.", options=options),
            status_code=500,
        )
    return HTMLResponse(content=render(response.config, response.data, options=options))


@router.post("/api/layouts/{mode}/actions", status_code=200)
async def fire_action(
    mode: str,
    req: LayoutActionRequest,
    trip_id: int | None = None,
    user: User | None = Depends(get_optional_user),
) -> dict[str, Any]:
    """
    Fire one rendered button.

    The layout is composed and rendered again for this caller, so only a
    button the caller could actually see can be fired.
    """
    _check_mode(mode)
    response = await _compose(mode, trip_id, user)
    result = render_with_actions(response.config, response.data, options=_render_options(mode, trip_id, user))

    fired: list[dict[str, Any] | None] = []
    rendered = dispatch_action(result.actions, req.action_id, lambda _id, payload: fired.append(payload))
    if rendered is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Action not found.")

    try:
        return await action_service.perform(rendered.action, fired[0], user)
    except UnknownActionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except ActionNotPermittedError as e:
        code = status.HTTP_401_UNAUTHORIZED if user is None else status.HTTP_403_FORBIDDEN
        raise HTTPException(status_code=code, detail=str(e)) from e
    except ActionTargetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
