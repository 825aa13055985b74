"""Recommendation routes. Served from sample data for now."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Query

from backend.services.recommendation_service import recommendation_service

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


@router.get("/destinations", status_code=200)
async def get_destinations(
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
    interests: Annotated[list[str] | None, Query()] = None,
    budget: float | None = None,
    season: str | None = None,
) -> list[dict[str, Any]]:
    return recommendation_service.get_destinations(limit, interests=interests, budget=budget, season=season)


@router.get("/activities", status_code=200)
async def get_activities(
    destination: Annotated[str, Query(min_length=1)],
    limit: Annotated[int, Query(ge=1, le=50)] = 20,
    category: str | None = None,
) -> list[dict[str, Any]]:
    return recommendation_service.get_activities(destination, limit, category=category)


@router.get("/optimize", status_code=200)
async def optimize_itinerary(
    itinerary_id: int,
    optimize_for: Literal["time", "cost", "experience"] = "experience",
) -> dict[str, Any]:
    """Suggestions for improving an itinerary."""
    return recommendation_service.optimize_itinerary(itinerary_id, optimize_for)
