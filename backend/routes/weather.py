"""Weather forecast route."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from backend.models.alert import Forecast
from backend.services.weather_service import MAX_FORECAST_DAYS, UpstreamError, weather_service

router = APIRouter(prefix="/api/weather", tags=["weather"])


@router.get("/forecast", status_code=200)
async def get_forecast(
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    days: Annotated[int, Query(ge=1, le=MAX_FORECAST_DAYS)] = 7,
) -> Forecast:
    try:
        return await weather_service.get_forecast(latitude, longitude, days)
    except UpstreamError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
