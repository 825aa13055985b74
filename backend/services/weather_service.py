"""Daily weather forecasts from Open-Meteo."""

from __future__ import annotations

import logging

import httpx

from backend import config
from backend.models.alert import Coordinates, DailyForecast, Forecast

logger = logging.getLogger(__name__)

MAX_FORECAST_DAYS = 16

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_sum,weathercode"


class UpstreamError(Exception):
    """An external feed could not be reached or returned something unusable."""


class WeatherService:
    """HTTP client for the Open-Meteo forecast API."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._url = config.settings.OPEN_METEO_URL
        self._timeout = config.settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def get_forecast(self, latitude: float, longitude: float, days: int = 7) -> Forecast:
        """
        Fetch a daily forecast.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            days: Number of days to return (1..16)

        Returns:
            Forecast with at most `days` entries

        Raises:
            ValueError: days out of range
            UpstreamError: Open-Meteo unreachable, non-2xx, or malformed
        """
        if not 1 <= days <= MAX_FORECAST_DAYS:
            raise ValueError(f"days must be between 1 and {MAX_FORECAST_DAYS}")

        params = {
            "latitude": latitude,
            "longitude": longitude,
            "daily": DAILY_FIELDS,
            "timezone": "auto",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, params=params)
                response.raise_for_status()
                daily = response.json()["daily"]
                forecast = [
                    DailyForecast(
                        date=day,
                        temperature_max=daily["temperature_2m_max"][i],
                        temperature_min=daily["temperature_2m_min"][i],
                        precipitation=daily["precipitation_sum"][i],
                        weather_code=daily["weathercode"][i],
                    )
                    for i, day in enumerate(daily["time"][:days])
                ]
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("weather: forecast failed for (%s, %s): %s", latitude, longitude, e)
            raise UpstreamError("Failed to fetch weather forecast") from e

        return Forecast(location=Coordinates(latitude=latitude, longitude=longitude), forecast=forecast)


weather_service = WeatherService()
