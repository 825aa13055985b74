"""
Waypoint configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")

    # Auth (session tokens are issued by the identity provider, we only verify)
    JWT_SECRET: str = os.environ.get("JWT_SECRET", "")
    JWT_ALGORITHM: str = os.environ.get("JWT_ALGORITHM", "HS256")
    SESSION_COOKIE: str = "session"
    OWNER_OPEN_ID: str = os.environ.get("OWNER_OPEN_ID", "")

    # Upstream feeds
    OPEN_METEO_URL: str = os.environ.get("OPEN_METEO_URL", "https://api.open-meteo.com/v1/forecast")
    GDACS_URL: str = os.environ.get(
        "GDACS_URL",
        "https://www.gdacs.org/gdacsapi/api/events/geteventlist?limit=100&sortby=eventdate&sortorder=DESC",
    )
    HTTP_TIMEOUT_SECONDS: float = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "10"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def PUBLIC_URL(self) -> str:
        url = os.environ.get("PUBLIC_URL")
        if url:
            return url
        return "http://localhost:8000" if self.ENVIRONMENT == "development" else "https://waypoint.travel"

    # Paging
    TRIPS_PAGE_DEFAULT: int = 20
    TRIPS_PAGE_MAX: int = 100


# Singleton instance
settings = Settings()

if not settings.DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is required")
if not settings.JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is required")
