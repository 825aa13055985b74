"""
Waypoint FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from backend import config, db
from backend.routes import alerts as alert_routes
from backend.routes import auth_routes
from backend.routes import bookings as booking_routes
from backend.routes import itineraries as itinerary_routes
from backend.routes import layouts as layout_routes
from backend.routes import recommendations as recommendation_routes
from backend.routes import trips as trip_routes
from backend.routes import weather as weather_routes

logging.basicConfig(
    level=config.settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Opens the database pool on startup and closes it on shutdown.
    """
    await db.init_pool()
    logger.info("Database pool initialized")

    yield

    await db.close_pool()
    logger.info("Database pool closed")


app = FastAPI(
    title="Waypoint",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(auth_routes.router)
app.include_router(trip_routes.router)
app.include_router(itinerary_routes.router)
app.include_router(weather_routes.router)
app.include_router(alert_routes.router)
app.include_router(recommendation_routes.router)
app.include_router(booking_routes.router)
app.include_router(layout_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}


@app.get("/")
async def index():
    """Anonymous landing page."""
    return RedirectResponse(url="/layouts/guide")
