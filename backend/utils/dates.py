"""Datetime helpers. Every datetime the backend compares or stores is timezone-aware."""

from datetime import UTC, datetime


def as_utc(value: datetime) -> datetime:
    """
    Read a datetime without a timezone as UTC. Aware values are returned unchanged.

    Naive and aware datetimes cannot be compared, so request values are
    normalised before any date-order check.
    """
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=UTC)
    return value
