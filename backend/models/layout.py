"""Request bodies for the layout endpoints."""

from pydantic import Field

from backend.models.base import RequestModel


class LayoutActionRequest(RequestModel):
    """A button press posted back by a rendered page."""

    action_id: str = Field(min_length=1)
