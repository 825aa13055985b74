"""
Layout engine test configuration.

Engine tests are pure: no database, no network, no event loop.
"""

from __future__ import annotations

import pytest

from engine.layout.types import (
    ContentAction,
    ContentItem,
    LayoutAction,
    LayoutConfig,
    LayoutSection,
    SectionContent,
)


@pytest.fixture
def paris_config():
    """One cards section with a bookable item, plus a floating Save button."""
    item = ContentItem(
        id="i1",
        title="Eiffel Tower",
        actions=[
            ContentAction(id="book_i1", label="Book", type="primary", action="open_booking", payload={"activityId": 1})
        ],
    )
    return LayoutConfig(
        mode="itinerary",
        title="Paris Trip",
        sections=[LayoutSection(id="s1", type="cards", content=SectionContent(items=[item]))],
        actions=[
            LayoutAction(
                id="save",
                label="Save",
                type="primary",
                action="save_trip",
                payload={"tripId": 7},
                position="floating",
            )
        ],
    )
