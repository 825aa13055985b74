"""
Layout Renderer -- Text Channel Tests

The text channel is the same render pass without markup: terminals,
SMS digests, logs. Same takeover rules, same ordering.
"""

import logging

from engine.layout.renderer import render, render_with_actions
from engine.layout.types import (
    ContentAction,
    ContentItem,
    LayoutAction,
    LayoutConfig,
    LayoutSection,
    RenderOptions,
    SectionContent,
)

TEXT = RenderOptions(channel="text")


def test_title_and_items(paris_config):
    text = render(paris_config, options=TEXT)
    assert text.startswith("Paris Trip\n==========")
    assert "- Eiffel Tower" in text
    assert "Actions: [Save]" in text
    assert "<" not in text


def test_loading_and_error(paris_config):
    assert render(paris_config, loading=True, error="x", options=TEXT) == "Loading…"
    assert render(paris_config, error="Trip not found.", options=TEXT) == "Error: Trip not found."


def test_unknown_section_type(paris_config):
    config = LayoutConfig(mode="guide", title="G", sections=[LayoutSection(id="x", type="carousel")])
    assert "[Unknown section type: carousel]" in render(config, options=TEXT)


def test_item_details():
    item = ContentItem(id="a", title="Louvre", subtitle="09:00", badge="booked")
    config = LayoutConfig(
        mode="itinerary",
        title="Day 1",
        sections=[LayoutSection(id="t", type="timeline", title="Today", content=SectionContent(items=[item]))],
    )
    text = render(config, options=TEXT)
    assert "Today\n-----" in text
    assert "- Louvre — 09:00 [booked]" in text


def test_calendar_events():
    config = LayoutConfig(mode="calendar", title="Cal", sections=[LayoutSection(id="c", type="calendar")])
    data = {"calendar": {"events": [{"date": "2026-05-02T10:00:00", "title": "Louvre"}]}}
    assert "- 2026-05-02: Louvre" in render(config, data, options=TEXT)


def test_calendar_with_malformed_bag():
    config = LayoutConfig(mode="calendar", title="Cal", sections=[LayoutSection(id="c", type="calendar")])
    assert render(config, {"calendar": "nope"}, options=TEXT).startswith("Cal")


def test_actions_recorded_for_dispatch():
    config = LayoutConfig(
        mode="itinerary",
        title="T",
        actions=[
            LayoutAction(id="top", label="Share", action="share_trip", position="top"),
            LayoutAction(id="add", label="Add", action="add_activity", position="floating"),
        ],
    )
    result = render_with_actions(config, options=TEXT)
    assert [a.id for a in result.actions] == ["add"]
    assert "[Share]" not in result.html


def test_malformed_section_does_not_take_down_the_page(caplog):
    item = ContentItem(
        id="d1",
        title="Day one",
        actions=[ContentAction(id="open", label="Open", action="open_day", payload={"day": 1})],
    )
    config = LayoutConfig(
        mode="calendar",
        title="Cal",
        sections=[
            LayoutSection(id="h", type="header", title="Hello"),
            LayoutSection(id="c", type="calendar", title="Dates", content=SectionContent(items=[item])),
            LayoutSection(id="after", type="list", title="After"),
        ],
    )
    with caplog.at_level(logging.ERROR, logger="engine.layout.renderer"):
        result = render_with_actions(config, {"calendar": {"events": ["not-a-dict"]}}, options=TEXT)
    assert "Hello" in result.html
    assert "[This section could not be displayed]" in result.html
    assert "After" in result.html
    assert "- Day one" not in result.html
    assert result.actions == []
    assert "section c (calendar) failed" in caplog.text


def nested(depth):
    section = LayoutSection(id=f"level{depth}", type="list", title=f"Level {depth}")
    for level in range(depth - 1, -1, -1):
        section = LayoutSection(id=f"level{level}", type="list", title=f"Level {level}", children=[section])
    return section


def test_nesting_past_limit_is_truncated_with_marker(caplog):
    config = LayoutConfig(mode="guide", title="Deep", sections=[nested(5)])
    with caplog.at_level(logging.WARNING, logger="engine.layout.renderer"):
        text = render(config, options=RenderOptions(channel="text", max_depth=2))
    assert "    Level 2" in text
    assert "    (1 nested sections truncated)" in text
    assert "Level 3" not in text
    assert "truncated 1 children of section level2 at depth 3" in caplog.text


def test_nesting_within_limit_has_no_marker():
    config = LayoutConfig(mode="guide", title="Deep", sections=[nested(2)])
    text = render(config, options=RenderOptions(channel="text", max_depth=3))
    assert "  Level 1" in text
    assert "truncated" not in text
