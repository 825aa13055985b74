"""
Waypoint Layout — Section dispatcher

One sub-renderer per section type, keyed on `LayoutSection.type`.
Each receives a SectionView with defaults already resolved (items → [],
columns → 3, spacing → "normal") and returns an HTML fragment.

Sub-renderers never fetch, persist, or mutate. Buttons they emit are
registered on the RenderPass so the host can fire them later.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from html import escape as _html_escape
from typing import Any

import chevron

from engine.layout.actions import RenderedAction
from engine.layout.types import (
    ContentAction,
    ContentItem,
    LayoutAction,
    LayoutSection,
    RenderOptions,
)

logger = logging.getLogger(__name__)

# header and hero print their own title; everything else gets one from the wrapper
SELF_TITLED_TYPES: set[str] = {"header", "hero"}

MAX_CALENDAR_DAYS = 62

_GAP_BY_SPACING = {"compact": "8px", "normal": "16px", "spacious": "32px"}

_EMPTY_MESSAGES: dict[str, str] = {
    "cards": "Nothing here yet.",
    "list": "Nothing here yet.",
    "timeline": "No activities scheduled.",
    "gallery": "No photos yet.",
    "stats": "No figures available.",
    "alerts": "No active alerts.",
    "recommendations": "No recommendations right now.",
    "form": "This form has no fields.",
}

# SafetyNotes use traffic-light colours; alert rows use info/warning/critical
_SEVERITY_ALIASES: dict[str, str] = {
    "info": "info",
    "green": "info",
    "low": "info",
    "warning": "warning",
    "orange": "warning",
    "medium": "warning",
    "moderate": "warning",
    "critical": "critical",
    "red": "critical",
    "high": "critical",
}


# ---------------------------------------------------------------------------
# Render pass state
# ---------------------------------------------------------------------------


@dataclass
class RenderPass:
    """Per-call state: options, the shared data bag, and buttons emitted so far."""

    options: RenderOptions
    data: dict[str, Any] = field(default_factory=dict)
    actions: list[RenderedAction] = field(default_factory=list)

    def button(self, action: ContentAction | LayoutAction, origin: str) -> str:
        self.actions.append(
            RenderedAction(id=action.id, action=action.action, payload=action.payload, origin=origin)
        )
        attrs = [
            'type="button"',
            f'class="sdui-action sdui-action--{escape(action.type)}"',
            f'data-action-id="{escape(action.id)}"',
            f'data-action="{escape(action.action)}"',
        ]
        if action.payload is not None:
            attrs.append(f'data-payload="{escape(_json(action.payload))}"')
        condition = getattr(action, "condition", None)
        if condition:
            attrs.append(f'data-condition="{escape(condition)}"')
        return f"<button {' '.join(attrs)}>{escape(action.label)}</button>"


@dataclass
class SectionView:
    """What a sub-renderer gets to see."""

    section: LayoutSection
    items: list[ContentItem]
    columns: int
    spacing: str
    title: str | None
    data: dict[str, Any]
    rp: RenderPass

    @property
    def origin(self) -> str:
        return f"section:{self.section.id}"

    @property
    def template(self) -> str | None:
        content = self.section.content
        return content.template if content is not None else None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def dispatch_section(section: LayoutSection, rp: RenderPass) -> str:
    """
    Render the primary content of one section (no title wrapper, no children).
    Unknown types render a placeholder naming the type; they never raise.
    """
    renderer = SECTION_RENDERERS.get(section.type)
    if renderer is None:
        return _render_unknown(section)

    view = SectionView(
        section=section,
        items=list(section.items),
        columns=section.effective_columns,
        spacing=section.effective_spacing,
        title=section.title,
        data=rp.data,
        rp=rp,
    )
    return renderer(view)


# ---------------------------------------------------------------------------
# Shared item helpers
# ---------------------------------------------------------------------------


def _item_actions(view: SectionView, item: ContentItem) -> str:
    if not item.actions:
        return ""
    buttons = "".join(view.rp.button(a, view.origin) for a in item.actions)
    return f'<div class="sdui-item-actions">{buttons}</div>'


def _badge(item: ContentItem) -> str:
    if not item.badge:
        return ""
    return f'<span class="sdui-badge">{escape(item.badge)}</span>'


def _from_template(view: SectionView, item: ContentItem) -> str | None:
    """Render an item through the section's Mustache template, if any."""
    template = view.template
    if not template:
        return None
    context = item.to_dict()
    context.update({k: v for k, v in item.metadata.items() if k not in context})
    try:
        return chevron.render(template, context)
    except Exception:
        logger.warning("sections: template failed for item %s in section %s", item.id, view.section.id)
        return None


def _card(view: SectionView, item: ContentItem, css: str = "sdui-card") -> str:
    body = _from_template(view, item)
    if body is None:
        parts = []
        if item.image:
            parts.append(
                f'<img class="{css}-image" src="{escape(item.image)}" alt="{escape(item.title)}" loading="lazy">'
            )
        heading = f'<h3 class="{css}-title">{_icon(item)}{escape(item.title)}</h3>'
        if item.subtitle:
            heading += f'<p class="{css}-subtitle">{escape(item.subtitle)}</p>'
        parts.append(f'<div class="{css}-header"><div>{heading}</div>{_badge(item)}</div>')
        if item.description:
            parts.append(f'<p class="{css}-description">{escape(item.description)}</p>')
        body = "".join(parts)
    return f'<article class="{css}" data-item-id="{escape(item.id)}">{body}{_item_actions(view, item)}</article>'


def _icon(item: ContentItem) -> str:
    if not item.icon:
        return ""
    return f'<span class="sdui-icon" aria-hidden="true">{escape(item.icon)}</span> '


def _empty(view: SectionView) -> str:
    message = _EMPTY_MESSAGES.get(view.section.type, "Nothing here yet.")
    return f'<p class="sdui-empty">{message}</p>'


def _grid_style(columns: int, spacing: str) -> str:
    gap = _GAP_BY_SPACING.get(spacing, _GAP_BY_SPACING["normal"])
    return f"grid-template-columns: repeat({columns}, minmax(0, 1fr)); gap: {gap};"


# ---------------------------------------------------------------------------
# Sub-renderers
# ---------------------------------------------------------------------------


def _render_header(view: SectionView) -> str:
    parts = ['<header class="sdui-header">']
    if view.title:
        parts.append(f'<h1 class="sdui-header-title">{escape(view.title)}</h1>')
    if view.section.subtitle:
        parts.append(f'<p class="sdui-header-subtitle">{escape(view.section.subtitle)}</p>')
    parts.append("</header>")
    return "".join(parts)


def _render_hero(view: SectionView) -> str:
    parts = ['<div class="sdui-hero">']
    if view.title:
        parts.append(f'<h1 class="sdui-hero-title">{escape(view.title)}</h1>')
    if view.section.subtitle:
        parts.append(f'<p class="sdui-hero-subtitle">{escape(view.section.subtitle)}</p>')
    for item in view.items:
        parts.append(_card(view, item, css="sdui-hero-item"))
    parts.append("</div>")
    return "".join(parts)


def _render_cards(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    cards = "".join(_card(view, item) for item in view.items)
    return (
        f'<div class="sdui-cards sdui-cards--{view.spacing}" '
        f'style="{_grid_style(view.columns, view.spacing)}">{cards}</div>'
    )


def _render_list(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    rows = []
    for item in view.items:
        body = _from_template(view, item)
        if body is None:
            body = f'<div class="sdui-list-main"><h3 class="sdui-list-title">{_icon(item)}{escape(item.title)}</h3>'
            if item.subtitle:
                body += f'<p class="sdui-list-subtitle">{escape(item.subtitle)}</p>'
            if item.description:
                body += f'<p class="sdui-list-description">{escape(item.description)}</p>'
            body += f"</div>{_badge(item)}"
        rows.append(f'<li class="sdui-list-row" data-item-id="{escape(item.id)}">{body}{_item_actions(view, item)}</li>')
    return f'<ul class="sdui-list sdui-list--{view.spacing}">{"".join(rows)}</ul>'


def _render_timeline(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    entries = []
    for item in view.items:
        body = _from_template(view, item)
        if body is None:
            body = ""
            if item.subtitle:
                body += f'<time class="sdui-timeline-time">{escape(item.subtitle)}</time>'
            body += f'<h3 class="sdui-timeline-title">{_icon(item)}{escape(item.title)}</h3>{_badge(item)}'
            if item.description:
                body += f'<p class="sdui-timeline-description">{escape(item.description)}</p>'
        entries.append(
            f'<li class="sdui-timeline-entry" data-item-id="{escape(item.id)}">'
            f'<span class="sdui-timeline-marker"></span>'
            f'<div class="sdui-timeline-body">{body}{_item_actions(view, item)}</div></li>'
        )
    return f'<ol class="sdui-timeline">{"".join(entries)}</ol>'


def _render_calendar(view: SectionView) -> str:
    calendar = view.data.get("calendar")
    if not isinstance(calendar, dict):
        return '<p class="sdui-empty">No dates to show.</p>'

    start = _parse_date(calendar.get("start"))
    end = _parse_date(calendar.get("end"))
    if start is None or end is None or end < start:
        return '<p class="sdui-empty">No dates to show.</p>'

    events_by_day: dict[str, list[dict[str, Any]]] = {}
    for event in calendar.get("events") or []:
        day = str(event.get("date", ""))[:10]
        events_by_day.setdefault(day, []).append(event)

    weather = view.data.get("weather") or calendar.get("weather") or {}
    if isinstance(weather, dict) and "forecast" in weather:
        weather = {str(d.get("date", ""))[:10]: d for d in weather.get("forecast") or []}

    days = min((end - start).days + 1, MAX_CALENDAR_DAYS)
    cells = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        key = day.isoformat()
        cell = [f'<div class="sdui-calendar-day" data-date="{key}">']
        cell.append(f'<span class="sdui-calendar-date">{day.strftime("%a %d %b")}</span>')
        forecast = weather.get(key) if isinstance(weather, dict) else None
        if forecast:
            high = forecast.get("temperatureMax", forecast.get("max"))
            low = forecast.get("temperatureMin", forecast.get("min"))
            cell.append(f'<span class="sdui-calendar-weather">{escape(_fmt(low))}° / {escape(_fmt(high))}°</span>')
        day_events = events_by_day.get(key, [])
        if day_events:
            cell.append('<ul class="sdui-calendar-events">')
            for event in day_events:
                cell.append(
                    f'<li data-event-id="{escape(str(event.get("id", "")))}">{escape(str(event.get("title", "")))}</li>'
                )
            cell.append("</ul>")
        cell.append("</div>")
        cells.append("".join(cell))

    truncated = ""
    if (end - start).days + 1 > MAX_CALENDAR_DAYS:
        truncated = f'<p class="sdui-calendar-more">Showing the first {MAX_CALENDAR_DAYS} days.</p>'
    return f'<div class="sdui-calendar">{"".join(cells)}</div>{truncated}'


def _render_map(view: SectionView) -> str:
    map_data = view.data.get("map")
    markers = map_data.get("markers") if isinstance(map_data, dict) else None
    if not markers:
        return '<p class="sdui-empty">No locations to show.</p>'

    rows = []
    for marker in markers:
        lat, lon = marker.get("lat"), marker.get("lon")
        label = escape(str(marker.get("label", "")))
        if lat is None or lon is None:
            rows.append(f'<li class="sdui-map-marker">{label}</li>')
            continue
        href = f"https://www.openstreetmap.org/?mlat={lat}&mlon={lon}#map=14/{lat}/{lon}"
        rows.append(
            f'<li class="sdui-map-marker" data-lat="{escape(_fmt(lat))}" data-lon="{escape(_fmt(lon))}">'
            f'<a href="{escape(href)}" rel="noopener">{label}</a></li>'
        )
    return f'<div class="sdui-map"><ul class="sdui-map-markers">{"".join(rows)}</ul></div>'


def _render_form(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    fields = []
    for item in view.items:
        meta = item.metadata
        name = escape(item.id)
        input_type = str(meta.get("inputType", "text"))
        required = " required" if meta.get("required") else ""
        label = f'<label for="{name}">{escape(item.title)}</label>'
        options = meta.get("options")
        if input_type == "select" and isinstance(options, list):
            opts = "".join(f'<option value="{escape(str(o))}">{escape(str(o))}</option>' for o in options)
            control = f'<select id="{name}" name="{name}"{required}>{opts}</select>'
        elif input_type == "textarea":
            control = f'<textarea id="{name}" name="{name}"{required}></textarea>'
        else:
            placeholder = f' placeholder="{escape(item.description)}"' if item.description else ""
            control = f'<input id="{name}" name="{name}" type="{escape(input_type)}"{placeholder}{required}>'
        hint = f'<small class="sdui-form-hint">{escape(item.subtitle)}</small>' if item.subtitle else ""
        fields.append(f'<div class="sdui-form-field" data-item-id="{name}">{label}{control}{hint}{_item_actions(view, item)}</div>')
    return f'<form class="sdui-form" data-section-id="{escape(view.section.id)}">{"".join(fields)}</form>'


def _render_gallery(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    figures = []
    for item in view.items:
        if item.image:
            media = f'<img src="{escape(item.image)}" alt="{escape(item.title)}" loading="lazy">'
        else:
            media = '<div class="sdui-gallery-placeholder"></div>'
        figures.append(
            f'<figure class="sdui-gallery-item" data-item-id="{escape(item.id)}">{media}'
            f"<figcaption>{escape(item.title)}</figcaption>{_item_actions(view, item)}</figure>"
        )
    return f'<div class="sdui-gallery" style="{_grid_style(view.columns, view.spacing)}">{"".join(figures)}</div>'


def _render_stats(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    tiles = []
    for item in view.items:
        value = item.metadata.get("value", item.subtitle)
        value_html = escape(_fmt(value)) if value is not None else "—"
        tiles.append(
            f'<div class="sdui-stat" data-item-id="{escape(item.id)}">'
            f'<span class="sdui-stat-value">{value_html}</span>'
            f'<span class="sdui-stat-label">{_icon(item)}{escape(item.title)}</span></div>'
        )
    return f'<div class="sdui-stats" style="{_grid_style(view.columns, view.spacing)}">{"".join(tiles)}</div>'


def _render_alerts(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    rows = []
    for item in view.items:
        raw = item.metadata.get("severity") or item.badge or "info"
        severity = _SEVERITY_ALIASES.get(str(raw).lower(), "info")
        body = _from_template(view, item)
        if body is None:
            body = f'<strong class="sdui-alert-title">{_icon(item)}{escape(item.title)}</strong>{_badge(item)}'
            if item.subtitle:
                body += f'<span class="sdui-alert-subtitle">{escape(item.subtitle)}</span>'
            if item.description:
                body += f'<p class="sdui-alert-description">{escape(item.description)}</p>'
        rows.append(
            f'<div class="sdui-alert sdui-alert--{severity}" role="alert" data-item-id="{escape(item.id)}">'
            f"{body}{_item_actions(view, item)}</div>"
        )
    return f'<div class="sdui-alerts">{"".join(rows)}</div>'


def _render_recommendations(view: SectionView) -> str:
    if not view.items:
        return _empty(view)
    cards = "".join(_card(view, item, css="sdui-recommendation") for item in view.items)
    return f'<div class="sdui-recommendations" style="{_grid_style(view.columns, view.spacing)}">{cards}</div>'


def _render_footer(view: SectionView) -> str:
    parts = ['<footer class="sdui-footer">']
    if view.section.subtitle:
        parts.append(f"<p>{escape(view.section.subtitle)}</p>")
    links = []
    for item in view.items:
        href = item.metadata.get("href")
        if href:
            links.append(f'<a href="{escape(str(href))}" data-item-id="{escape(item.id)}">{escape(item.title)}</a>')
        else:
            links.append(f'<span data-item-id="{escape(item.id)}">{escape(item.title)}</span>')
    if links:
        parts.append(f'<nav class="sdui-footer-links">{" ".join(links)}</nav>')
    parts.append("</footer>")
    return "".join(parts)


def _render_unknown(section: LayoutSection) -> str:
    return f'<div class="sdui-unknown"><p>Unknown section type: {escape(section.type)}</p></div>'


SECTION_RENDERERS: dict[str, Callable[[SectionView], str]] = {
    "header": _render_header,
    "hero": _render_hero,
    "cards": _render_cards,
    "list": _render_list,
    "timeline": _render_timeline,
    "calendar": _render_calendar,
    "map": _render_map,
    "form": _render_form,
    "gallery": _render_gallery,
    "stats": _render_stats,
    "alerts": _render_alerts,
    "recommendations": _render_recommendations,
    "footer": _render_footer,
}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def escape(text: Any) -> str:
    """HTML-escape user content."""
    return _html_escape(str(text), quote=True)


def _json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False, default=str)


def _fmt(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
