"""
Waypoint Layout — Shared Types (server-driven UI content model)

Data classes describing a declarative screen: a LayoutConfig holds an ordered
list of LayoutSections, each of which carries ContentItems and actions.
These are inert records. Nothing in this module fetches, renders, or
interprets action commands.

Wire format is the camelCase JSON the API emits (dataSource, customRule, ...).
from_dict() is lenient: missing optional fields take their defaults and an
unrecognized section type is kept verbatim so the dispatcher can show it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

LAYOUT_MODES: set[str] = {"calendar", "guide", "itinerary", "booking"}

SECTION_TYPES: tuple[str, ...] = (
    "header",
    "hero",
    "cards",
    "list",
    "timeline",
    "calendar",
    "map",
    "form",
    "gallery",
    "stats",
    "alerts",
    "recommendations",
    "footer",
)

SECTION_LAYOUTS: set[str] = {"grid", "list", "carousel", "timeline", "map"}

SPACING_VALUES: set[str] = {"compact", "normal", "spacious"}

VISIBILITY_CONDITIONS: set[str] = {"always", "authenticated", "anonymous", "custom"}

CONTENT_ACTION_TYPES: set[str] = {"primary", "secondary", "tertiary", "destructive"}

LAYOUT_ACTION_TYPES: set[str] = {"primary", "secondary", "tertiary"}

ACTION_POSITIONS: set[str] = {"top", "bottom", "floating"}

# settings key carried alongside a config, per mode
MODE_SETTINGS_KEYS: dict[str, str] = {
    "calendar": "calendarSettings",
    "guide": "guideSettings",
    "itinerary": "itinerarySettings",
    "booking": "bookingSettings",
}

DEFAULT_COLUMNS = 3
DEFAULT_SPACING = "normal"
DEFAULT_MAX_DEPTH = 8


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass
class ContentAction:
    """A button attached to a content item. `action` is opaque to the renderer."""

    id: str
    label: str
    action: str
    type: str = "secondary"
    payload: dict[str, Any] | None = None
    condition: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "label": self.label,
                "type": self.type,
                "action": self.action,
                "payload": self.payload,
                "condition": self.condition,
            }
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ContentAction:
        return cls(
            id=str(d.get("id", "")),
            label=str(d.get("label", "")),
            action=str(d.get("action", "")),
            type=d.get("type", "secondary"),
            payload=d.get("payload"),
            condition=d.get("condition"),
        )


@dataclass
class LayoutAction:
    """A page-level action. Only `floating` ones reach the action bar."""

    id: str
    label: str
    action: str
    type: str = "primary"
    icon: str | None = None
    payload: dict[str, Any] | None = None
    position: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "label": self.label,
                "icon": self.icon,
                "type": self.type,
                "action": self.action,
                "payload": self.payload,
                "position": self.position,
            }
        )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> LayoutAction:
        return cls(
            id=str(d.get("id", "")),
            label=str(d.get("label", "")),
            action=str(d.get("action", "")),
            type=d.get("type", "primary"),
            icon=d.get("icon"),
            payload=d.get("payload"),
            position=d.get("position"),
        )


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


@dataclass
class ContentItem:
    """One card / row / timeline entry inside a section."""

    id: str
    title: str
    subtitle: str | None = None
    description: str | None = None
    image: str | None = None
    icon: str | None = None
    badge: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    actions: list[ContentAction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = _drop_none(
            {
                "id": self.id,
                "title": self.title,
                "subtitle": self.subtitle,
                "description": self.description,
                "image": self.image,
                "icon": self.icon,
                "badge": self.badge,
            }
        )
        if self.metadata:
            d["metadata"] = self.metadata
        if self.actions:
            d["actions"] = [a.to_dict() for a in self.actions]
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ContentItem:
        return cls(
            id=str(d.get("id", "")),
            title=str(d.get("title", "")),
            subtitle=d.get("subtitle"),
            description=d.get("description"),
            image=d.get("image"),
            icon=d.get("icon"),
            badge=d.get("badge"),
            metadata=d.get("metadata") or {},
            actions=[ContentAction.from_dict(a) for a in d.get("actions") or []],
        )


@dataclass
class CacheHint:
    ttl: int
    key: str

    def to_dict(self) -> dict[str, Any]:
        return {"ttl": self.ttl, "key": self.key}


@dataclass
class DataSource:
    """
    Where a section's items come from when they are not inlined.
    Resolving it is the serving layer's job; the renderer never fetches.
    """

    type: str = "api"  # api | local | computed
    endpoint: str | None = None
    method: str | None = None  # GET | POST
    params: dict[str, Any] = field(default_factory=dict)
    transform: str | None = None
    cache: CacheHint | None = None

    def to_dict(self) -> dict[str, Any]:
        d = _drop_none(
            {
                "type": self.type,
                "endpoint": self.endpoint,
                "method": self.method,
                "transform": self.transform,
            }
        )
        if self.params:
            d["params"] = self.params
        if self.cache is not None:
            d["cache"] = self.cache.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DataSource:
        cache = d.get("cache")
        hint = None
        if isinstance(cache, dict):
            hint = CacheHint(ttl=int(cache.get("ttl", 0)), key=str(cache.get("key", "")))
        return cls(
            type=d.get("type", "api"),
            endpoint=d.get("endpoint"),
            method=d.get("method"),
            params=d.get("params") or {},
            transform=d.get("transform"),
            cache=hint,
        )


@dataclass
class SectionContent:
    items: list[ContentItem] = field(default_factory=list)
    template: str | None = None  # Mustache, rendered per item
    data_source: DataSource | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"items": [i.to_dict() for i in self.items]}
        if self.template is not None:
            d["template"] = self.template
        if self.data_source is not None:
            d["dataSource"] = self.data_source.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SectionContent:
        source = d.get("dataSource")
        return cls(
            items=[ContentItem.from_dict(i) for i in d.get("items") or []],
            template=d.get("template"),
            data_source=DataSource.from_dict(source) if isinstance(source, dict) else None,
        )


@dataclass
class VisibilityRule:
    condition: str = "always"
    custom_rule: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none({"condition": self.condition, "customRule": self.custom_rule})

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> VisibilityRule:
        return cls(condition=d.get("condition", "always"), custom_rule=d.get("customRule"))


# ---------------------------------------------------------------------------
# Sections and configs
# ---------------------------------------------------------------------------


@dataclass
class LayoutSection:
    """
    One renderable unit. `type` selects the sub-renderer; `layout` is only an
    arrangement hint. `children` render after the section's own content.
    """

    id: str
    type: str
    title: str | None = None
    subtitle: str | None = None
    content: SectionContent | None = None
    layout: str | None = None
    columns: int | None = None
    spacing: str | None = None
    visibility: VisibilityRule | None = None
    children: list[LayoutSection] = field(default_factory=list)

    @property
    def items(self) -> list[ContentItem]:
        if self.content is None:
            return []
        return self.content.items

    @property
    def effective_columns(self) -> int:
        if not self.columns or self.columns < 1:
            return DEFAULT_COLUMNS
        return self.columns

    @property
    def effective_spacing(self) -> str:
        if self.spacing in SPACING_VALUES:
            return self.spacing
        return DEFAULT_SPACING

    def to_dict(self) -> dict[str, Any]:
        d = _drop_none(
            {
                "id": self.id,
                "type": self.type,
                "title": self.title,
                "subtitle": self.subtitle,
                "layout": self.layout,
                "columns": self.columns,
                "spacing": self.spacing,
            }
        )
        if self.content is not None:
            d["content"] = self.content.to_dict()
        if self.visibility is not None:
            d["visibility"] = self.visibility.to_dict()
        if self.children:
            d["children"] = [c.to_dict() for c in self.children]
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> LayoutSection:
        content = d.get("content")
        visibility = d.get("visibility")
        columns = d.get("columns")
        return cls(
            id=str(d.get("id", "")),
            type=str(d.get("type", "")),
            title=d.get("title"),
            subtitle=d.get("subtitle"),
            content=SectionContent.from_dict(content) if isinstance(content, dict) else None,
            layout=d.get("layout"),
            columns=int(columns) if isinstance(columns, (int, float)) else None,
            spacing=d.get("spacing"),
            visibility=VisibilityRule.from_dict(visibility) if isinstance(visibility, dict) else None,
            children=[cls.from_dict(c) for c in d.get("children") or []],
        )


@dataclass
class LayoutConfig:
    """
    The root document for one screen. Produced wholesale by the serving layer
    per request or mode switch; the renderer never mutates it.
    """

    mode: str
    title: str
    description: str | None = None
    sections: list[LayoutSection] = field(default_factory=list)
    actions: list[LayoutAction] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    settings: dict[str, Any] | None = None

    @property
    def floating_actions(self) -> list[LayoutAction]:
        return [a for a in self.actions if a.position == "floating"]

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "mode": self.mode,
            "title": self.title,
            "sections": [s.to_dict() for s in self.sections],
        }
        if self.description is not None:
            d["description"] = self.description
        if self.actions:
            d["actions"] = [a.to_dict() for a in self.actions]
        if self.metadata:
            d["metadata"] = self.metadata
        if self.settings is not None:
            d[MODE_SETTINGS_KEYS.get(self.mode, "settings")] = self.settings
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> LayoutConfig:
        mode = d.get("mode", "itinerary")
        return cls(
            mode=mode,
            title=str(d.get("title", "")),
            description=d.get("description"),
            sections=[LayoutSection.from_dict(s) for s in d.get("sections") or []],
            actions=[LayoutAction.from_dict(a) for a in d.get("actions") or []],
            metadata=d.get("metadata") or {},
            settings=d.get(MODE_SETTINGS_KEYS.get(mode, "settings")),
        )


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------


@dataclass
class SDUIError:
    code: str
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {"code": self.code, "message": self.message, "field": self.field, "details": self.details}
        )


@dataclass
class SDUIResponse:
    """What the layout endpoint returns: config plus the request-scoped data bag."""

    config: LayoutConfig
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[SDUIError] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"config": self.config.to_dict(), "data": self.data}
        if self.errors:
            d["errors"] = [e.to_dict() for e in self.errors]
        if self.metadata:
            d["metadata"] = self.metadata
        return d


# ---------------------------------------------------------------------------
# Render options
# ---------------------------------------------------------------------------


@dataclass
class RenderOptions:
    """Options controlling how a layout is rendered."""

    channel: str = "html"  # "html" or "text"
    authenticated: bool = False
    custom_rule: Callable[[str], bool] | None = None
    max_depth: int = DEFAULT_MAX_DEPTH
    include_styles: bool = True
    action_endpoint: str | None = None  # when set, buttons POST here
