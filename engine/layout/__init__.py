"""
Waypoint Layout — the server-driven UI rendering core.

Components:
  types       — LayoutConfig / LayoutSection / ContentItem content model
  builder     — LayoutBuilder and structural validation
  visibility  — section visibility rules
  sections    — per-type section dispatcher
  renderer    — (config, data, loading, error) → HTML  (pure, deterministic)
  actions     — the single callback boundary back to the host
"""

from engine.layout.actions import RenderedAction, dispatch_action
from engine.layout.builder import LayoutBuilder, LayoutValidationError, validate_layout
from engine.layout.renderer import RenderResult, render, render_section, render_with_actions
from engine.layout.types import (
    ContentAction,
    ContentItem,
    DataSource,
    LayoutAction,
    LayoutConfig,
    LayoutSection,
    RenderOptions,
    SDUIError,
    SDUIResponse,
    SectionContent,
    VisibilityRule,
)
from engine.layout.visibility import is_visible

__all__ = [
    "render",
    "render_section",
    "render_with_actions",
    "RenderResult",
    "RenderedAction",
    "dispatch_action",
    "is_visible",
    "LayoutBuilder",
    "LayoutValidationError",
    "validate_layout",
    "LayoutConfig",
    "LayoutSection",
    "SectionContent",
    "ContentItem",
    "ContentAction",
    "LayoutAction",
    "DataSource",
    "VisibilityRule",
    "RenderOptions",
    "SDUIResponse",
    "SDUIError",
]
