"""
Waypoint Layout — Renderer

Pure function: (config, data?, loading?, error?, options?) → HTML string (or text string)
No IO. No fetching. Deterministic: same input → same output, always.

- loading and error are full-page takeovers; loading wins if both are set
- sections render in array order, each gated by its visibility rule
- children recurse up to options.max_depth, then get truncated
- a failure inside one section becomes a placeholder for that section only
- the action bar shows floating actions only; top/bottom placement is the page's concern
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from engine.layout.actions import RenderedAction
from engine.layout.sections import SELF_TITLED_TYPES, RenderPass, dispatch_section, escape
from engine.layout.types import SECTION_TYPES, LayoutConfig, LayoutSection, RenderOptions
from engine.layout.visibility import is_visible

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass
class RenderResult:
    """Rendered output plus every action button that made it into it."""

    html: str
    actions: list[RenderedAction] = field(default_factory=list)

    def find_action(self, action_id: str) -> RenderedAction | None:
        return next((a for a in self.actions if a.id == action_id), None)


def render(
    config: LayoutConfig,
    data: dict[str, Any] | None = None,
    loading: bool = False,
    error: str | None = None,
    options: RenderOptions | None = None,
) -> str:
    """
    Render a complete page for one LayoutConfig.
    Returns a UTF-8 HTML document, or plain text when options.channel == "text".
    Pure function. No side effects. No IO.
    """
    return render_with_actions(config, data, loading, error, options).html


def render_with_actions(
    config: LayoutConfig,
    data: dict[str, Any] | None = None,
    loading: bool = False,
    error: str | None = None,
    options: RenderOptions | None = None,
) -> RenderResult:
    """Same as render(), also returning the buttons that were emitted."""
    opts = options or RenderOptions()
    rp = RenderPass(options=opts, data=data or {})

    if opts.channel == "text":
        text = _render_text(config, rp, loading, error)
        return RenderResult(html=text, actions=rp.actions)

    return RenderResult(html=_render_html(config, rp, loading, error), actions=rp.actions)


def render_section(
    section: LayoutSection,
    data: dict[str, Any] | None = None,
    options: RenderOptions | None = None,
) -> str:
    """
    Render a single section and its children recursively.
    Returns an HTML fragment string (empty when the section is hidden).
    """
    rp = RenderPass(options=options or RenderOptions(), data=data or {})
    return _render_section(section, rp, depth=0)


# ---------------------------------------------------------------------------
# HTML rendering (primary channel)
# ---------------------------------------------------------------------------

BASE_CSS = """
*, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }
body {
  font-family: system-ui, -apple-system, "Segoe UI", sans-serif;
  background: #fafaf9;
  color: #1a1a1a;
  line-height: 1.5;
}
.sdui-page { min-height: 100vh; }
.sdui-section { max-width: 1120px; margin: 0 auto; padding: 24px 16px; }
.sdui-spacing--compact { padding-top: 8px; padding-bottom: 8px; }
.sdui-spacing--spacious { padding-top: 48px; padding-bottom: 48px; }
.sdui-layout--map { max-width: none; padding-left: 0; padding-right: 0; }
.sdui-section-title { font-size: 1.75rem; font-weight: 700; margin-bottom: 24px; }
.sdui-children { margin-top: 24px; padding-left: 16px; border-left: 2px solid rgba(0,0,0,0.06); }
.sdui-empty, .sdui-unknown p { color: #888; font-style: italic; }
.sdui-unknown, .sdui-section-error { padding: 16px; background: #f0f0ef; border-radius: 8px; }
.sdui-cards, .sdui-gallery, .sdui-stats, .sdui-recommendations { display: grid; }
.sdui-card, .sdui-recommendation, .sdui-hero-item, .sdui-stat {
  background: #fff;
  border: 1px solid rgba(0,0,0,0.1);
  border-radius: 8px;
  padding: 16px;
}
.sdui-card-image, .sdui-recommendation-image { width: 100%; height: 192px; object-fit: cover; border-radius: 6px; }
.sdui-card-header, .sdui-recommendation-header { display: flex; justify-content: space-between; gap: 8px; }
.sdui-badge {
  padding: 2px 8px;
  border-radius: 999px;
  background: rgba(45,55,72,0.1);
  font-size: 12px;
  font-weight: 600;
  white-space: nowrap;
}
.sdui-list { list-style: none; display: flex; flex-direction: column; gap: 8px; }
.sdui-list-row { display: flex; justify-content: space-between; padding: 12px 16px; border: 1px solid rgba(0,0,0,0.1); border-radius: 8px; }
.sdui-list--compact .sdui-list-row { padding: 8px 16px; }
.sdui-list--spacious .sdui-list-row { padding: 16px; }
.sdui-timeline { list-style: none; border-left: 2px solid #2d3748; padding-left: 16px; }
.sdui-timeline-entry { margin-bottom: 16px; position: relative; }
.sdui-timeline-marker { position: absolute; left: -23px; top: 6px; width: 12px; height: 12px; border-radius: 50%; background: #2d3748; }
.sdui-timeline-time { font-size: 12px; color: #666; }
.sdui-calendar { display: grid; grid-template-columns: repeat(7, minmax(0, 1fr)); gap: 4px; }
.sdui-calendar-day { min-height: 96px; padding: 6px; background: #fff; border: 1px solid rgba(0,0,0,0.08); }
.sdui-calendar-date { font-size: 12px; font-weight: 600; display: block; }
.sdui-calendar-weather { font-size: 11px; color: #666; }
.sdui-calendar-events { list-style: none; font-size: 12px; }
.sdui-map-markers { list-style: none; }
.sdui-form { display: flex; flex-direction: column; gap: 12px; max-width: 560px; }
.sdui-form-field { display: flex; flex-direction: column; gap: 4px; }
.sdui-gallery-item img, .sdui-gallery-placeholder { width: 100%; height: 160px; object-fit: cover; background: #eee; }
.sdui-stat-value { display: block; font-size: 1.75rem; font-weight: 700; }
.sdui-stat-label { font-size: 13px; color: #666; }
.sdui-alerts { display: flex; flex-direction: column; gap: 8px; }
.sdui-alert { padding: 12px 16px; border-left: 4px solid #3182ce; background: #ebf8ff; border-radius: 4px; }
.sdui-alert--warning { border-color: #dd6b20; background: #fffaf0; }
.sdui-alert--critical { border-color: #c53030; background: #fff5f5; }
.sdui-footer { font-size: 12px; color: #888; text-align: center; }
.sdui-item-actions { display: flex; gap: 8px; margin-top: 12px; }
.sdui-action { padding: 6px 12px; border-radius: 6px; border: 1px solid #2d3748; background: #fff; cursor: pointer; }
.sdui-action--primary { background: #2d3748; color: #fff; }
.sdui-action--tertiary { border-color: transparent; }
.sdui-action--destructive { border-color: #c53030; color: #c53030; }
.sdui-action-bar { position: fixed; right: 24px; bottom: 24px; display: flex; flex-direction: column; align-items: flex-end; gap: 8px; }
.sdui-action-bar .sdui-action { box-shadow: 0 4px 12px rgba(0,0,0,0.15); }
.sdui-loading, .sdui-error { min-height: 100vh; display: flex; align-items: center; justify-content: center; }
.sdui-spinner { width: 48px; height: 48px; border-radius: 50%; border: 3px solid #ddd; border-bottom-color: #2d3748; animation: sdui-spin 1s linear infinite; }
.sdui-error { flex-direction: column; background: #fff5f5; text-align: center; }
.sdui-error h2 { color: #c53030; margin-bottom: 8px; }
@keyframes sdui-spin { to { transform: rotate(360deg); } }
"""


def _render_html(config: LayoutConfig, rp: RenderPass, loading: bool, error: str | None) -> str:
    opts = rp.options
    parts: list[str] = []

    parts.append("<!DOCTYPE html>")
    parts.append('<html lang="en">')
    parts.append("<head>")
    parts.append('  <meta charset="utf-8">')
    parts.append('  <meta name="viewport" content="width=device-width, initial-scale=1">')
    parts.append(f"  <title>{escape(config.title or 'Waypoint')}</title>")
    if config.description:
        parts.append(f'  <meta name="description" content="{escape(config.description)}">')
    if opts.include_styles:
        parts.append("  <style>")
        parts.append(BASE_CSS)
        parts.append("  </style>")
    parts.append("</head>")
    parts.append("<body>")
    parts.append(f'  <main class="sdui-page sdui-mode--{escape(config.mode)}">')

    if loading:
        parts.append(
            '    <div class="sdui-loading" role="status" aria-busy="true">'
            '<div class="sdui-spinner"></div><span class="sdui-visually-hidden">Loading…</span></div>'
        )
    elif error:
        parts.append(
            f'    <div class="sdui-error" role="alert"><h2>Error</h2><p>{escape(error)}</p></div>'
        )
    else:
        body = _render_sections(config.sections, rp, depth=0)
        if body:
            parts.append(body)
        else:
            parts.append('    <p class="sdui-empty">Nothing to show yet.</p>')
        bar = _render_action_bar(config, rp)
        if bar:
            parts.append(bar)

    parts.append("  </main>")

    if opts.action_endpoint and rp.actions:
        parts.append(_render_action_script(opts.action_endpoint))

    parts.append("</body>")
    parts.append("</html>")

    return "\n".join(parts)


def _render_sections(sections: list[LayoutSection], rp: RenderPass, depth: int) -> str:
    rendered = [_render_section(s, rp, depth) for s in sections]
    return "\n".join(r for r in rendered if r)


def _render_section(section: LayoutSection, rp: RenderPass, depth: int) -> str:
    """Render one section wrapper, its content, and its children recursively."""
    if not is_visible(section, rp.options):
        return ""

    known = section.type in SECTION_TYPES
    type_class = section.type if known else "unknown"
    classes = [
        "sdui-section",
        f"sdui-section--{type_class}",
        f"sdui-spacing--{section.effective_spacing}",
    ]
    if section.layout:
        classes.append(f"sdui-layout--{escape(section.layout)}")

    parts = [
        f'<section id="{escape(section.id)}" class="{" ".join(classes)}" data-section-type="{escape(section.type)}">'
    ]

    if section.title and section.type not in SELF_TITLED_TYPES:
        parts.append(f'<h2 class="sdui-section-title">{escape(section.title)}</h2>')

    parts.append(_dispatch_isolated(section, rp))

    if section.children:
        if depth + 1 > rp.options.max_depth:
            logger.warning(
                "renderer: truncated %d children of section %s at depth %d",
                len(section.children),
                section.id,
                depth + 1,
            )
            parts.append(f"<!-- {len(section.children)} nested sections truncated at depth {depth + 1} -->")
        else:
            children = _render_sections(section.children, rp, depth + 1)
            if children:
                parts.append(f'<div class="sdui-children">{children}</div>')

    parts.append("</section>")
    return "".join(parts)


def _dispatch_isolated(section: LayoutSection, rp: RenderPass) -> str:
    """Dispatch a section; a failure becomes a placeholder instead of aborting the page."""
    mark = len(rp.actions)
    try:
        return dispatch_section(section, rp)
    except Exception:
        logger.exception("renderer: section %s (%s) failed to render", section.id, section.type)
        del rp.actions[mark:]
        return '<div class="sdui-section-error"><p>This section could not be displayed.</p></div>'


def _render_action_bar(config: LayoutConfig, rp: RenderPass) -> str:
    floating = config.floating_actions
    if not floating:
        return ""
    buttons = "".join(rp.button(a, "bar") for a in floating)
    return f'    <div class="sdui-action-bar">{buttons}</div>'


def _render_action_script(endpoint: str) -> str:
    target = json.dumps(endpoint)
    return (
        "  <script>\n"
        '  document.addEventListener("click", function (e) {\n'
        '    var b = e.target.closest("[data-action-id]");\n'
        "    if (!b) return;\n"
        f"    fetch({target}, {{\n"
        '      method: "POST",\n'
        '      headers: {"Content-Type": "application/json"},\n'
        "      body: JSON.stringify({action_id: b.dataset.actionId})\n"
        "    }).then(function (r) { return r.json(); }).then(function (res) {\n"
        "      if (res.redirect) { window.location.href = res.redirect; } else { window.location.reload(); }\n"
        "    });\n"
        "  });\n"
        "  </script>"
    )


# ---------------------------------------------------------------------------
# Text rendering (secondary channel)
# ---------------------------------------------------------------------------


def _render_text(config: LayoutConfig, rp: RenderPass, loading: bool, error: str | None) -> str:
    """Render a layout as plain text (terminal, SMS, logs)."""
    if loading:
        return "Loading…"
    if error:
        return f"Error: {error}"

    parts: list[str] = []
    if config.title:
        parts.append(config.title)
        parts.append("=" * len(config.title))
        parts.append("")

    for section in config.sections:
        _section_text(section, rp, 0, parts)

    floating = config.floating_actions
    if floating:
        for action in floating:
            rp.actions.append(
                RenderedAction(id=action.id, action=action.action, payload=action.payload, origin="bar")
            )
        parts.append("Actions: " + " | ".join(f"[{a.label}]" for a in floating))

    return "\n".join(parts).rstrip()


def _section_text(section: LayoutSection, rp: RenderPass, depth: int, parts: list[str]) -> None:
    if not is_visible(section, rp.options):
        return
    indent = "  " * depth
    if section.type not in SECTION_TYPES:
        parts.append(f"{indent}[Unknown section type: {section.type}]")
    elif section.title:
        parts.append(f"{indent}{section.title}")
        parts.append(f"{indent}{'-' * len(section.title)}")

    mark = len(rp.actions)
    try:
        parts.extend(_section_body_text(section, rp, indent))
    except Exception:
        logger.exception("renderer: section %s (%s) failed to render as text", section.id, section.type)
        del rp.actions[mark:]
        parts.append(f"{indent}[This section could not be displayed]")
    parts.append("")

    if section.children:
        if depth + 1 > rp.options.max_depth:
            logger.warning(
                "renderer: truncated %d children of section %s at depth %d",
                len(section.children),
                section.id,
                depth + 1,
            )
            parts.append(f"{indent}({len(section.children)} nested sections truncated)")
            parts.append("")
        else:
            for child in section.children:
                _section_text(child, rp, depth + 1, parts)


def _section_body_text(section: LayoutSection, rp: RenderPass, indent: str) -> list[str]:
    lines: list[str] = []
    for item in section.items:
        line = f"{indent}- {item.title}"
        if item.subtitle:
            line += f" — {item.subtitle}"
        if item.badge:
            line += f" [{item.badge}]"
        lines.append(line)
        for action in item.actions:
            rp.actions.append(
                RenderedAction(
                    id=action.id, action=action.action, payload=action.payload, origin=f"section:{section.id}"
                )
            )

    if section.type == "calendar":
        calendar = rp.data.get("calendar")
        events = calendar.get("events") or [] if isinstance(calendar, dict) else []
        for event in events:
            lines.append(f"{indent}- {str(event.get('date', ''))[:10]}: {event.get('title', '')}")
    return lines
