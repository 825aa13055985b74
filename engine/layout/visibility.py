"""
Waypoint Layout — Visibility

Decides whether a section renders at all. The renderer never interprets a
custom rule string; it hands it to the caller's predicate.
A hidden section hides its whole subtree.
"""

from __future__ import annotations

import logging

from engine.layout.types import LayoutSection, RenderOptions

logger = logging.getLogger(__name__)


def is_visible(section: LayoutSection, options: RenderOptions) -> bool:
    """Evaluate a section's visibility rule against the caller's auth state."""
    rule = section.visibility
    if rule is None or rule.condition == "always":
        return True

    if rule.condition == "authenticated":
        return options.authenticated

    if rule.condition == "anonymous":
        return not options.authenticated

    if rule.condition == "custom":
        if options.custom_rule is None:
            return True
        try:
            return bool(options.custom_rule(rule.custom_rule or ""))
        except Exception:
            logger.exception("visibility: custom rule failed for section %s", section.id)
            return False

    logger.warning("visibility: unknown condition %r on section %s", rule.condition, section.id)
    return True
