"""
Waypoint Layout — Action boundary

Every button the renderer emits is recorded as a RenderedAction. The host
fires one through dispatch_action(), which is the only side-effect channel
out of the rendering core. Commands and payloads pass through untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

OnAction = Callable[[str, "dict[str, Any] | None"], None]


@dataclass(frozen=True)
class RenderedAction:
    """A button that actually made it into the output."""

    id: str
    action: str
    payload: dict[str, Any] | None
    origin: str  # "bar" or "section:<section_id>"


def dispatch_action(
    actions: Iterable[RenderedAction],
    action_id: str,
    on_action: OnAction,
) -> RenderedAction | None:
    """
    Fire the first rendered action with this id.

    Calls on_action(action.id, action.payload) synchronously and returns the
    binding. Returns None without calling anything when no rendered action
    has the id (e.g. a top-positioned layout action, or one in a hidden section).
    """
    for rendered in actions:
        if rendered.id == action_id:
            on_action(rendered.id, rendered.payload)
            return rendered
    return None
