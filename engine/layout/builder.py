"""
Waypoint Layout — Builder and structural validation

The serving layer assembles a LayoutConfig through LayoutBuilder, which
validates before handing it over. Validation is structural (well-formed?)
not semantic: it never asks whether a section will have data.
"""

from __future__ import annotations

from typing import Any

from engine.layout.types import (
    ACTION_POSITIONS,
    CONTENT_ACTION_TYPES,
    LAYOUT_ACTION_TYPES,
    LAYOUT_MODES,
    SECTION_LAYOUTS,
    SECTION_TYPES,
    SPACING_VALUES,
    VISIBILITY_CONDITIONS,
    LayoutAction,
    LayoutConfig,
    LayoutSection,
)

WARNING_PREFIX = "warning: "


class LayoutValidationError(ValueError):
    """Raised by LayoutBuilder.build() when the config has structural errors."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_layout(config: LayoutConfig) -> list[str]:
    """
    Validate a layout's structure.
    Returns a list of messages. Entries prefixed "warning: " are advisory
    (the renderer copes with them); anything else is an error.
    """
    errors: list[str] = []

    if config.mode not in LAYOUT_MODES:
        errors.append(f"Unknown layout mode: {config.mode}")

    _validate_sections(config.sections, "sections", errors)

    seen: set[str] = set()
    for i, action in enumerate(config.actions):
        where = f"actions[{i}]"
        _validate_action_fields(action.id, action.label, action.action, where, errors)
        if action.id in seen:
            errors.append(f"{where}: duplicate action id '{action.id}'")
        seen.add(action.id)
        if action.type not in LAYOUT_ACTION_TYPES:
            errors.append(f"{where}: invalid action type '{action.type}'")
        if action.position is not None and action.position not in ACTION_POSITIONS:
            errors.append(f"{where}: invalid position '{action.position}'")

    return errors


def blocking_errors(messages: list[str]) -> list[str]:
    return [m for m in messages if not m.startswith(WARNING_PREFIX)]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class LayoutBuilder:
    """
    Chainable construction of a LayoutConfig.

        config = (
            LayoutBuilder("itinerary", "Paris Trip")
            .add_section(LayoutSection(id="s1", type="cards"))
            .add_action(LayoutAction(id="save", label="Save", action="save_trip", position="floating"))
            .build()
        )
    """

    def __init__(self, mode: str, title: str, description: str | None = None):
        self.mode = mode
        self.title = title
        self.description = description
        self.sections: list[LayoutSection] = []
        self.actions: list[LayoutAction] = []
        self.metadata: dict[str, Any] = {}
        self.settings: dict[str, Any] | None = None

    def add_section(self, section: LayoutSection) -> LayoutBuilder:
        self.sections.append(section)
        return self

    def add_action(self, action: LayoutAction) -> LayoutBuilder:
        self.actions.append(action)
        return self

    def with_metadata(self, **kwargs: Any) -> LayoutBuilder:
        self.metadata.update(kwargs)
        return self

    def with_settings(self, settings: dict[str, Any]) -> LayoutBuilder:
        self.settings = settings
        return self

    def build(self) -> LayoutConfig:
        config = LayoutConfig(
            mode=self.mode,
            title=self.title,
            description=self.description,
            sections=list(self.sections),
            actions=list(self.actions),
            metadata=dict(self.metadata),
            settings=self.settings,
        )
        errors = blocking_errors(validate_layout(config))
        if errors:
            raise LayoutValidationError(errors)
        return config


# ---------------------------------------------------------------------------
# Per-level validators
# ---------------------------------------------------------------------------


def _validate_sections(sections: list[LayoutSection], path: str, errors: list[str]) -> None:
    # ids only need to be unique among siblings
    seen: set[str] = set()
    for i, section in enumerate(sections):
        where = f"{path}[{i}]"
        if not section.id:
            errors.append(f"{where}: section requires 'id'")
        elif section.id in seen:
            errors.append(f"{where}: duplicate sibling id '{section.id}'")
        seen.add(section.id)

        if section.type not in SECTION_TYPES:
            errors.append(f"{WARNING_PREFIX}{where}: unknown section type '{section.type}' renders as a placeholder")
        if section.layout is not None and section.layout not in SECTION_LAYOUTS:
            errors.append(f"{WARNING_PREFIX}{where}: unknown layout hint '{section.layout}'")
        if section.spacing is not None and section.spacing not in SPACING_VALUES:
            errors.append(f"{WARNING_PREFIX}{where}: unknown spacing '{section.spacing}'")
        if section.columns is not None and section.columns < 1:
            errors.append(f"{where}: columns must be >= 1")
        if section.visibility is not None and section.visibility.condition not in VISIBILITY_CONDITIONS:
            errors.append(f"{where}: invalid visibility condition '{section.visibility.condition}'")

        item_ids: set[str] = set()
        for j, item in enumerate(section.items):
            item_where = f"{where}.items[{j}]"
            if not item.id:
                errors.append(f"{item_where}: item requires 'id'")
            elif item.id in item_ids:
                errors.append(f"{item_where}: duplicate item id '{item.id}'")
            item_ids.add(item.id)
            for k, action in enumerate(item.actions):
                action_where = f"{item_where}.actions[{k}]"
                _validate_action_fields(action.id, action.label, action.action, action_where, errors)
                if action.type not in CONTENT_ACTION_TYPES:
                    errors.append(f"{action_where}: invalid action type '{action.type}'")

        if section.children:
            _validate_sections(section.children, f"{where}.children", errors)


def _validate_action_fields(action_id: str, label: str, command: str, where: str, errors: list[str]) -> None:
    if not action_id:
        errors.append(f"{where}: action requires 'id'")
    if not label:
        errors.append(f"{where}: action requires 'label'")
    if not command:
        errors.append(f"{where}: action requires 'action'")
