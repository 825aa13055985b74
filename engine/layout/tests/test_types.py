"""
Layout Types -- wire format parsing.

from_dict() must accept the camelCase JSON the API emits, fill defaults for
anything missing, and keep unknown section types verbatim.
"""

from engine.layout.types import (
    DEFAULT_COLUMNS,
    LayoutConfig,
    LayoutSection,
    SDUIError,
    SDUIResponse,
)

WIRE = {
    "mode": "guide",
    "title": "Lisbon Guide",
    "description": "Three days in Lisbon",
    "sections": [
        {
            "id": "hero",
            "type": "hero",
            "title": "Lisbon",
            "content": {
                "items": [{"id": "alfama", "title": "Alfama", "metadata": {"rating": 4.8}}],
                "template": "<b>{{title}}</b>",
                "dataSource": {"type": "api", "endpoint": "/api/recommendations/activities", "cache": {"ttl": 60, "key": "lx"}},
            },
            "visibility": {"condition": "custom", "customRule": "has_trip"},
            "children": [{"id": "nested", "type": "carousel"}],
        }
    ],
    "actions": [{"id": "save", "label": "Save", "type": "primary", "action": "save_trip", "position": "floating"}],
    "guideSettings": {"showMap": False},
}


def test_parse_wire_config():
    config = LayoutConfig.from_dict(WIRE)
    section = config.sections[0]
    assert config.description == "Three days in Lisbon"
    assert section.items[0].metadata == {"rating": 4.8}
    assert section.content.template == "<b>{{title}}</b>"
    assert section.content.data_source.cache.ttl == 60
    assert section.visibility.custom_rule == "has_trip"
    assert section.children[0].type == "carousel"
    assert config.actions[0].type == "primary"
    assert config.settings == {"showMap": False}


def test_wire_format_is_stable():
    assert LayoutConfig.from_dict(WIRE).to_dict() == WIRE


def test_missing_fields_take_defaults():
    section = LayoutSection.from_dict({"id": "s", "type": "cards"})
    assert section.items == []
    assert section.effective_columns == DEFAULT_COLUMNS
    assert section.effective_spacing == "normal"
    assert section.children == []


def test_malformed_nested_objects_are_ignored():
    section = LayoutSection.from_dict(
        {"id": "s", "type": "list", "content": "oops", "visibility": ["authenticated"]}
    )
    assert section.content is None
    assert section.visibility is None
    assert section.items == []

    with_source = LayoutSection.from_dict(
        {"id": "s", "type": "list", "content": {"dataSource": {"type": "api", "cache": 60}}}
    )
    assert with_source.content.data_source.type == "api"
    assert with_source.content.data_source.cache is None

    bad_source = LayoutSection.from_dict({"id": "s", "type": "list", "content": {"dataSource": "feed"}})
    assert bad_source.content.data_source is None


def test_unknown_spacing_falls_back():
    assert LayoutSection(id="s", type="list", spacing="roomy").effective_spacing == "normal"


def test_floating_actions():
    config = LayoutConfig.from_dict(WIRE)
    assert [a.id for a in config.floating_actions] == ["save"]


def test_response_envelope():
    config = LayoutConfig(mode="booking", title="Book")
    response = SDUIResponse(config=config, data={"bookings": []}, errors=[SDUIError(code="weather", message="down")])
    d = response.to_dict()
    assert d["config"] == {"mode": "booking", "title": "Book", "sections": []}
    assert d["data"] == {"bookings": []}
    assert d["errors"] == [{"code": "weather", "message": "down"}]
