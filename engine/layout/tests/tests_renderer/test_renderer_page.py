"""
Layout Renderer -- Page Composition Tests

Whole-page behaviour of render() / render_with_actions():
  - loading and error are exclusive takeovers (loading wins)
  - sections render in array order, children after their parent's content
  - nesting is truncated at max_depth instead of recursing forever
  - the action bar carries floating actions only
  - one failing section never takes the page down
  - same input, same output
"""

import pytest

from engine.layout.renderer import render, render_with_actions
from engine.layout.sections import SECTION_RENDERERS
from engine.layout.types import (
    ContentAction,
    ContentItem,
    LayoutAction,
    LayoutConfig,
    LayoutSection,
    RenderOptions,
    SectionContent,
)


def assert_contains(html, *fragments):
    for fragment in fragments:
        assert fragment in html, f"Expected to find {fragment!r} in rendered HTML.\nGot:\n{html[-3000:]}"


def assert_not_contains(html, *fragments):
    for fragment in fragments:
        assert fragment not in html, f"Did NOT expect to find {fragment!r} in rendered HTML."


def cards(section_id, *titles, **kwargs):
    items = [ContentItem(id=f"{section_id}-{n}", title=t) for n, t in enumerate(titles)]
    return LayoutSection(id=section_id, type="cards", content=SectionContent(items=items), **kwargs)


def nested(depth):
    """A chain of list sections `depth` levels deep."""
    section = LayoutSection(id=f"level{depth}", type="list", title=f"Level {depth}")
    for level in range(depth - 1, -1, -1):
        section = LayoutSection(id=f"level{level}", type="list", title=f"Level {level}", children=[section])
    return section


# ============================================================================
# Document shell
# ============================================================================


class TestDocument:
    def test_full_document(self, paris_config):
        html = render(paris_config)
        assert html.startswith("<!DOCTYPE html>")
        assert_contains(html, "<title>Paris Trip</title>", "sdui-mode--itinerary", "<style>", "</html>")

    def test_styles_can_be_omitted(self, paris_config):
        html = render(paris_config, options=RenderOptions(include_styles=False))
        assert_not_contains(html, "<style>")

    def test_description_meta(self):
        config = LayoutConfig(mode="guide", title="Guide", description="Top picks & more")
        assert_contains(render(config), 'content="Top picks &amp; more"')

    def test_no_sections_renders_empty_page(self):
        html = render(LayoutConfig(mode="guide", title="Empty"))
        assert_contains(html, "Nothing to show yet.")
        assert_not_contains(html, "<section")

    def test_paris_example(self, paris_config):
        html = render(paris_config)
        assert_contains(html, "Eiffel Tower", 'data-action-id="book_i1"', ">Save</button>")


# ============================================================================
# Takeovers
# ============================================================================


class TestTakeovers:
    def test_loading_replaces_sections(self, paris_config):
        html = render(paris_config, loading=True)
        assert_contains(html, "sdui-loading", 'aria-busy="true"')
        assert_not_contains(html, "<section", "sdui-action-bar", "Eiffel Tower")

    def test_error_replaces_sections(self, paris_config):
        html = render(paris_config, error="Trip not found.")
        assert_contains(html, 'class="sdui-error"', "<p>Trip not found.</p>")
        assert_not_contains(html, "<section", "sdui-action-bar", "Eiffel Tower")

    def test_loading_wins_over_error(self, paris_config):
        html = render(paris_config, loading=True, error="boom")
        assert_contains(html, "sdui-loading")
        assert_not_contains(html, "boom", "sdui-error")

    def test_error_message_is_escaped(self, paris_config):
        html = render(paris_config, error="<img src=x onerror=alert(1)>")
        assert_contains(html, "&lt;img src=x onerror=alert(1)&gt;")

    def test_takeover_emits_no_actions(self, paris_config):
        assert render_with_actions(paris_config, loading=True).actions == []
        assert render_with_actions(paris_config, error="x").actions == []

    def test_empty_error_string_is_not_a_takeover(self, paris_config):
        html = render(paris_config, error="")
        assert_contains(html, "Eiffel Tower")


# ============================================================================
# Ordering and nesting
# ============================================================================


class TestOrdering:
    def test_sections_in_array_order(self):
        config = LayoutConfig(
            mode="guide",
            title="Order",
            sections=[cards("c", "Charlie"), cards("a", "Alpha"), cards("b", "Bravo")],
        )
        html = render(config)
        assert html.index("Charlie") < html.index("Alpha") < html.index("Bravo")

    def test_children_follow_parent_content(self):
        parent = cards("parent", "Parent card", children=[cards("child", "Child card")])
        html = render(LayoutConfig(mode="guide", title="Nest", sections=[parent, cards("next", "Sibling")]))
        assert_contains(html, '<div class="sdui-children">')
        assert html.index("Parent card") < html.index("Child card") < html.index("Sibling")


class TestDepthLimit:
    def test_nesting_within_limit_renders_everything(self):
        config = LayoutConfig(mode="guide", title="Deep", sections=[nested(3)])
        html = render(config, options=RenderOptions(max_depth=3))
        assert_contains(html, "Level 3")
        assert_not_contains(html, "truncated")

    def test_nesting_past_limit_is_truncated(self):
        config = LayoutConfig(mode="guide", title="Deep", sections=[nested(5)])
        html = render(config, options=RenderOptions(max_depth=2))
        assert_contains(html, "Level 2", "<!-- 1 nested sections truncated at depth 3 -->")
        assert_not_contains(html, "Level 3", "Level 4")

    def test_default_limit_stops_very_deep_trees(self):
        config = LayoutConfig(mode="guide", title="Deep", sections=[nested(40)])
        html = render(config)
        assert_contains(html, "Level 8", "truncated at depth 9")
        assert_not_contains(html, "Level 9<")


# ============================================================================
# Action bar
# ============================================================================


class TestActionBar:
    def test_only_floating_actions(self):
        config = LayoutConfig(
            mode="itinerary",
            title="Bar",
            sections=[cards("s", "One")],
            actions=[
                LayoutAction(id="a", label="Share", action="share_trip", position="top"),
                LayoutAction(id="b", label="Add", action="add_activity", position="floating"),
                LayoutAction(id="c", label="Print", action="print", position="bottom"),
                LayoutAction(id="d", label="Nowhere", action="noop"),
            ],
        )
        result = render_with_actions(config)
        assert_contains(result.html, 'class="sdui-action-bar"', 'data-action-id="b"')
        assert_not_contains(result.html, 'data-action-id="a"', 'data-action-id="c"', 'data-action-id="d"')
        assert [a.id for a in result.actions] == ["b"]
        assert result.actions[0].origin == "bar"

    def test_no_bar_without_floating_actions(self):
        config = LayoutConfig(
            mode="itinerary",
            title="Bar",
            actions=[LayoutAction(id="a", label="Share", action="share_trip", position="top")],
        )
        assert_not_contains(render(config), 'class="sdui-action-bar"')

    def test_floating_actions_keep_order(self):
        config = LayoutConfig(
            mode="itinerary",
            title="Bar",
            actions=[
                LayoutAction(id="second", label="Second", action="x", position="floating"),
                LayoutAction(id="first", label="First", action="y", position="floating"),
            ],
        )
        html = render(config)
        assert html.index('data-action-id="second"') < html.index('data-action-id="first"')

    def test_action_script_only_with_endpoint(self, paris_config):
        assert_not_contains(render(paris_config), "<script>")
        html = render(paris_config, options=RenderOptions(action_endpoint="/api/layouts/itinerary/actions"))
        assert_contains(html, "<script>", '"/api/layouts/itinerary/actions"')


# ============================================================================
# Failure isolation
# ============================================================================


class TestSectionIsolation:
    def test_failing_section_becomes_placeholder(self, monkeypatch):
        def explode(view):
            view.rp.button(ContentAction(id="ghost", label="Ghost", action="x"), view.origin)
            raise RuntimeError("bad data")

        monkeypatch.setitem(SECTION_RENDERERS, "stats", explode)
        config = LayoutConfig(
            mode="guide",
            title="Isolation",
            sections=[
                cards("before", "Before"),
                LayoutSection(id="broken", type="stats", title="Broken"),
                cards("after", "After"),
            ],
        )
        result = render_with_actions(config)
        assert_contains(result.html, "Before", "After", "sdui-section-error", "Broken")
        assert result.find_action("ghost") is None


# ============================================================================
# Determinism
# ============================================================================


class TestDeterminism:
    def test_same_input_same_output(self, paris_config):
        data = {"map": {"markers": [{"lat": 1, "lon": 2, "label": "X"}]}}
        assert render(paris_config, data) == render(paris_config, data)

    def test_payload_key_order_does_not_matter(self):
        def config(payload):
            return LayoutConfig(
                mode="itinerary",
                title="T",
                actions=[LayoutAction(id="s", label="S", action="save_trip", payload=payload, position="floating")],
            )

        assert render(config({"a": 1, "b": 2})) == render(config({"b": 2, "a": 1}))

    def test_render_does_not_mutate_config(self, paris_config):
        before = paris_config.to_dict()
        render(paris_config, {"calendar": {}})
        assert paris_config.to_dict() == before


@pytest.mark.parametrize("mode", ["calendar", "guide", "itinerary", "booking"])
def test_mode_class(mode):
    assert_contains(render(LayoutConfig(mode=mode, title="M")), f"sdui-mode--{mode}")
