"""Tests for DualModeRenderer in preview and marker-emission modes."""
from __future__ import annotations

import logging

import pytest

from handlebarize.components import is_handlebars_build
from handlebarize.core.compiler.helpers import Each, Else, If, Provider, Val
from handlebarize.core.compiler.markers import MarkerRegistry
from handlebarize.core.compiler.renderer import (
    DualModeRenderer,
    RenderContext,
    RenderMode,
    relative_item_path,
    split_else,
)
from handlebarize.core.markup.elements import fragment, h, raw


@pytest.fixture
def preview() -> DualModeRenderer:
    return DualModeRenderer(RenderMode.PREVIEW)


@pytest.fixture
def markers() -> DualModeRenderer:
    return DualModeRenderer(RenderMode.MARKERS)


def Card(title, children=None):
    return h("div", {"class_name": "card"}, h("h2", None, title), children)


# =============================================================================
# Mode selection
# =============================================================================


class TestRenderMode:
    @pytest.mark.parametrize(
        ("environ", "expected"),
        [
            ({"IS_HANDLEBARS_BUILD": "true"}, RenderMode.MARKERS),
            ({"IS_HANDLEBARS_BUILD": " TRUE "}, RenderMode.MARKERS),
            ({"IS_HANDLEBARS_BUILD": "1"}, RenderMode.PREVIEW),
            ({}, RenderMode.PREVIEW),
        ],
    )
    def test_from_env(self, environ, expected) -> None:
        assert RenderMode.from_env(environ) is expected

    def test_is_handlebars_build_reads_process_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert is_handlebars_build() is False
        monkeypatch.setenv("IS_HANDLEBARS_BUILD", "true")
        assert is_handlebars_build() is True


# =============================================================================
# Plain markup
# =============================================================================


class TestMarkup:
    """Node rendering shared by both modes."""

    def test_text_is_escaped(self, preview: DualModeRenderer) -> None:
        assert preview.render(h("p", None, "a < b & 'c'")) == "<p>a &lt; b &amp; &#x27;c&#x27;</p>"

    def test_raw_markup_is_not_escaped(self, preview: DualModeRenderer) -> None:
        assert preview.render(h("td", None, raw("&nbsp;"))) == "<td>&nbsp;</td>"

    def test_attributes_and_void_elements(self, preview: DualModeRenderer) -> None:
        node = h("p", {"class_name": "lead", "style": {"fontSize": "14px"}}, "a", h("br"), "b")
        assert preview.render(node) == '<p class="lead" style="font-size:14px">a<br/>b</p>'

    def test_none_booleans_and_nested_lists_in_children(self, preview: DualModeRenderer) -> None:
        node = h("p", None, None, False, ["a", ["b", True]], 3)
        assert preview.render(node) == "<p>ab3</p>"

    def test_function_components_receive_children(self, preview: DualModeRenderer) -> None:
        assert preview.render(h(Card, {"title": "T"}, "body")) == '<div class="card"><h2>T</h2>body</div>'

    def test_fragment(self, markers: DualModeRenderer) -> None:
        assert markers.render(fragment(h("i", None, "a"), "b")) == "<i>a</i>b"

    def test_inner_html(self, preview: DualModeRenderer) -> None:
        node = h("div", {"dangerously_set_inner_html": {"__html": "<b>x</b>"}}, "ignored")
        assert preview.render(node) == "<div><b>x</b></div>"

    def test_mapping_child_is_rejected(self, preview: DualModeRenderer) -> None:
        with pytest.raises(TypeError):
            preview.render(h("p", None, {"a": 1}))

    def test_callable_outside_each_is_rejected(self, preview: DualModeRenderer) -> None:
        with pytest.raises(TypeError):
            preview.render(h("p", None, lambda: "x"))


# =============================================================================
# Preview mode
# =============================================================================


class TestPreviewConditionals:
    """If/Else evaluated against the data context."""

    def test_true_branch(self, preview: DualModeRenderer) -> None:
        node = Provider({"user": {"vip": True}}, If("user.vip", "VIP", Else("Member")))
        assert preview.render(node) == "VIP"

    def test_false_branch(self, preview: DualModeRenderer) -> None:
        node = Provider({"user": {"vip": False}}, If("user.vip", "VIP", Else("Member")))
        assert preview.render(node) == "Member"

    def test_false_without_else_renders_nothing(self, preview: DualModeRenderer) -> None:
        assert preview.render(Provider({}, If("missing", "X"))) == ""

    def test_content_after_else_is_part_of_true_branch(self, preview: DualModeRenderer) -> None:
        node = Provider({"a": 1}, If("a", "A", Else("N"), "B"))
        assert preview.render(node) == "AB"

    def test_no_data_shows_true_branch(self, preview: DualModeRenderer) -> None:
        assert preview.render(If("anything", "A", Else("B"))) == "A"

    def test_conjunction_and_negation(self, preview: DualModeRenderer) -> None:
        data = {"user": {"vip": True, "banned": False}}
        assert preview.render(Provider(data, If("user.vip && !user.banned", "ok"))) == "ok"


class TestPreviewLoops:
    """Each expanded once per element."""

    def test_render_prop_receives_item_and_index(self, preview: DualModeRenderer) -> None:
        data = {"items": [{"sku": "A"}, {"sku": "B"}]}
        node = Provider(data, Each("items", lambda item, i: h("li", None, f"{i}:", item["sku"])))
        assert preview.render(node) == "<li>0:A</li><li>1:B</li>"

    def test_val_resolves_relative_to_item(self, preview: DualModeRenderer) -> None:
        data = {"items": [{"sku": "A"}, {"sku": "B"}]}
        assert preview.render(Provider(data, Each("items", h("i", None, Val("sku"))))) == "<i>A</i><i>B</i>"

    def test_item_variable(self, preview: DualModeRenderer) -> None:
        data = {"order": {"items": [{"sku": "A"}]}}
        node = Provider(data, Each("order.items", Val("line.sku"), item_var="line"))
        assert preview.render(node) == "A"

    def test_scalar_items(self, preview: DualModeRenderer) -> None:
        node = Provider({"tags": ["x", "y"]}, Each("tags", "[", Val("this"), "]"))
        assert preview.render(node) == "[x][y]"

    def test_conditions_see_the_current_item(self, preview: DualModeRenderer) -> None:
        data = {"items": [{"name": "a", "active": True}, {"name": "b", "active": False}]}
        node = Provider(data, Each("items", If("this.active", Val("name"))))
        assert preview.render(node) == "a"

    def test_nested_loops(self, preview: DualModeRenderer) -> None:
        data = {"groups": [{"members": [{"name": "a"}, {"name": "b"}]}, {"members": [{"name": "c"}]}]}
        node = Provider(data, Each("groups", h("p", None, Each("this.members", Val("name")))))
        assert preview.render(node) == "<p>ab</p><p>c</p>"

    def test_empty_array_renders_nothing(self, preview: DualModeRenderer) -> None:
        assert preview.render(Provider({"items": []}, Each("items", "x"))) == ""

    def test_non_list_warns(self, preview: DualModeRenderer, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert preview.render(Provider({"items": "abc"}, Each("items", "x"))) == ""
        assert "not a list" in caplog.text


class TestPreviewValues:
    def test_value_wins_over_name(self, preview: DualModeRenderer) -> None:
        assert preview.render(Provider({"a": "data"}, Val("a", "given"))) == "given"

    def test_name_resolved_against_data(self, preview: DualModeRenderer) -> None:
        assert preview.render(Provider({"user": {"name": "Ada"}}, Val("user.name"))) == "Ada"

    def test_missing_value_renders_nothing(self, preview: DualModeRenderer) -> None:
        assert preview.render(Provider({}, Val("nope"))) == ""


# =============================================================================
# Marker mode
# =============================================================================


class TestMarkerMode:
    """Pseudo-tags and marker tokens for the template compiler."""

    def test_conditional_pseudo_tags(self, markers: DualModeRenderer) -> None:
        node = If("a && b", "X", Else("Y"))
        assert markers.render(node) == '<hb-if condition="a &amp;&amp; b">X<hb-else>Y</hb-else></hb-if>'

    def test_both_branches_are_rendered_regardless_of_data(self, markers: DualModeRenderer) -> None:
        node = Provider({"a": False}, If("a", "X", Else("Y")))
        assert markers.render(node) == '<hb-if condition="a">X<hb-else>Y</hb-else></hb-if>'

    def test_static_condition_emits_no_pseudo_tag(self, markers: DualModeRenderer) -> None:
        assert markers.render(If(False, "X", Else("Y"))) == "Y"
        assert markers.render(If(True, "X", Else("Y"))) == "X"
        assert markers.render(If(0, "X")) == ""

    def test_loop_body_rendered_once(self, markers: DualModeRenderer) -> None:
        node = Provider({"items": [{"sku": 1}, {"sku": 2}, {"sku": 3}]}, Each("items", h("li", None, Val("sku"))))
        assert markers.render(node) == '<hb-each array="items"><li>{{this.sku}}</li></hb-each>'

    def test_loop_with_item_variable(self, markers: DualModeRenderer) -> None:
        node = Each("order.items", Val("line.sku"), item_var="line")
        assert markers.render(node) == '<hb-each array="order.items" itemVar="line">{{this.sku}}</hb-each>'

    def test_nested_relative_array_is_emitted_from_the_root(self, markers: DualModeRenderer) -> None:
        data = {"groups": [{"members": [{"name": "x"}]}]}
        node = Provider(data, Each("groups", Each("this.members", Val("name"))))
        assert markers.render(node) == (
            '<hb-each array="groups"><hb-each array="groups.[0].members">{{this.name}}</hb-each></hb-each>'
        )

    def test_else_inside_child_element_is_not_a_branch(
        self, markers: DualModeRenderer, preview: DualModeRenderer
    ) -> None:
        """Only a direct child Else splits a conditional; both modes agree."""
        node = If("a", h("div", None, "A", Else("N")))
        assert markers.render(node) == '<hb-if condition="a"><div>AN</div></hb-if>'
        assert preview.render(Provider({"a": True}, node)) == "<div>AN</div>"
        assert preview.render(Provider({"a": False}, node)) == ""

    def test_render_prop_gets_representative(self, markers: DualModeRenderer) -> None:
        data = {"items": [{"sku": "__PROP_items__0__sku__"}]}
        node = Provider(data, Each("items", lambda item, i: h("li", {"data_index": i}, item["sku"])))
        assert markers.render(node) == '<hb-each array="items"><li data-index="0">__PROP_items__0__sku__</li></hb-each>'

    def test_val_prefers_value_then_registry(self) -> None:
        registry = MarkerRegistry()
        registry.bind("__PROP_user_name__", "user.name")
        renderer = DualModeRenderer(RenderMode.MARKERS)
        ctx = RenderContext(markers=registry)
        assert renderer.render(Val("user.name", "__PROP_x__"), ctx) == "__PROP_x__"
        assert renderer.render(Val("user.name"), ctx) == "__PROP_user_name__"
        assert renderer.render(Val("user.email"), ctx) == "{{user.email}}"


class TestHelpers:
    def test_split_else(self) -> None:
        other = Else("n")
        before, else_node, after = split_else(("a", other, "b"))
        assert (before, else_node, after) == (["a"], other, ["b"])
        assert split_else(("a",)) == (["a"], None, [])

    @pytest.mark.parametrize(
        ("name", "item_var", "expected"),
        [
            ("this", None, ""),
            ("this.sku", None, "sku"),
            ("sku", None, "sku"),
            ("line", "line", ""),
            ("line.sku", "line", "sku"),
            ("lines.sku", "line", "lines.sku"),
        ],
    )
    def test_relative_item_path(self, name, item_var, expected) -> None:
        assert relative_item_path(name, item_var) == expected
