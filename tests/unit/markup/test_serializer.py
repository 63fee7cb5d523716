"""Tests for static markup serialization helpers."""
from __future__ import annotations

import pytest

from handlebarize.core.markup.elements import raw
from handlebarize.core.markup.serializer import (
    attribute_name,
    end_tag,
    escape_attr,
    escape_text,
    inner_html,
    render_attributes,
    render_style,
    start_tag,
)


class TestEscaping:
    def test_escape_text(self) -> None:
        assert escape_text("<a href=\"x\">Tom & 'Jerry'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; &#x27;Jerry&#x27;&lt;/a&gt;"
        )

    def test_raw_markup_passes_through(self) -> None:
        assert escape_text(raw("<b>&nbsp;</b>")) == "<b>&nbsp;</b>"

    def test_escape_attr_escapes_raw_markup_too(self) -> None:
        assert escape_attr(raw("a&b")) == "a&amp;b"

    def test_numbers(self) -> None:
        assert escape_text(3.5) == "3.5"


class TestAttributes:
    @pytest.mark.parametrize(
        ("prop", "expected"),
        [
            ("class_name", "class"),
            ("className", "class"),
            ("class_", "class"),
            ("html_for", "for"),
            ("http_equiv", "http-equiv"),
            ("data_id", "data-id"),
            ("aria-label", "aria-label"),
            ("href", "href"),
        ],
    )
    def test_attribute_name(self, prop: str, expected: str) -> None:
        assert attribute_name(prop) == expected

    def test_render_attributes(self) -> None:
        props = {
            "class_name": "btn",
            "href": "/a?b=1&c=2",
            "disabled": True,
            "hidden": False,
            "title": None,
            "on_click": lambda: None,
            "key": "k",
            "children": "x",
        }
        assert render_attributes(props) == ' class="btn" href="/a?b=1&amp;c=2" disabled=""'

    def test_style_mapping(self) -> None:
        style = {"backgroundColor": "#fff", "font_size": "12px", "--brand": "red", "margin": None}
        assert render_style(style) == "background-color:#fff;font-size:12px;--brand:red"
        assert render_attributes({"style": style}) == ' style="background-color:#fff;font-size:12px;--brand:red"'

    def test_empty_style_is_dropped(self) -> None:
        assert render_attributes({"style": {}}) == ""

    def test_string_style_passes_through(self) -> None:
        assert render_style("color:red") == "color:red"


class TestTags:
    def test_void_elements_self_close(self) -> None:
        assert start_tag("img", {"src": "a.png", "alt": ""}) == '<img src="a.png" alt=""/>'
        assert end_tag("img") == ""

    def test_normal_elements(self) -> None:
        assert start_tag("td", {"width": 600}) == '<td width="600">'
        assert end_tag("td") == "</td>"

    def test_inner_html(self) -> None:
        assert inner_html({"dangerouslySetInnerHTML": {"__html": "<b>x</b>"}}) == "<b>x</b>"
        assert inner_html({"title": "x"}) is None
