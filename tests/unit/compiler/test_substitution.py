"""Tests for MarkerSubstitutor."""
from __future__ import annotations

import pytest

from handlebarize.core.compiler.base import TransformContext
from handlebarize.core.compiler.markers import MarkerRegistry
from handlebarize.core.compiler.substitution import MarkerSubstitutor, value_reference
from handlebarize.core.exceptions import UnresolvedMarkerError


@pytest.fixture
def substitutor() -> MarkerSubstitutor:
    return MarkerSubstitutor()


class TestSubstitute:
    def test_replaces_tokens_with_references(self, substitutor: MarkerSubstitutor) -> None:
        result = substitutor.substitute(
            '<p title="__PROP_user_name__">Hi __PROP_user_name__</p>',
            {"__PROP_user_name__": "user.name"},
        )
        assert result == '<p title="{{user.name}}">Hi {{user.name}}</p>'

    def test_longest_token_first(self, substitutor: MarkerSubstitutor) -> None:
        """A token that prefixes another never eats part of it."""
        short, long = "__PROP_a__", "__PROP_a__b__"
        result = substitutor.substitute(
            f"x {long} y {short}",
            {short: "a", long: "a.b"},
        )
        assert result == "x {{a.b}} y {{a}}"

    def test_unrelated_text_untouched(self, substitutor: MarkerSubstitutor) -> None:
        markup = "<p>__init__ and PROP_x__</p>"
        assert substitutor.substitute(markup, {}) == markup

    def test_value_reference(self) -> None:
        assert value_reference("items.[0].sku") == "{{items.[0].sku}}"


class TestUnresolvedTokens:
    """Tokens without a bound path become empty text (or raise in strict mode)."""

    def test_missing_binding_is_empty(self, substitutor: MarkerSubstitutor) -> None:
        context = TransformContext()
        result = substitutor.substitute("<p>__PROP_x__</p>", {"__PROP_x__": None}, context)
        assert result == "<p></p>"
        assert context.markers_unresolved == {"__PROP_x__"}

    def test_leftover_token_shaped_text(self, substitutor: MarkerSubstitutor) -> None:
        context = TransformContext()
        result = substitutor.substitute("<p>__PROP_ghost__</p>", {}, context)
        assert result == "<p></p>"
        assert context.markers_unresolved == {"__PROP_ghost__"}

    def test_strict_mode_raises(self) -> None:
        strict = MarkerSubstitutor(strict=True)
        with pytest.raises(UnresolvedMarkerError) as excinfo:
            strict.substitute("<p>__PROP_ghost__</p>", {})
        assert excinfo.value.token == "__PROP_ghost__"
        assert "__PROP_ghost__" in str(excinfo.value)


class TestTransform:
    def test_uses_context_registry(self, substitutor: MarkerSubstitutor) -> None:
        registry = MarkerRegistry()
        registry.bind("__PROP_total__", "order.total")
        context = TransformContext(markers=registry)
        assert substitutor.transform("Total: __PROP_total__", context) == "Total: {{order.total}}"
        assert context.markers_substituted == 1

    def test_custom_prefix(self) -> None:
        substitutor = MarkerSubstitutor(prefix="HB_", suffix="_HB")
        assert substitutor.substitute("HB_a_HB HB_zz_HB", {"HB_a_HB": "a"}) == "{{a}} "
