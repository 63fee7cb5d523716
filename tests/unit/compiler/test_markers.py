"""Tests for marker tokens, the token registry and MarkerDataGenerator."""
from __future__ import annotations

import pytest

from handlebarize.core.compiler.markers import (
    MarkerDataGenerator,
    MarkerRegistry,
    item_path,
    join_path,
    make_token,
)
from handlebarize.core.exceptions import MarkerCollisionError
from handlebarize.core.markup.elements import h


class TestMakeToken:
    def test_non_alphanumerics_become_underscores(self) -> None:
        assert make_token("user.name") == "__PROP_user_name__"
        assert make_token("items.[0].name") == "__PROP_items__0__name__"

    def test_custom_prefix_and_suffix(self) -> None:
        assert make_token("a.b", prefix="HB_", suffix="_X") == "HB_a_b_X"

    def test_path_helpers(self) -> None:
        assert join_path("", "user") == "user"
        assert join_path("user", "name") == "user.name"
        assert item_path("items") == "items.[0]"
        assert item_path("") == "[0]"


class TestMarkerRegistry:
    def test_bind_and_lookup(self) -> None:
        registry = MarkerRegistry()
        registry.bind("__PROP_a__", "a")
        assert registry.path_for("__PROP_a__") == "a"
        assert registry.token_for("a") == "__PROP_a__"
        assert "__PROP_a__" in registry
        assert len(registry) == 1

    def test_rebinding_same_path_is_allowed(self) -> None:
        registry = MarkerRegistry()
        registry.bind("__PROP_a__", "a")
        registry.bind("__PROP_a__", "a")
        assert registry.as_dict() == {"__PROP_a__": "a"}

    def test_collision_raises(self) -> None:
        """Two paths normalising to one token would substitute the wrong reference."""
        registry = MarkerRegistry()
        registry.bind(make_token("a_b"), "a_b")
        with pytest.raises(MarkerCollisionError) as excinfo:
            registry.bind(make_token("a.b"), "a.b")
        assert excinfo.value.existing_path == "a_b"
        assert excinfo.value.new_path == "a.b"


class TestMarkerDataGenerator:
    """Tests for marker-izing sample data."""

    def test_scalars_become_tokens(self) -> None:
        generator = MarkerDataGenerator()
        result = generator.generate({"user": {"name": "Ada", "age": 36}})
        assert result == {"user": {"name": "__PROP_user_name__", "age": "__PROP_user_age__"}}
        assert generator.registry.path_for("__PROP_user_age__") == "user.age"

    def test_arrays_keep_one_representative(self) -> None:
        """Only the first element is kept, tagged with a [0] segment."""
        generator = MarkerDataGenerator()
        result = generator.generate({"items": [{"sku": 1}, {"sku": 2}, {"sku": 3}]})
        assert result == {"items": [{"sku": "__PROP_items__0__sku__"}]}
        assert generator.registry.path_for("__PROP_items__0__sku__") == "items.[0].sku"

    def test_empty_array_becomes_empty_object(self) -> None:
        generator = MarkerDataGenerator()
        assert generator.generate({"items": []}) == {"items": [{}]}
        assert len(generator.registry) == 0

    def test_array_of_scalars(self) -> None:
        generator = MarkerDataGenerator()
        result = generator.generate({"tags": ("a", "b")})
        token = make_token("tags.[0]")
        assert result == {"tags": [token]}
        assert generator.registry.path_for(token) == "tags.[0]"

    def test_nested_arrays(self) -> None:
        generator = MarkerDataGenerator()
        result = generator.generate({"groups": [{"members": [{"name": "x"}]}]})
        token = make_token("groups.[0].members.[0].name")
        assert result == {"groups": [{"members": [{"name": token}]}]}

    def test_elements_pass_through(self) -> None:
        """Component instances inside data are not data."""
        icon = h("img", {"src": "star.png"})
        result = MarkerDataGenerator().generate({"icon": icon, "label": "Star"})
        assert result["icon"] is icon
        assert result["label"] == "__PROP_label__"

    def test_input_is_not_mutated(self) -> None:
        sample = {"items": [{"sku": 1}, {"sku": 2}]}
        MarkerDataGenerator().generate(sample)
        assert sample == {"items": [{"sku": 1}, {"sku": 2}]}

    def test_shared_registry_and_collision(self) -> None:
        registry = MarkerRegistry()
        generator = MarkerDataGenerator(registry)
        with pytest.raises(MarkerCollisionError):
            generator.generate({"a_b": 1, "a": {"b": 2}})

    def test_base_path(self) -> None:
        generator = MarkerDataGenerator()
        assert generator.generate({"name": "x"}, base_path="user") == {"name": "__PROP_user_name__"}
