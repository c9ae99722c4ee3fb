from datetime import datetime, timezone

import pytest

from collection_generator.errors import (
    CyclicReferenceError,
    UnrecognizedSchemaError,
    UnresolvedReferenceError,
    UnsupportedCombinatorError,
)
from collection_generator.schema.nodes import (
    ArrayNode,
    MapNode,
    OneOfNode,
    ReferenceNode,
    ScalarNode,
)
from collection_generator.schema.resolver import resolve


def fixed_clock():
    return datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestScalars:
    def test_sample_is_returned(self):
        assert resolve({"type": "int", "sample": 7}, {}) == 7

    def test_missing_sample_falls_back_to_type_tag(self):
        assert resolve({"type": "email"}, {}) == "email"
        assert resolve({"type": "string|null"}, {}) == "string|null"

    def test_untyped_without_sample_is_null(self):
        assert resolve({}, {}) is None

    def test_null_type(self):
        assert resolve({"type": "null"}, {}) is None

    def test_nullable_kind_does_not_change_sample(self):
        assert resolve({"type": "int|null", "sample": 3}, {}) == 3

    def test_false_sample_is_kept(self):
        assert resolve({"type": "bool", "sample": False}, {}) is False


class TestEnum:
    def test_first_value(self):
        assert resolve({"enum": ["red", "green"]}, {}) == "red"

    def test_sample_wins(self):
        assert resolve({"enum": ["red", "green"], "sample": "green"}, {}) == "green"

    def test_empty_enum(self):
        assert resolve({"enum": []}, {}) is None


class TestOneOf:
    def test_first_alternative_wins(self):
        a = ScalarNode(kind="int", type_tag="int", sample=1)
        b = ScalarNode(kind="string", type_tag="string", sample="x")
        assert resolve(OneOfNode(alternatives=[a, b]), {}) == resolve(a, {})

    def test_empty_alternatives(self):
        with pytest.raises(UnrecognizedSchemaError):
            resolve({"oneOf": []}, {})


class TestCollections:
    def test_array_has_exactly_one_element(self):
        node = ArrayNode(item=ScalarNode(kind="int", type_tag="int", sample=3))
        assert resolve(node, {}) == [3]

    def test_nested_arrays(self):
        raw = {"type": "array", "item": {"type": "array", "item": {"type": "string", "sample": "x"}}}
        assert resolve(raw, {}) == [["x"]]

    def test_map_keeps_keys_and_order(self):
        raw = {
            "type": "map",
            "properties": {
                "zeta": {"type": "int", "sample": 1},
                "alpha": {"type": "string", "sample": "a"},
                "mid": {"type": "null"},
            },
        }
        result = resolve(raw, {})
        assert list(result) == ["zeta", "alpha", "mid"]
        assert result == {"zeta": 1, "alpha": "a", "mid": None}

    def test_empty_map(self):
        assert resolve(MapNode(), {}) == {}


class TestReferences:
    def test_transitive_reference(self):
        resources = {
            "x": ReferenceNode(name="y"),
            "y": ScalarNode(kind="int", type_tag="int", sample=5),
        }
        assert resolve(ReferenceNode(name="x"), resources) == 5

    def test_raw_resource_table(self):
        resources = {"user": {"type": "map", "properties": {"id": {"type": "int", "sample": 1}}}}
        assert resolve({"type": "array", "item": {"reference": "user"}}, resources) == [{"id": 1}]

    def test_unresolved_reference(self):
        with pytest.raises(UnresolvedReferenceError) as exc:
            resolve({"reference": "missing"}, {})
        assert exc.value.name == "missing"
        assert "missing" in str(exc.value)

    def test_cycle_is_detected(self):
        resources = {
            "a": {"type": "map", "properties": {"b": {"reference": "b"}}},
            "b": {"type": "array", "item": {"reference": "a"}},
        }
        with pytest.raises(CyclicReferenceError) as exc:
            resolve({"reference": "a"}, resources)
        assert exc.value.chain == ("a", "b", "a")

    def test_shared_reference_is_not_a_cycle(self):
        resources = {"id": {"type": "int", "sample": 9}}
        raw = {"type": "map", "properties": {"a": {"reference": "id"}, "b": {"reference": "id"}}}
        assert resolve(raw, resources) == {"a": 9, "b": 9}

    def test_error_location_points_into_resource(self):
        resources = {"user": {"type": "map", "properties": {"friend": {"reference": "nobody"}}}}
        with pytest.raises(UnresolvedReferenceError) as exc:
            resolve({"reference": "user"}, resources, location=("body",))
        assert exc.value.location == ("resources", "user", "properties", "friend")
        assert exc.value.via == ("body",)

    def test_error_names_outermost_call_site(self):
        resources = {
            "order": {"type": "map", "properties": {"customer": {"reference": "user"}}},
            "user": {"type": "map", "properties": {"friend": {"reference": "nobody"}}},
        }
        raw = {"type": "map", "properties": {"o": {"reference": "order"}}}
        with pytest.raises(UnresolvedReferenceError) as exc:
            resolve(raw, resources, location=("sections", 0, "schema"))
        assert exc.value.via == ("sections", 0, "schema", "properties", "o")
        assert str(exc.value) == (
            "Unresolved reference 'nobody' "
            "(at resources.user.properties.friend, via sections[0].schema.properties.o)"
        )

    def test_direct_error_has_no_via(self):
        with pytest.raises(UnresolvedReferenceError) as exc:
            resolve({"reference": "missing"}, {}, location=("schema",))
        assert exc.value.via == ()
        assert str(exc.value) == "Unresolved reference 'missing' (at schema)"


class TestCombinators:
    @pytest.mark.parametrize("kind", ["allOf", "anyOf"])
    def test_unsupported(self, kind):
        with pytest.raises(UnsupportedCombinatorError) as exc:
            resolve({"type": "map", "properties": {"x": {kind: []}}}, {}, location=("schema",))
        assert exc.value.kind == kind
        assert exc.value.location == ("schema", "properties", "x")


class TestTemporalInMaps:
    def test_date_and_datetime_samples(self):
        raw = {
            "type": "map",
            "properties": {
                "day": {"type": "date", "sample": "2024-03-01"},
                "at": {"type": "datetime", "sample": "2024-03-01T10:00:00+00:00"},
            },
        }
        assert resolve(raw, {}, clock=fixed_clock) == {
            "day": "2024-03-01",
            "at": "2024-03-01T10:00:00+00:00",
        }

    def test_missing_sample_uses_clock(self):
        assert resolve({"type": "localdatetime"}, {}, clock=fixed_clock) == "2025-01-02T03:04:05"
