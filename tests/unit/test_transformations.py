"""
Tests para el registro de transformaciones, el pipeline y el merge de defaults.
"""
from __future__ import annotations

import json

import pytest

from firestore_sync.infrastructure.external.firestore.transformations import (
    TransformationRegistry,
    apply_transformations,
    build_default_registry,
    float_coerce,
    integer_coerce,
    merge_defaults,
    serialize,
    title_case,
)
from firestore_sync.infrastructure.external.firestore.value_decoder import decode_value


@pytest.fixture
def registry() -> TransformationRegistry:
    return build_default_registry()


class TestBuiltinTransformations:
    def test_title_case_keeps_rest_of_word(self) -> None:
        assert title_case("john doe") == "John Doe"
        assert title_case("mcDonald  old\tfarm") == "McDonald  Old\tFarm"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("29", 29), ("29.9", 29), (" -7 años", -7), ("abc", 0),
            ("1e3", 1000), ("1.5e3kg", 1500), ("-2E2", -200), ("1e999", 0),
            (29.9, 29), (-3.7, -3), (True, 1), (5, 5),
        ],
    )
    def test_integer_coerce(self, raw, expected) -> None:
        assert integer_coerce(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("9.5", 9.5), ("9.5kg", 9.5), ("x", 0.0), (3, 3.0), ("1e3", 1000.0)],
    )
    def test_float_coerce(self, raw, expected) -> None:
        assert float_coerce(raw) == expected

    def test_serialize_array_is_compact_json(self) -> None:
        assert serialize(["a", "b"]) == '["a","b"]'

    @pytest.mark.parametrize(
        "value",
        [["a", {"b": [1, 2.5, None, True]}], {"z": 1, "a": {"nested": ["x"]}}, [], {}],
    )
    def test_serialize_composite_round_trips(self, value) -> None:
        serialized = serialize(value)
        assert isinstance(serialized, str)
        assert json.loads(serialized) == value

    @pytest.mark.parametrize("value", ["already", 3, 2.5, True])
    def test_serialize_scalar_is_noop(self, value) -> None:
        assert serialize(value) == value

    def test_serialize_rejects_non_finite_floats(self) -> None:
        decoded = decode_value(
            {"arrayValue": {"values": [{"doubleValue": "NaN"}, {"doubleValue": "Infinity"}]}}
        )
        with pytest.raises(ValueError):
            serialize(decoded)
        with pytest.raises(ValueError):
            serialize({"score": float("-inf")})


def test_apply_transformations_scenario(registry) -> None:
    record = {"name": "john doe", "email": "JOHN@X.COM", "age": "29"}
    transformations = {"name": "title-case", "email": "lowercase", "age": "integer-coerce"}

    result = apply_transformations(record, transformations, registry)

    assert result == {"name": "John Doe", "email": "john@x.com", "age": 29}
    assert isinstance(result["age"], int)
    # El registro original no se modifica
    assert record["name"] == "john doe"


def test_absent_fields_are_not_invented(registry) -> None:
    result = apply_transformations({"name": "ana"}, {"age": "integer-coerce"}, registry)
    assert result == {"name": "ana"}


def test_unknown_transformation_is_noop(registry) -> None:
    result = apply_transformations({"name": "ana"}, {"name": "does-not-exist"}, registry)
    assert result == {"name": "ana"}


def test_registered_custom_transformation(registry) -> None:
    registry.register("slug", lambda v: str(v).lower().replace(" ", "-"))
    result = apply_transformations({"title": "Hello World"}, {"title": "slug"}, registry)
    assert result == {"title": "hello-world"}
    assert "slug" in registry


def test_transformations_are_field_local(registry) -> None:
    registry.register("echo_len", lambda v: len(v))
    record = {"a": "xyz", "b": "hello"}
    result = apply_transformations(record, {"a": "uppercase", "b": "echo_len"}, registry)
    assert result == {"a": "XYZ", "b": 5}


def test_merge_defaults_never_overwrites() -> None:
    merged = merge_defaults({"email": "a@x.com", "password": "secret"}, {"password": "password", "role": "user"})
    assert merged == {"email": "a@x.com", "password": "secret", "role": "user"}


def test_merge_defaults_fills_missing() -> None:
    assert merge_defaults({"email": "a@x.com"}, {"password": "password"}) == {
        "email": "a@x.com",
        "password": "password",
    }
