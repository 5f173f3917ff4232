"""Tests for the error hierarchy."""

import pytest

from structmap.core.errors import (
    CapacityExceededError,
    CircularReferenceError,
    ConfigurationError,
    DepthExceededError,
    InvalidDestinationError,
    MapError,
    MapperError,
    MappingFailedError,
    NilPointerError,
    TypeMismatchError,
)


class Node:
    pass


@pytest.mark.parametrize(
    "error",
    [
        NilPointerError(),
        InvalidDestinationError(),
        DepthExceededError(3),
        CircularReferenceError(Node),
        TypeMismatchError("boom"),
        CapacityExceededError(5, 3),
        ConfigurationError("bad"),
    ],
)
def test_every_error_is_a_mapper_error(error):
    assert isinstance(error, MapperError)


def test_configuration_error_is_a_value_error():
    assert isinstance(ConfigurationError("bad"), ValueError)


def test_messages():
    assert "max_depth=3" in str(DepthExceededError(3))
    assert "Node" in str(CircularReferenceError(Node))
    assert "5" in str(CapacityExceededError(5, 3))


class TestMapError:
    def test_field_message(self):
        record = MapError(
            TypeMismatchError("bad value"),
            operation="map_struct",
            src_field="age",
            dst_field="years",
            src_type="Person",
            dst_type="Profile",
        )
        assert str(record) == "failed to map Person.age -> Profile.years: bad value"

    def test_index_message(self):
        record = MapError(DepthExceededError(1), operation="map_sequence", index=4)
        assert str(record).startswith("sequence index 4: ")

    def test_key_message(self):
        record = MapError(TypeMismatchError("x"), operation="map_mapping", key="k")
        assert str(record) == "mapping key 'k': x"

    def test_fallback_message(self):
        record = MapError(TypeMismatchError("x"), operation="map_dynamic")
        assert str(record) == "map_dynamic operation failed: x"

    def test_cause_chain(self):
        inner = CircularReferenceError(Node)
        record = MapError(inner, operation="map_sequence", index=0)
        assert record.cause is inner
        assert record.__cause__ is inner
        assert record.root_cause is inner
        assert record.caused_by(CircularReferenceError)
        assert not record.caused_by(DepthExceededError)


class TestMappingFailedError:
    def test_summary_wraps_first_error(self):
        first = MapError(TypeMismatchError("bad"), operation="map_mapping", key="a")
        failure = MappingFailedError(2, first)
        assert failure.count == 2
        assert failure.first is first
        assert str(failure) == "mapping completed with 2 errors: mapping key 'a': bad"
        assert failure.caused_by(TypeMismatchError)
        assert isinstance(failure.root_cause, TypeMismatchError)

    def test_root_cause_of_unchained_error_is_itself(self):
        error = TypeMismatchError("x")
        assert error.root_cause is error
