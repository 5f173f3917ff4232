"""Tests for shape-specific mapping behavior."""

from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import pytest

from structmap import (
    CircularReferenceError,
    MappingFailedError,
    TypeMismatchError,
    copy,
    with_allow_private_fields,
    with_deep_copy,
    with_field_name_transform,
    with_ignore_unexported,
    with_secondary_tag,
    with_skip_nil,
    with_time_layout,
    with_zero_fields,
)


class Color(Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class Address:
    street: str = ""
    city: str = ""


@dataclass
class AddressView:
    street: str = ""
    city: str = ""


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Ring:
    value: int = 0
    next: "Ring | None" = None


class TestOptional:
    def test_none_destination_is_allocated(self):
        @dataclass
        class Src:
            address: Address | None = None

        @dataclass
        class Dst:
            address: AddressView | None = None

        dst = Dst()
        copy(dst, Src(Address("Main", "Springfield")))
        assert dst.address == AddressView("Main", "Springfield")

    def test_optional_source_into_plain_destination(self):
        @dataclass
        class Src:
            address: Address | None = None

        @dataclass
        class Dst:
            address: AddressView = field(default_factory=AddressView)

        dst = Dst()
        copy(dst, Src(Address("Elm", "Shelbyville")))
        assert dst.address.street == "Elm"

    def test_none_clears_optional_destination(self):
        @dataclass
        class Src:
            nickname: str | None = None

        @dataclass
        class Dst:
            nickname: str | None = "bob"

        dst = Dst()
        copy(dst, Src())
        assert dst.nickname is None

    def test_skip_nil_leaves_destination(self):
        @dataclass
        class Src:
            nickname: str | None = None

        @dataclass
        class Dst:
            nickname: str | None = "bob"

        dst = Dst()
        copy(dst, Src(), with_skip_nil())
        assert dst.nickname == "bob"

    def test_none_never_lands_in_non_optional_field(self):
        @dataclass
        class Src:
            nickname: str | None = None

        @dataclass
        class Dst:
            nickname: str = "bob"

        dst = Dst()
        copy(dst, Src())
        assert dst.nickname == "bob"


class TestStruct:
    def test_unmatched_fields_are_ignored(self):
        @dataclass
        class Src:
            street: str = ""
            country: str = ""

        dst = AddressView(city="Ogdenville")
        copy(dst, Src(street="Main", country="US"))
        assert dst == AddressView(street="Main", city="Ogdenville")

    def test_struct_into_scalar_field_is_skipped(self):
        @dataclass
        class Src:
            address: Address = field(default_factory=Address)

        @dataclass
        class Dst:
            address: str = "keep"

        dst = Dst()
        copy(dst, Src(Address("Main")))
        assert dst.address == "keep"

    def test_private_fields(self):
        @dataclass
        class Secretive:
            name: str = ""
            _secret: str = ""

        dst = Secretive()
        copy(dst, Secretive("n", "s"))
        assert dst == Secretive("n", "")

        dst = Secretive()
        copy(dst, Secretive("n", "s"), with_ignore_unexported(False))
        assert dst._secret == "s"

        dst = Secretive()
        with pytest.warns(UserWarning):
            option = with_allow_private_fields()
        copy(dst, Secretive("n", "s"), option)
        assert dst._secret == "s"

    def test_secondary_tag(self):
        @dataclass
        class Src:
            user_id: int = field(default=0, metadata={"json": "id"})

        @dataclass
        class Dst:
            id: int = 0
            user_id: int = 0

        dst = Dst()
        copy(dst, Src(5), with_secondary_tag())
        assert dst == Dst(id=5, user_id=0)

        dst = Dst()
        copy(dst, Src(5))
        assert dst == Dst(id=0, user_id=5)

    def test_field_name_transform(self):
        @dataclass
        class Src:
            src_street: str = ""

        dst = AddressView()
        copy(dst, Src("Main"), with_field_name_transform(lambda n: n.removeprefix("src_")))
        assert dst.street == "Main"

    def test_zero_fields(self):
        @dataclass
        class Tagged:
            tags: list[str] = field(default_factory=list)
            address: Address | None = None

        dst = Tagged(tags=["stale"], address=Address("Main"))
        copy(dst, Tagged())
        # Empty lists map into nothing; None clears optionals
        assert dst.tags == ["stale"]
        assert dst.address is None

        dst = Tagged(tags=["stale"])
        copy(dst, Tagged(), with_zero_fields())
        assert dst.tags == []

    def test_zero_fields_with_self_referencing_source(self):
        ring = Ring()
        ring.next = ring
        dst = Ring(value=5)
        with pytest.raises(MappingFailedError) as exc_info:
            copy(dst, ring, with_zero_fields())
        assert exc_info.value.caused_by(CircularReferenceError)
        assert dst.value == 0

    def test_frozen_optional_field_is_allocated(self):
        @dataclass
        class Shape:
            origin: Point | None = None

        dst = Shape()
        copy(dst, Shape(Point(1.0, 2.0)))
        assert dst.origin == Point(1.0, 2.0)

    def test_existing_frozen_value_is_replaced_not_mutated(self):
        original = Point(0.0, 0.0)

        @dataclass
        class Shape:
            origin: Point = field(default_factory=Point)

        dst = Shape(origin=original)
        copy(dst, Shape(Point(3.0, 4.0)))
        assert dst.origin == Point(3.0, 4.0)
        assert dst.origin is not original
        assert original == Point(0.0, 0.0)


class TestSequence:
    def test_list_of_structs_is_deep_copied(self):
        @dataclass
        class Src:
            stops: list[Address] = field(default_factory=list)

        @dataclass
        class Dst:
            stops: list[AddressView] = field(default_factory=list)

        src = Src([Address("A"), Address("B")])
        dst = Dst()
        copy(dst, src)
        assert dst.stops == [AddressView("A"), AddressView("B")]

    def test_longer_destination_is_overwritten_in_place(self):
        @dataclass
        class Numbers:
            values: list[int] = field(default_factory=list)

        dst = Numbers([9, 9, 9])
        kept = dst.values
        copy(dst, Numbers([1]))
        assert dst.values == [1, 9, 9]
        assert dst.values is kept

    def test_variadic_tuple_is_rebuilt(self):
        @dataclass
        class Src:
            values: list[int] = field(default_factory=list)

        @dataclass
        class Dst:
            values: tuple[int, ...] = ()

        dst = Dst()
        copy(dst, Src([1, 2, 3]))
        assert dst.values == (1, 2, 3)

    def test_fixed_tuple_keeps_arity(self):
        @dataclass
        class Src:
            coords: tuple[int, int, int] = (0, 0, 0)

        @dataclass
        class Dst:
            coords: tuple[float, float] = (0.0, 0.0)

        dst = Dst()
        copy(dst, Src((1, 2, 3)))
        assert dst.coords == (1.0, 2.0)
        assert all(isinstance(c, float) for c in dst.coords)

    def test_sets(self):
        @dataclass
        class Src:
            tags: list[str] = field(default_factory=list)

        @dataclass
        class Dst:
            tags: set[str] = field(default_factory=set)
            frozen_tags: frozenset[str] = frozenset()

        dst = Dst()
        copy(dst, Src(["a", "b", "a"]))
        assert dst.tags == {"a", "b"}

        @dataclass
        class FrozenSrc:
            frozen_tags: set[str] = field(default_factory=set)

        copy(dst, FrozenSrc({"x"}))
        assert dst.frozen_tags == frozenset({"x"})

    def test_deque_source(self):
        @dataclass
        class Src:
            history: deque[int] = field(default_factory=deque)

        @dataclass
        class Dst:
            history: list[int] = field(default_factory=list)

        dst = Dst()
        copy(dst, Src(deque([3, 2, 1])))
        assert dst.history == [3, 2, 1]

    def test_sequence_into_mapping_is_skipped(self):
        @dataclass
        class Src:
            values: list[int] = field(default_factory=list)

        @dataclass
        class Dst:
            values: dict[str, int] = field(default_factory=dict)

        dst = Dst()
        copy(dst, Src([1]))
        assert dst.values == {}

    def test_element_failures_are_indexed(self):
        @dataclass
        class Src:
            colors: list[str] = field(default_factory=list)

        @dataclass
        class Dst:
            colors: list[Color] = field(default_factory=list)

        dst = Dst()
        with pytest.raises(MappingFailedError) as exc_info:
            copy(dst, Src(["red", "green", "blue"]))
        assert exc_info.value.count == 1
        assert exc_info.value.first.index == 1
        assert dst.colors[0] is Color.RED
        assert dst.colors[2] is Color.BLUE


class TestMapping:
    def test_values_are_widened(self):
        @dataclass
        class Src:
            scores: dict[str, int] = field(default_factory=dict)

        @dataclass
        class Dst:
            scores: dict[str, float] = field(default_factory=dict)

        dst = Dst()
        copy(dst, Src({"a": 1}))
        assert dst.scores == {"a": 1.0}
        assert isinstance(dst.scores["a"], float)

    def test_keys_are_converted(self):
        @dataclass
        class Src:
            by_color: dict[str, int] = field(default_factory=dict)

        @dataclass
        class Dst:
            by_color: dict[Color, int] = field(default_factory=dict)

        dst = Dst()
        copy(dst, Src({"red": 1}))
        assert dst.by_color == {Color.RED: 1}

    def test_struct_values(self):
        @dataclass
        class Src:
            sites: dict[str, Address] = field(default_factory=dict)

        @dataclass
        class Dst:
            sites: dict[str, AddressView] | None = None

        dst = Dst()
        copy(dst, Src({"hq": Address("Main", "Springfield")}))
        assert dst.sites == {"hq": AddressView("Main", "Springfield")}

    def test_failed_entries_are_recorded_by_key(self):
        @dataclass
        class Src:
            colors: dict[str, str] = field(default_factory=dict)

        @dataclass
        class Dst:
            colors: dict[str, Color] = field(default_factory=dict)

        dst = Dst()
        with pytest.raises(MappingFailedError) as exc_info:
            copy(dst, Src({"ok": "red", "bad": "green"}))
        assert exc_info.value.first.key == "bad"
        assert dst.colors == {"ok": Color.RED}


class TestDynamic:
    def test_dynamic_to_dynamic_is_deep_copied(self):
        @dataclass
        class Envelope:
            payload: Any = None

        src = Envelope({"a": [1, 2], "b": Address("Main")})
        dst = Envelope()
        copy(dst, src)
        assert dst.payload == src.payload
        assert dst.payload is not src.payload
        assert dst.payload["a"] is not src.payload["a"]
        assert dst.payload["b"] is not src.payload["b"]

    def test_dynamic_into_concrete(self):
        @dataclass
        class Src:
            address: Any = None

        @dataclass
        class Dst:
            address: AddressView = field(default_factory=AddressView)

        dst = Dst()
        copy(dst, Src(Address("Main")))
        assert dst.address.street == "Main"

    def test_concrete_into_dynamic(self):
        @dataclass
        class Src:
            address: Address = field(default_factory=Address)

        @dataclass
        class Dst:
            address: object = None

        src = Src(Address("Main"))
        dst = Dst()
        copy(dst, src)
        assert dst.address == Address("Main")
        assert dst.address is not src.address


class TestScalar:
    def test_default_conversions_in_fields(self):
        @dataclass
        class Src:
            color: Color = Color.RED
            ratio: int = 0
            when: datetime = datetime(2000, 1, 1, tzinfo=UTC)
            count: str = ""

        @dataclass
        class Dst:
            color: str = ""
            ratio: float = 0.0
            when: str = ""
            count: int = 0

        dst = Dst()
        copy(dst, Src(Color.BLUE, 3, datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC), "5"))
        assert dst.color == "blue"
        assert dst.ratio == 3.0
        assert dst.when == "2024-01-02T03:04:05+00:00"
        # Text is never parsed into numbers
        assert dst.count == 0

    def test_time_layout_option(self):
        @dataclass
        class Src:
            when: datetime = datetime(2000, 1, 1, tzinfo=UTC)

        @dataclass
        class Dst:
            when: str = ""

        dst = Dst()
        copy(dst, Src(datetime(2024, 1, 2, tzinfo=UTC)), with_time_layout("%Y-%m-%d"))
        assert dst.when == "2024-01-02"

    def test_bool_is_not_a_number(self):
        @dataclass
        class Src:
            flag: bool = False

        @dataclass
        class Dst:
            flag: int = 7

        dst = Dst()
        copy(dst, Src(True))
        assert dst.flag == 7

    def test_bytearray_is_copied(self):
        @dataclass
        class Buffer:
            data: bytearray = field(default_factory=bytearray)

        src = Buffer(bytearray(b"abc"))
        dst = Buffer()
        copy(dst, src)
        assert dst.data == bytearray(b"abc")
        assert dst.data is not src.data

    def test_failed_enum_lookup_is_a_soft_error(self):
        @dataclass
        class Src:
            color: str = ""
            name: str = ""

        @dataclass
        class Dst:
            color: Color = Color.RED
            name: str = ""

        dst = Dst()
        with pytest.raises(MappingFailedError) as exc_info:
            copy(dst, Src("green", "kept"))
        assert exc_info.value.caused_by(TypeMismatchError)
        assert dst.name == "kept"
        assert dst.color is Color.RED


class TestDeepCopy:
    def test_deep_copy_shares_nothing_mutable(self):
        @dataclass
        class Route:
            stops: list[Address] = field(default_factory=list)
            meta: dict[str, list[str]] = field(default_factory=dict)

        src = Route([Address("A")], {"k": ["v"]})
        dst = Route()
        copy(dst, src)
        src.stops[0].street = "changed"
        src.meta["k"].append("w")
        assert dst.stops[0].street == "A"
        assert dst.meta == {"k": ["v"]}

    def test_shallow_copy_shares_references(self):
        @dataclass
        class Route:
            stops: list[Address] = field(default_factory=list)
            home: Address | None = None

        src = Route([Address("A")], Address("H"))
        dst = Route()
        copy(dst, src, with_deep_copy(False))
        assert dst.stops is src.stops
        assert dst.home is src.home

    def test_shallow_copy_still_converts_mismatched_types(self):
        @dataclass
        class Src:
            stops: list[Address] = field(default_factory=list)

        @dataclass
        class Dst:
            stops: list[AddressView] = field(default_factory=list)

        src = Src([Address("A")])
        dst = Dst()
        copy(dst, src, with_deep_copy(False))
        assert dst.stops == [AddressView("A")]
