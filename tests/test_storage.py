"""
memdb Storage Tests
===================
Field accessor resolution and the primary record table:
  ✔ dataclass fields, properties, slots, annotations
  ✔ missing / unreadable / method names rejected
  ✔ explicit accessors override attribute lookup
  ✔ None values fail at access time
  ✔ table insertion order, removal, membership
"""

import os
import sys
from dataclasses import dataclass

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from memdb.errors import InvalidFieldError, NullFieldValueError
from memdb.storage.accessor import (
    AccessorRegistry, FieldAccessor, accessor_from_spec, resolve_accessor,
)
from memdb.storage.table import RecordTable


@dataclass(eq=False)
class Customer:
    id: int
    age: int
    name: str = "x"

    def greet(self):
        return f"hi {self.name}"


@dataclass
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class FrozenTag:
    label: str


class Account:
    __slots__ = ("number", "_balance")

    def __init__(self, number, balance):
        self.number = number
        self._balance = balance

    @property
    def balance(self):
        return self._balance

    def _set_secret(self, value):
        pass

    secret = property(None, _set_secret)


class Annotated:
    owner: str

    def __init__(self, owner=None):
        if owner is not None:
            self.owner = owner


# ═══════════════════════════════════════════════════════════════════
# Accessor Resolution Tests
# ═══════════════════════════════════════════════════════════════════

class TestResolveAccessor:

    def test_dataclass_field(self):
        acc = resolve_accessor(Customer, "age")
        assert acc.field_name == "age"
        assert acc.get(Customer(1, 42)) == 42

    def test_dataclass_field_writable(self):
        c = Customer(1, 42)
        resolve_accessor(Customer, "age").set(c, 43)
        assert c.age == 43

    def test_frozen_dataclass_not_writable(self):
        acc = resolve_accessor(FrozenTag, "label")
        assert acc.get(FrozenTag("a")) == "a"
        with pytest.raises(InvalidFieldError, match="not writable"):
            acc.set(FrozenTag("a"), "b")

    def test_missing_field_rejected(self):
        with pytest.raises(InvalidFieldError, match="does not exist"):
            resolve_accessor(Customer, "email")

    def test_method_rejected(self):
        with pytest.raises(InvalidFieldError, match="method"):
            resolve_accessor(Customer, "greet")

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidFieldError):
            resolve_accessor(Customer, "")

    def test_property_read_only(self):
        acc = resolve_accessor(Account, "balance")
        assert acc.get(Account(7, 100)) == 100
        assert acc.setter is None

    def test_property_without_getter_rejected(self):
        with pytest.raises(InvalidFieldError, match="not readable"):
            resolve_accessor(Account, "secret")

    def test_slot_member(self):
        acc = resolve_accessor(Account, "number")
        assert acc.get(Account(7, 100)) == 7

    def test_annotated_attribute(self):
        acc = resolve_accessor(Annotated, "owner")
        assert acc.get(Annotated("bob")) == "bob"

    def test_unset_attribute_is_null(self):
        acc = resolve_accessor(Annotated, "owner")
        with pytest.raises(NullFieldValueError):
            acc.get(Annotated())

    def test_none_value_is_null(self):
        acc = resolve_accessor(Customer, "name")
        with pytest.raises(NullFieldValueError, match="'name'"):
            acc.get(Customer(1, 2, None))

    def test_invalid_field_is_attribute_error(self):
        with pytest.raises(AttributeError):
            resolve_accessor(Customer, "nope")


class TestExplicitAccessors:

    def test_override_beats_attribute(self):
        acc = resolve_accessor(Point, "x", {"x": lambda p: p.x * 10})
        assert acc.get(Point(2, 3)) == 20

    def test_computed_field(self):
        acc = resolve_accessor(Point, "norm1", {"norm1": lambda p: abs(p.x) + abs(p.y)})
        assert acc.get(Point(-2, 3)) == 5
        assert acc.setter is None

    def test_getter_setter_tuple(self):
        def set_y(p, v):
            p.y = v
        acc = accessor_from_spec("y", (lambda p: p.y, set_y))
        p = Point(1, 1)
        acc.set(p, 9)
        assert p.y == 9

    def test_bad_spec_rejected(self):
        with pytest.raises(TypeError):
            accessor_from_spec("x", 42)

    def test_read_only_spec_cannot_set(self):
        acc = accessor_from_spec("x", lambda p: p.x)
        with pytest.raises(InvalidFieldError, match="not writable"):
            acc.set(Point(1, 1), 2)

    def test_registry_resolves_registered_first(self):
        registry = AccessorRegistry(Point, {"sum": lambda p: p.x + p.y})
        assert registry.resolve("sum").get(Point(1, 2)) == 3
        assert registry.resolve("x").get(Point(1, 2)) == 1

    def test_registry_register_returns_accessor(self):
        registry = AccessorRegistry(Point)
        acc = registry.register("y", lambda p: -p.y)
        assert isinstance(acc, FieldAccessor)
        assert registry.resolve("y").get(Point(0, 4)) == -4


# ═══════════════════════════════════════════════════════════════════
# Record Table Tests
# ═══════════════════════════════════════════════════════════════════

class TestRecordTable:

    def test_insertion_order(self):
        table = RecordTable()
        rows = [Customer(i, i * 10) for i in (3, 1, 2)]
        for r in rows:
            table.add(r)
        assert table.all() == rows
        assert list(table) == rows
        assert len(table) == 3

    def test_all_is_snapshot(self):
        table = RecordTable()
        table.add(Customer(1, 1))
        snapshot = table.all()
        table.add(Customer(2, 2))
        assert len(snapshot) == 1

    def test_duplicates_allowed(self):
        table = RecordTable()
        c = Customer(1, 1)
        table.add(c)
        table.add(c)
        assert len(table) == 2

    def test_remove_first_occurrence(self):
        table = RecordTable()
        c = Customer(1, 1)
        other = Customer(2, 2)
        table.add(c)
        table.add(other)
        table.add(c)
        assert table.remove(c) is True
        assert table.all() == [other, c]

    def test_remove_absent_is_silent(self):
        table = RecordTable()
        table.add(Customer(1, 1))
        assert table.remove(Customer(1, 1)) is False
        assert len(table) == 1

    def test_identity_for_plain_records(self):
        table = RecordTable()
        c = Customer(1, 1)
        table.add(c)
        assert c in table
        assert table.contains(Customer(1, 1)) is False

    def test_value_equality_for_eq_records(self):
        table = RecordTable()
        table.add(Point(1, 2))
        assert Point(1, 2) in table
        assert table.remove(Point(1, 2)) is True
        assert len(table) == 0


class Plain:
    def __init__(self, code):
        self.code = code


class TestInstanceOnlyAttributes:

    def test_error_points_to_explicit_accessor(self):
        with pytest.raises(InvalidFieldError, match="register_accessor"):
            resolve_accessor(Plain, "code")

    def test_explicit_accessor_resolves(self):
        registry = AccessorRegistry(Plain, {"code": lambda p: p.code})
        assert registry.resolve("code").get(Plain("z9")) == "z9"
