"""
memdb Field Accessor Resolution
===============================
Resolves a field name on a record type to a getter/setter pair.

Resolution happens once, when an index is created. The resulting
FieldAccessor is reused for every add/remove against that index.

Resolution order:
  1. Explicit accessor registered for the field name (overrides)
  2. Dataclass field
  3. Class-level attribute: property with a getter, __slots__ member,
     annotated attribute, or plain class attribute holding a value

A property without a getter is not readable. Methods are not fields.
"""

import dataclasses
import inspect
import operator
import types
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from memdb.errors import InvalidFieldError, NullFieldValueError

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]
AccessorSpec = Union[Getter, Tuple[Getter, Optional[Setter]]]

_MISSING = object()

_NOT_FIELDS = (
    types.FunctionType, staticmethod, classmethod,
    types.BuiltinFunctionType, types.MethodDescriptorType,
)


@dataclass(frozen=True)
class FieldAccessor:
    """Bound (field name -> extraction function) pair used by an index."""
    field_name: str
    getter: Getter
    setter: Optional[Setter] = None

    def get(self, record: Any) -> Any:
        """
        Extract the field value from a record.
        Raises NullFieldValueError if the value is None or missing.
        """
        try:
            value = self.getter(record)
        except AttributeError:
            raise NullFieldValueError(self.field_name) from None
        if value is None:
            raise NullFieldValueError(self.field_name)
        return value

    def set(self, record: Any, value: Any) -> None:
        """Write the field in place. Only bulk updates mutate records."""
        if self.setter is None:
            raise InvalidFieldError(self.field_name, type(record), "is not writable")
        try:
            self.setter(record, value)
        except AttributeError as e:
            raise InvalidFieldError(
                self.field_name, type(record), f"is not writable ({e})"
            ) from e


def attribute_accessor(field_name: str, writable: bool = True) -> FieldAccessor:
    """Default accessor: plain attribute read, setattr write."""
    setter = None
    if writable:
        def setter(record: Any, value: Any) -> None:
            setattr(record, field_name, value)
    return FieldAccessor(field_name, operator.attrgetter(field_name), setter)


def accessor_from_spec(field_name: str, spec: AccessorSpec) -> FieldAccessor:
    """
    Build an accessor from a user-supplied spec.

    A bare callable is a read-only getter. A (getter, setter) tuple also
    allows bulk updates; setter may be None.
    """
    if isinstance(spec, FieldAccessor):
        return spec
    if callable(spec):
        return FieldAccessor(field_name, spec, None)
    if isinstance(spec, tuple) and len(spec) == 2 and callable(spec[0]):
        getter, setter = spec
        if setter is not None and not callable(setter):
            raise TypeError(f"Setter for field '{field_name}' is not callable")
        return FieldAccessor(field_name, getter, setter)
    raise TypeError(
        f"Accessor for field '{field_name}' must be a callable or a "
        f"(getter, setter) tuple, got {type(spec).__name__}"
    )


def _has_annotation(record_type: type, field_name: str) -> bool:
    for klass in inspect.getmro(record_type):
        if field_name in inspect.get_annotations(klass):
            return True
    return False


def resolve_accessor(record_type: type, field_name: str,
                     overrides: Optional[Mapping[str, AccessorSpec]] = None) -> FieldAccessor:
    """
    Resolve field_name on record_type to a FieldAccessor.
    Raises InvalidFieldError if the field does not exist or is not readable.
    """
    if not isinstance(field_name, str) or not field_name:
        raise InvalidFieldError(str(field_name), record_type, "is not a valid field name")

    if overrides and field_name in overrides:
        return accessor_from_spec(field_name, overrides[field_name])

    if dataclasses.is_dataclass(record_type):
        if field_name in {f.name for f in dataclasses.fields(record_type)}:
            frozen = record_type.__dataclass_params__.frozen
            return attribute_accessor(field_name, writable=not frozen)

    attr = inspect.getattr_static(record_type, field_name, _MISSING)

    if isinstance(attr, property):
        if attr.fget is None:
            raise InvalidFieldError(field_name, record_type, "is not readable")
        return attribute_accessor(field_name, writable=attr.fset is not None)

    if isinstance(attr, types.MemberDescriptorType):
        # __slots__ member
        return attribute_accessor(field_name)

    if attr is _MISSING:
        if _has_annotation(record_type, field_name):
            return attribute_accessor(field_name)
        raise InvalidFieldError(
            field_name, record_type,
            "does not exist as a class-level field; attributes set only in "
            "__init__ need an explicit accessor (accessors= or register_accessor)",
        )

    if isinstance(attr, _NOT_FIELDS):
        raise InvalidFieldError(field_name, record_type, "is a method, not a field")

    return attribute_accessor(field_name)


class AccessorRegistry:
    """
    Per-engine map of explicitly registered accessors.
    Lookups fall through to resolve_accessor for unregistered names.
    """

    def __init__(self, record_type: type,
                 accessors: Optional[Mapping[str, AccessorSpec]] = None):
        self.record_type = record_type
        self._overrides: Dict[str, AccessorSpec] = {}
        for name, spec in (accessors or {}).items():
            self.register(name, spec)

    def register(self, field_name: str, spec: AccessorSpec) -> FieldAccessor:
        accessor = accessor_from_spec(field_name, spec)
        self._overrides[field_name] = accessor
        return accessor

    def resolve(self, field_name: str) -> FieldAccessor:
        return resolve_accessor(self.record_type, field_name, self._overrides)
