"""
memdb Errors
============
Exception hierarchy for the storage, indexing and engine layers.

Every error derives from MemDBError. Most also derive from the closest
builtin (ValueError, LookupError, AttributeError) so callers can catch
them generically.
"""

from typing import Any


class MemDBError(Exception):
    """Base class for all memdb errors."""
    pass


# ─── Field / record errors ──────────────────────────────────────────────────

class InvalidFieldError(MemDBError, AttributeError):
    """Field does not exist on the record type, or cannot be read/written."""

    def __init__(self, field_name: str, record_type: Any, reason: str = "does not exist"):
        self.field_name = field_name
        self.record_type = record_type
        type_name = getattr(record_type, "__name__", repr(record_type))
        super().__init__(f"Field '{field_name}' on '{type_name}' {reason}.")


class NullFieldValueError(MemDBError, ValueError):
    """An indexed field is None on the record being added or removed."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' is None")


class DuplicateKeyError(MemDBError, ValueError):
    """Unique index already holds a record with this field value."""

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Field '{field_name}' isn't unique: value {value!r} already exists"
        )


class RecordNotFoundError(MemDBError, LookupError):
    """Record is not present in the primary store."""
    pass


# ─── Index registry errors ──────────────────────────────────────────────────

class IndexAlreadyExistsError(MemDBError):
    """An index of this kind already exists on the field."""

    def __init__(self, kind: Any, field_name: str):
        self.kind = kind
        self.field_name = field_name
        super().__init__(f"Field '{field_name}' already has {kind.article} {kind.label}")


class IndexNotFoundError(MemDBError, LookupError):
    """No index of this kind exists on the field."""

    def __init__(self, kind: Any, field_name: str):
        self.kind = kind
        self.field_name = field_name
        super().__init__(f"Engine has no {kind.label} on the field '{field_name}'")


class PropertyNotIndexedError(IndexNotFoundError):
    """A select named a field that has no index of the queried kind."""
    pass


class NoIndicesOfKindError(MemDBError, LookupError):
    """A select ran while the engine holds zero indices of that kind."""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"Engine has no {kind.label} indices")


# ─── Lookup errors ──────────────────────────────────────────────────────────

class KeyNotFoundError(MemDBError, LookupError):
    """Lookup found no record for the key."""

    def __init__(self, field_name: str, value: Any, message: str = ""):
        self.field_name = field_name
        self.value = value
        super().__init__(
            message or f"Item with the key {value!r} doesn't exist in '{field_name}'"
        )


class RangeEmptyError(KeyNotFoundError):
    """Range lookup found no records between min and max."""

    def __init__(self, field_name: str, min_value: Any, max_value: Any):
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(
            field_name, (min_value, max_value),
            f"No items within the range {min_value!r}-{max_value!r} "
            f"were found in '{field_name}'",
        )
