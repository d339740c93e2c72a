"""
memdb Storage
=============
Primary record store and field accessor resolution.

Usage:
    from memdb.storage import RecordTable, resolve_accessor
"""

from memdb.storage.accessor import (
    FieldAccessor, AccessorRegistry, attribute_accessor, accessor_from_spec,
    resolve_accessor,
)
from memdb.storage.table import RecordTable, same_record

__all__ = [
    "FieldAccessor", "AccessorRegistry", "attribute_accessor", "accessor_from_spec",
    "resolve_accessor",
    "RecordTable", "same_record",
]
