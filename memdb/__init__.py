"""
memdb
=====
In-memory object store with unique, non-unique and range secondary indices.

Usage:
    from memdb import DatabaseEngine, IndexKind
"""

from memdb.engine import DatabaseEngine
from memdb.indexing.base import Index, IndexKind, kind_from_string
from memdb.storage.accessor import FieldAccessor, resolve_accessor
from memdb.errors import (
    MemDBError, InvalidFieldError, NullFieldValueError, DuplicateKeyError,
    RecordNotFoundError, IndexAlreadyExistsError, IndexNotFoundError,
    PropertyNotIndexedError, NoIndicesOfKindError, KeyNotFoundError,
    RangeEmptyError,
)

__version__ = "1.0.0"

__all__ = [
    "DatabaseEngine",
    "Index", "IndexKind", "kind_from_string",
    "FieldAccessor", "resolve_accessor",
    "MemDBError", "InvalidFieldError", "NullFieldValueError", "DuplicateKeyError",
    "RecordNotFoundError", "IndexAlreadyExistsError", "IndexNotFoundError",
    "PropertyNotIndexedError", "NoIndicesOfKindError", "KeyNotFoundError",
    "RangeEmptyError",
]
