"""
memdb Index Base
================
Common contract shared by the three index kinds.

Every index is bound to one field through a FieldAccessor resolved at
creation time. Subclasses implement add/remove plus their own lookup.

Kinds are a closed set (IndexKind); the engine keeps one registry per kind.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, List, Optional

from memdb.storage.accessor import FieldAccessor
from memdb.storage.table import same_record


class IndexKind(Enum):
    """Supported index kinds, in the order the engine updates them."""
    UNIQUE = "UNIQUE"
    NON_UNIQUE = "NON_UNIQUE"
    RANGE = "RANGE"

    @property
    def label(self) -> str:
        return {
            IndexKind.UNIQUE: "unique index",
            IndexKind.NON_UNIQUE: "index",
            IndexKind.RANGE: "range index",
        }[self]

    @property
    def article(self) -> str:
        return "an" if self is IndexKind.NON_UNIQUE else "a"


def kind_from_string(name: str) -> IndexKind:
    """Parse 'unique', 'non_unique', 'non-unique' or 'range'. Raises ValueError."""
    normalized = name.strip().upper().replace("-", "_")
    try:
        return IndexKind(normalized)
    except ValueError:
        raise ValueError(
            f"Unknown index kind '{name}'. "
            f"Available: {[k.value for k in IndexKind]}"
        ) from None


class Index(ABC):
    """Secondary structure keyed by one field's value."""

    kind: IndexKind

    def __init__(self, accessor: FieldAccessor):
        self._accessor = accessor

    @property
    def field_name(self) -> str:
        return self._accessor.field_name

    @property
    def accessor(self) -> FieldAccessor:
        return self._accessor

    def key_of(self, record: Any) -> Any:
        """Field value of record. Raises NullFieldValueError on None."""
        return self._accessor.get(record)

    @abstractmethod
    def add(self, record: Any) -> None:
        ...

    @abstractmethod
    def remove(self, record: Any) -> None:
        ...

    def can_add(self, record: Any, replacing: Optional[Any] = None) -> None:
        """
        Raise whatever add() would raise for record, without mutating.
        replacing: a resident record treated as already removed.
        """
        self.check_key(self.key_of(record), replacing)

    def check_key(self, key: Any, replacing: Optional[Any] = None) -> None:
        """
        Raise whatever storing key would raise, without mutating.
        Unhashable or incomparable keys raise TypeError.
        """
        hash(key)

    def backfill(self, records: Iterable[Any]) -> int:
        """Add every record, in order. Returns the count added."""
        count = 0
        for record in records:
            self.add(record)
            count += 1
        return count

    @abstractmethod
    def __len__(self) -> int:
        """Number of records resident in the index."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(field={self.field_name!r}, records={len(self)})"


def remove_from_bucket(bucket: List[Any], record: Any) -> bool:
    """Remove the first matching record from a bucket list."""
    for i, resident in enumerate(bucket):
        if same_record(resident, record):
            del bucket[i]
            return True
    return False
