"""
memdb Record Table
==================
Primary store: an insertion-ordered collection of records.

  - add(): append, no uniqueness enforced at this layer
  - remove(): drop the first matching occurrence, silent if absent
  - contains(): membership test
  - all(): snapshot in insertion order (used for index backfill)

Matching:
  A stored record matches when it is the same object, or compares equal
  with ==. Identity is checked first, so plain classes match by identity
  and dataclasses by field values.

Concurrency: single owner, no locking.
"""

from typing import Any, Iterator, List


def same_record(a: Any, b: Any) -> bool:
    """Identity first, then the record type's equality."""
    return a is b or a == b


class RecordTable:
    """Insertion-ordered list of records owned by one engine."""

    def __init__(self):
        self._rows: List[Any] = []

    def add(self, record: Any) -> None:
        self._rows.append(record)

    def remove(self, record: Any) -> bool:
        """Remove the first matching record. Returns False if none matched."""
        for i, row in enumerate(self._rows):
            if same_record(row, record):
                del self._rows[i]
                return True
        return False

    def contains(self, record: Any) -> bool:
        return any(same_record(row, record) for row in self._rows)

    def all(self) -> List[Any]:
        """Snapshot of all records in insertion order."""
        return list(self._rows)

    def __contains__(self, record: Any) -> bool:
        return self.contains(record)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"RecordTable(rows={len(self._rows)})"
