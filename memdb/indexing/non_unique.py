"""
memdb Non-Unique Index
======================
Maps each field value to an insertion-ordered list of records.

Invariant: a key is present only while its list is non-empty.
Removal semantics:
  - key's list has one element → the key is dropped
  - otherwise → the first matching record is removed (no-op if none)
"""

from typing import Any, Dict, Iterator, List

from memdb.errors import KeyNotFoundError
from memdb.indexing.base import Index, IndexKind, remove_from_bucket


class NonUniqueIndex(Index):

    kind = IndexKind.NON_UNIQUE

    def __init__(self, accessor):
        super().__init__(accessor)
        self._buckets: Dict[Any, List[Any]] = self._new_mapping()
        self._count = 0

    def _new_mapping(self):
        return {}

    def add(self, record: Any) -> None:
        key = self.key_of(record)
        bucket = self._buckets.get(key)
        if bucket is None:
            self._buckets[key] = [record]
        else:
            bucket.append(record)
        self._count += 1

    def remove(self, record: Any) -> None:
        key = self.key_of(record)
        bucket = self._buckets.get(key)
        if bucket is None:
            return
        if len(bucket) == 1:
            del self._buckets[key]
            self._count -= 1
        elif remove_from_bucket(bucket, record):
            self._count -= 1

    def lookup(self, value: Any) -> List[Any]:
        """Records sharing this field value, in insertion order."""
        bucket = self._buckets.get(value)
        if not bucket:
            raise KeyNotFoundError(self.field_name, value)
        return list(bucket)

    def keys(self) -> Iterator[Any]:
        return iter(self._buckets.keys())

    def __contains__(self, value: Any) -> bool:
        return value in self._buckets

    def __len__(self) -> int:
        return self._count
