"""
memdb Unique Index
==================
Maps each field value to exactly one record.

Invariant: no two resident records share a field value. An add whose
value is already a key raises DuplicateKeyError and leaves the index
unchanged. Backfilling over duplicate values therefore fails, which
aborts index creation in the engine.
"""

from typing import Any, Dict, Iterator, Optional

from memdb.errors import DuplicateKeyError, KeyNotFoundError
from memdb.indexing.base import Index, IndexKind
from memdb.storage.table import same_record


class UniqueIndex(Index):

    kind = IndexKind.UNIQUE

    def __init__(self, accessor):
        super().__init__(accessor)
        self._map: Dict[Any, Any] = {}

    def add(self, record: Any) -> None:
        key = self.key_of(record)
        if key in self._map:
            raise DuplicateKeyError(self.field_name, key)
        self._map[key] = record

    def remove(self, record: Any) -> None:
        key = self.key_of(record)
        self._map.pop(key, None)

    def check_key(self, key: Any, replacing: Optional[Any] = None) -> None:
        if key not in self._map:
            return
        if replacing is not None and same_record(self._map[key], replacing):
            return
        raise DuplicateKeyError(self.field_name, key)

    def lookup(self, value: Any) -> Any:
        """Return the record with this field value. Raises KeyNotFoundError."""
        try:
            return self._map[value]
        except KeyError:
            raise KeyNotFoundError(self.field_name, value) from None

    def keys(self) -> Iterator[Any]:
        return iter(self._map.keys())

    def __contains__(self, value: Any) -> bool:
        return value in self._map

    def __len__(self) -> int:
        return len(self._map)
