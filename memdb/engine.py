"""
memdb Database Engine
=====================
Coordinates the primary store with every secondary index.

Owns:
  - RecordTable (primary store)
  - One registry per IndexKind: field name -> index
  - AccessorRegistry (explicit field accessors, else attribute lookup)

Mutation order:
  add_record:    store, then unique → non-unique → range indices
  remove_record: store, then every index, unconditionally

Insert atomicity (atomic_inserts):
  True (default): every index pre-validates the record (None field
    values, unique conflicts, unhashable or incomparable keys) before
    anything is mutated. A rejected record leaves the engine untouched.
    Updates pre-validate the new record as if the old one were already
    gone.
  False: the store and earlier indices keep a record that a later index
    rejects. Only the triggering error is raised and the engine is left
    in a degraded state.

Changing an indexed field in place is only safe through bulk_update_field,
which removes the record, mutates it, then re-adds it.

Concurrency: single owner. Callers sharing an engine across threads must
guard it with one lock covering the store and all indices together.
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from memdb.errors import (
    DuplicateKeyError, IndexAlreadyExistsError, IndexNotFoundError,
    InvalidFieldError, MemDBError, NoIndicesOfKindError, NullFieldValueError,
    PropertyNotIndexedError, RecordNotFoundError,
)
from memdb.indexing.base import Index, IndexKind, kind_from_string
from memdb.indexing.non_unique import NonUniqueIndex
from memdb.indexing.range_index import RangeIndex
from memdb.indexing.unique import UniqueIndex
from memdb.storage.accessor import AccessorRegistry, AccessorSpec
from memdb.storage.table import RecordTable

logger = logging.getLogger(__name__)

INDEX_CLASSES = {
    IndexKind.UNIQUE: UniqueIndex,
    IndexKind.NON_UNIQUE: NonUniqueIndex,
    IndexKind.RANGE: RangeIndex,
}

KindLike = Union[IndexKind, str]


def _as_kind(kind: KindLike) -> IndexKind:
    return kind if isinstance(kind, IndexKind) else kind_from_string(kind)


class DatabaseEngine:
    """
    In-memory record store with unique, non-unique and range indices.

    Usage:
        engine = DatabaseEngine(Customer)
        engine.add_record(Customer(id=1, age=10, name="Alice"))
        engine.create_index(IndexKind.UNIQUE, "id")
        engine.select_unique("id", 1)
    """

    def __init__(self, record_type: type, *,
                 accessors: Optional[Mapping[str, AccessorSpec]] = None,
                 atomic_inserts: bool = True):
        self.record_type = record_type
        self.atomic_inserts = atomic_inserts
        self._table = RecordTable()
        self._accessors = AccessorRegistry(record_type, accessors)
        self._indices: Dict[IndexKind, Dict[str, Index]] = {
            kind: {} for kind in IndexKind
        }

    # ─── Accessors ──────────────────────────────────────────────────

    def register_accessor(self, field_name: str, spec: AccessorSpec) -> None:
        """
        Register an explicit getter (or (getter, setter)) for a field name.
        Applies to indices created afterwards.
        """
        self._accessors.register(field_name, spec)

    # ─── Index lifecycle ────────────────────────────────────────────

    def create_index(self, kind: KindLike, field_name: str) -> Index:
        """
        Create, backfill and register an index.
        Backfill failure discards the index and re-raises.
        """
        kind = _as_kind(kind)
        registry = self._indices[kind]
        if field_name in registry:
            raise IndexAlreadyExistsError(kind, field_name)

        accessor = self._accessors.resolve(field_name)
        index = INDEX_CLASSES[kind](accessor)
        try:
            count = index.backfill(self._table.all())
        except (MemDBError, TypeError) as e:
            logger.info("Discarding %s on '%s': backfill failed (%s)",
                        kind.label, field_name, e)
            raise

        registry[field_name] = index
        logger.info("Created %s on '%s' (%d records)", kind.label, field_name, count)
        return index

    def delete_index(self, kind: KindLike, field_name: str) -> None:
        kind = _as_kind(kind)
        registry = self._indices[kind]
        if field_name not in registry:
            raise IndexNotFoundError(kind, field_name)
        del registry[field_name]
        logger.info("Deleted %s on '%s'", kind.label, field_name)

    def create_unique_index(self, field_name: str) -> Index:
        return self.create_index(IndexKind.UNIQUE, field_name)

    def create_non_unique_index(self, field_name: str) -> Index:
        return self.create_index(IndexKind.NON_UNIQUE, field_name)

    def create_range_index(self, field_name: str) -> Index:
        return self.create_index(IndexKind.RANGE, field_name)

    def delete_unique_index(self, field_name: str) -> None:
        self.delete_index(IndexKind.UNIQUE, field_name)

    def delete_non_unique_index(self, field_name: str) -> None:
        self.delete_index(IndexKind.NON_UNIQUE, field_name)

    def delete_range_index(self, field_name: str) -> None:
        self.delete_index(IndexKind.RANGE, field_name)

    def has_index(self, kind: KindLike, field_name: str) -> bool:
        return field_name in self._indices[_as_kind(kind)]

    def get_index(self, kind: KindLike, field_name: str) -> Index:
        kind = _as_kind(kind)
        index = self._indices[kind].get(field_name)
        if index is None:
            raise IndexNotFoundError(kind, field_name)
        return index

    def list_indexes(self) -> List[Tuple[IndexKind, str]]:
        """(kind, field) pairs in update order, creation order within a kind."""
        return [(kind, name) for kind, registry in self._indices.items()
                for name in registry]

    def _all_indices(self) -> Iterator[Index]:
        for registry in self._indices.values():
            yield from registry.values()

    # ─── Record mutation ────────────────────────────────────────────

    def _validate(self, record: Any, replacing: Optional[Any] = None) -> None:
        for index in self._all_indices():
            index.can_add(record, replacing)

    def add_record(self, record: Any) -> None:
        if self.atomic_inserts:
            self._validate(record)

        self._table.add(record)
        for index in self._all_indices():
            try:
                index.add(record)
            except (MemDBError, TypeError) as e:
                logger.warning(
                    "Record rejected by %s on '%s' after partial insert: %s",
                    index.kind.label, index.field_name, e,
                )
                raise
        logger.debug("Added record %r", record)

    def remove_record(self, record: Any) -> None:
        """
        Remove from the store and every index.
        The store ignores a record it does not hold, but indices still
        remove by key: a stranger sharing a resident's field values
        evicts that resident's index entries.
        """
        self._table.remove(record)
        for index in self._all_indices():
            index.remove(record)
        logger.debug("Removed record %r", record)

    def _replace(self, old_record: Any, new_record: Any) -> None:
        if self.atomic_inserts:
            self._validate(new_record, replacing=old_record)
        self.remove_record(old_record)
        self.add_record(new_record)

    def update_by_item(self, old_record: Any, new_record: Any) -> None:
        """Replace old_record with new_record. Raises RecordNotFoundError."""
        if old_record not in self._table:
            raise RecordNotFoundError("Old record was not found in the database")
        self._replace(old_record, new_record)

    def update_by_key(self, field_name: str, key_value: Any, new_record: Any) -> None:
        """Replace the record found through the unique index on field_name."""
        old_record = self.select_unique(field_name, key_value)
        self._replace(old_record, new_record)

    def bulk_update_field(self, field_name: str, match_value: Any, new_value: Any) -> int:
        """
        Set field_name to new_value on every record the non-unique index
        maps to match_value. Each record is removed, mutated, then re-added.
        Returns the number of records updated.
        """
        records = self.select_many(field_name, match_value)
        accessor = self._indices[IndexKind.NON_UNIQUE][field_name].accessor
        if accessor.setter is None:
            raise InvalidFieldError(field_name, self.record_type, "is not writable")
        if self.atomic_inserts:
            self._check_bulk_update(field_name, records, new_value)

        for record in records:
            self.remove_record(record)
            accessor.set(record, new_value)
            self.add_record(record)

        logger.info("Bulk-updated %d record(s): %s %r -> %r",
                    len(records), field_name, match_value, new_value)
        return len(records)

    def _check_bulk_update(self, field_name: str, records: List[Any], new_value: Any) -> None:
        if new_value is None:
            raise NullFieldValueError(field_name)
        for index in self._all_indices():
            if index.field_name != field_name:
                continue
            if index.kind is IndexKind.UNIQUE and len(records) > 1:
                raise DuplicateKeyError(field_name, new_value)
            index.check_key(new_value, replacing=records[0])

    # ─── Selects ────────────────────────────────────────────────────

    def _find_index(self, kind: IndexKind, field_name: str) -> Index:
        registry = self._indices[kind]
        if not registry:
            raise NoIndicesOfKindError(kind)
        index = registry.get(field_name)
        if index is None:
            raise PropertyNotIndexedError(kind, field_name)
        return index

    def select_unique(self, field_name: str, value: Any) -> Any:
        return self._find_index(IndexKind.UNIQUE, field_name).lookup(value)

    def select_many(self, field_name: str, value: Any) -> List[Any]:
        return self._find_index(IndexKind.NON_UNIQUE, field_name).lookup(value)

    def select_range(self, field_name: str, min_value: Any, max_value: Any) -> List[Any]:
        return self._find_index(IndexKind.RANGE, field_name).lookup_range(min_value, max_value)

    # ─── Introspection ──────────────────────────────────────────────

    def records(self) -> List[Any]:
        """All stored records in insertion order."""
        return self._table.all()

    def __contains__(self, record: Any) -> bool:
        return record in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        type_name = getattr(self.record_type, "__name__", repr(self.record_type))
        return (f"DatabaseEngine({type_name}, records={len(self._table)}, "
                f"indexes={len(self.list_indexes())})")
