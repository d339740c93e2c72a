"""
memdb Range Index
=================
Ordered variant of the non-unique index supporting interval scans.

Backed by sortedcontainers.SortedDict, keyed ascending by the field's
natural ordering. Buckets keep insertion order within a key.

Range scan (lookup_range(min, max)):
  - ascending over keys; a key enters once it is >= min
  - the scan stops after the bucket of the first key >= max
  - result is the union of buckets for keys in [min, max]
  - min > max yields nothing

Keys must be mutually comparable; mixing e.g. int and str raises
TypeError from the ordered structure.
"""

from typing import Any, List, Optional

from sortedcontainers import SortedDict

from memdb.errors import RangeEmptyError
from memdb.indexing.base import IndexKind
from memdb.indexing.non_unique import NonUniqueIndex


class RangeIndex(NonUniqueIndex):

    kind = IndexKind.RANGE

    def _new_mapping(self):
        return SortedDict()

    def lookup_range(self, min_value: Any, max_value: Any) -> List[Any]:
        """
        Records whose field value lies in the closed interval [min, max],
        ascending by value. Raises RangeEmptyError if nothing matches.
        """
        results: List[Any] = []
        if not min_value > max_value:
            for key in self._buckets.irange(min_value, max_value, inclusive=(True, True)):
                results.extend(self._buckets[key])
        if not results:
            raise RangeEmptyError(self.field_name, min_value, max_value)
        return results

    def check_key(self, key: Any, replacing: Optional[Any] = None) -> None:
        super().check_key(key, replacing)
        if self._buckets:
            # Comparing against resident keys surfaces mixed types
            self._buckets.bisect_left(key)
