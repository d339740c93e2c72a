"""
memdb Indexing Module
=====================
In-memory secondary indices over a single record field.

Components:
  - base: IndexKind and the shared Index contract
  - unique: one record per value
  - non_unique: insertion-ordered record list per value
  - range_index: ordered buckets with inclusive interval scans
"""
