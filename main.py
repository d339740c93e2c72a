"""
memdb — In-Memory Indexed Object Store
======================================
Demo driver: loads sample customers and walks every engine operation.

Usage:
    python main.py [options]

Options:
    --help      Show help
    --verbose   Log index lifecycle and record mutations
    --quiet     Suppress demo output
"""

import logging
import sys
from dataclasses import dataclass

from memdb import DatabaseEngine, MemDBError


@dataclass(eq=False)
class Customer:
    id: int
    age: int
    name: str

    def __str__(self):
        return f"#{self.id} {self.name} ({self.age})"


SAMPLE_CUSTOMERS = [
    (1, 10, "Alice"), (2, 20, "Bob"), (3, 30, "Charlie"), (4, 30, "David"),
    (5, 30, "Emma"), (6, 30, "Frank"), (7, 25, "Grace"), (8, 35, "Henry"),
    (9, 45, "a"), (10, 55, "a"), (11, 18, "a"), (12, 28, "a"),
    (13, 38, "Mia"), (14, 48, "Nathan"), (15, 58, "Olivia"), (16, 21, "Peter"),
    (17, 31, "Queenie"), (18, 41, "Ryan"), (19, 51, "Sara"), (20, 61, "Tom"),
]


def print_help():
    print("""
memdb — In-Memory Indexed Object Store

Usage:
    python main.py [--verbose | --quiet]

Options:
    --help      Show this help
    --verbose   Log index lifecycle and record mutations
    --quiet     Suppress demo output
""")


def build_engine() -> DatabaseEngine:
    """Engine holding the sample customers, no indices yet."""
    engine = DatabaseEngine(Customer)
    for cid, age, name in SAMPLE_CUSTOMERS:
        engine.add_record(Customer(cid, age, name))
    return engine


def _attempt(out, label, fn, *args):
    """Run fn, reporting the memdb error instead of stopping the demo."""
    try:
        result = fn(*args)
    except MemDBError as e:
        out(f"  {label}: {type(e).__name__}: {e}")
        return None
    out(f"  {label}: ok")
    return result


def _show(out, label, records):
    out(f"  {label}: " + ", ".join(str(r) for r in records))


def run_demo(out=print) -> DatabaseEngine:
    """
    Exercise every engine operation on the sample data.
    Returns the engine in its final state.
    """
    engine = build_engine()
    out(f"Loaded {len(engine)} customers")

    out("\nCreate indices:")
    engine.create_unique_index("id")
    _attempt(out, "unique index on age", engine.create_unique_index, "age")
    _attempt(out, "unique index on name", engine.create_unique_index, "name")
    for field in ("id", "age", "name"):
        engine.create_range_index(field)
        engine.create_non_unique_index(field)
    _attempt(out, "index on 'missing'", engine.create_non_unique_index, "missing")

    out("\nDelete indices:")
    engine.delete_unique_index("id")
    engine.delete_non_unique_index("id")
    engine.delete_range_index("id")
    _attempt(out, "delete index on 'aaa'", engine.delete_non_unique_index, "aaa")

    out("\nRecreate indices on id:")
    engine.create_unique_index("id")
    engine.create_range_index("id")
    engine.create_non_unique_index("id")
    _attempt(out, "second unique index on id", engine.create_unique_index, "id")
    out("  registered: " + ", ".join(f"{k.value}:{f}" for k, f in engine.list_indexes()))

    out("\nSelect:")
    out(f"  unique id=3: {engine.select_unique('id', 3)}")
    _show(out, "age=30", engine.select_many("age", 30))
    _show(out, "id in [-2, 7]", engine.select_range("id", -2, 7))
    _attempt(out, "unique id=99", engine.select_unique, "id", 99)

    out("\nRemove:")
    uma, victor = Customer(21, 22, "Uma"), Customer(22, 32, "Victor")
    engine.add_record(uma)
    engine.add_record(victor)
    engine.remove_record(uma)
    engine.remove_record(victor)
    out(f"  {len(engine)} customers after add/remove of 2")

    out("\nUpdate:")
    engine.update_by_key("id", 3, Customer(55, 20, "abc"))
    out(f"  by key id=3: {engine.select_unique('id', 55)}")
    alice = engine.select_unique("id", 1)
    engine.update_by_item(alice, Customer(42, 22, "cba"))
    out(f"  by item Alice: {engine.select_unique('id', 42)}")
    count = engine.bulk_update_field("age", 30, 333)
    _show(out, f"bulk age 30 -> 333 ({count})", engine.select_many("age", 333))

    return engine


def main():
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        print_help()
        return

    level = logging.DEBUG if "--verbose" in args else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    unknown = [a for a in args if a not in ("--verbose", "--quiet")]
    if unknown:
        print(f"Error: unknown option(s): {' '.join(unknown)}", file=sys.stderr)
        print_help()
        sys.exit(1)

    out = (lambda *_: None) if "--quiet" in args else print
    run_demo(out)


if __name__ == "__main__":
    main()
