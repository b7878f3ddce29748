"""Traversal helpers for scan results.

Used by tests and callers that want to inspect every record in a usage
context without hand-writing the members/elements/nested recursion.
"""

from __future__ import annotations

from collections.abc import Iterator

from mustache_usage._types import UsageContext, UsageRecord

# Step kinds in a record path
ROOT = "root"
MEMBERS = "members"
NESTED = "nested"
ELEMENTS = "elements"

RecordPath = tuple[tuple[str, str], ...]


def iter_records(context: UsageContext) -> Iterator[tuple[RecordPath, UsageRecord]]:
    """Yield ``(path, record)`` for every variable record, depth first.

    Each path step is ``(kind, name)`` where kind is one of ``root``,
    ``members``, ``nested`` or ``elements`` (elements steps use ``"."``
    as their name).
    """
    for name, record in context.items():
        if isinstance(record, dict):
            yield from _iter_record(((ROOT, name),), record)


def _iter_record(path: RecordPath, record: UsageRecord) -> Iterator[tuple[RecordPath, UsageRecord]]:
    yield path, record
    for kind in (MEMBERS, NESTED):
        children = record.get(kind)
        if children:
            for name, child in children.items():
                yield from _iter_record((*path, (kind, name)), child)
    elements = record.get(ELEMENTS)
    if elements is not None:
        yield from _iter_record((*path, (ELEMENTS, ".")), elements)


def format_path(path: RecordPath) -> str:
    """Render a record path, e.g. ``names.length``, ``names[]``, ``section>title``."""
    out = ""
    for kind, name in path:
        if kind == ROOT:
            out = name
        elif kind == MEMBERS:
            out = f"{out}.{name}"
        elif kind == ELEMENTS:
            out = f"{out}[]"
        else:
            out = f"{out}>{name}"
    return out
